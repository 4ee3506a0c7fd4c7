"""
AMM pool data from ``amm_info`` responses.

Parses the pool shape returned by the ledger's ``amm_info`` command and derives
the reserve orientation and native-currency prices the pricing engine needs.
Fetching the response is the caller's concern.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Optional

from sequential_arbitrage.constants import (
    AMM_FEE_DENOMINATOR,
    DEFAULT_AMM_TRADING_FEE_UNITS,
)
from sequential_arbitrage.ledger.amounts import decode_amount
from sequential_arbitrage.models import Asset, PoolReserves, pair_key
from sequential_arbitrage.pricing import swap_out
from sequential_arbitrage.utils import is_finite_number, is_positive_number

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AmmPool:
    """
    A two-asset constant-product pool.

    Attributes:
        asset_a: First pool asset (``amm.amount``)
        reserve_a: Reserve of asset_a
        asset_b: Second pool asset (``amm.amount2``)
        reserve_b: Reserve of asset_b
        trading_fee_units: Fee in 1/100,000 units (1000 = 1%)
    """

    asset_a: Asset
    reserve_a: float
    asset_b: Asset
    reserve_b: float
    trading_fee_units: int = DEFAULT_AMM_TRADING_FEE_UNITS

    @property
    def pair_key(self) -> str:
        return pair_key(self.asset_a, self.asset_b)

    @property
    def fee_fraction(self) -> float:
        return self.trading_fee_units / AMM_FEE_DENOMINATOR

    def reserves_for(self, sent: Asset, received: Asset) -> Optional[PoolReserves]:
        """
        Orient reserves for reversing a swap that sent ``sent`` for ``received``.

        Returns:
            PoolReserves(pool1=reserve of sent, pool2=reserve of received),
            or None when the pool does not hold exactly these two assets
        """
        if sent == self.asset_a and received == self.asset_b:
            return PoolReserves(pool1=self.reserve_a, pool2=self.reserve_b)
        if sent == self.asset_b and received == self.asset_a:
            return PoolReserves(pool1=self.reserve_b, pool2=self.reserve_a)
        return None


def parse_amm_info(result: Any) -> Optional[AmmPool]:
    """
    Build an AmmPool from an ``amm_info`` result.

    Args:
        result: The ``result`` object of an ``amm_info`` response

    Returns:
        AmmPool, or None when the pool is missing or its reserves are unusable
    """
    if not isinstance(result, dict) or not isinstance(result.get("amm"), dict):
        return None
    amm = result["amm"]

    amount_a = decode_amount(amm.get("amount"))
    amount_b = decode_amount(amm.get("amount2"))
    if amount_a is None or amount_b is None:
        return None
    if not (is_positive_number(amount_a.value) and is_positive_number(amount_b.value)):
        logger.debug("Rejecting AMM pool with reserves %s / %s", amount_a, amount_b)
        return None

    fee_units = amm.get("trading_fee")
    if not is_finite_number(fee_units) or not 0 <= fee_units < AMM_FEE_DENOMINATOR:
        fee_units = DEFAULT_AMM_TRADING_FEE_UNITS

    return AmmPool(
        asset_a=Asset.of(amount_a.currency, amount_a.issuer),
        reserve_a=amount_a.value,
        asset_b=Asset.of(amount_b.currency, amount_b.issuer),
        reserve_b=amount_b.value,
        trading_fee_units=int(fee_units),
    )


def xrp_price_from_pool(pool: AmmPool) -> Optional[float]:
    """
    Native-currency price of the issued asset in an XRP pool.

    Quotes a 1 XRP swap into the pool and inverts the tokens received.

    Returns:
        XRP per token, or None for pools that do not pair with XRP
    """
    if pool.asset_a.is_native and not pool.asset_b.is_native:
        reserve_xrp, reserve_token = pool.reserve_a, pool.reserve_b
    elif pool.asset_b.is_native and not pool.asset_a.is_native:
        reserve_xrp, reserve_token = pool.reserve_b, pool.reserve_a
    else:
        return None

    try:
        tokens_received = swap_out(1.0, reserve_xrp, reserve_token, pool.fee_fraction)
    except ValueError:
        return None
    if not is_positive_number(tokens_received):
        return None
    price = 1 / tokens_received
    return price if is_positive_number(price) else None


def token_asset(pool: AmmPool) -> Optional[Asset]:
    """The issued side of an XRP pool."""
    if pool.asset_a.is_native and not pool.asset_b.is_native:
        return pool.asset_b
    if pool.asset_b.is_native and not pool.asset_a.is_native:
        return pool.asset_a
    return None


def build_price_table(pools: Iterable[AmmPool]) -> Dict[str, float]:
    """
    Derive a "<currency>-<issuer>" -> XRP price table from XRP pools.

    Pools that do not involve XRP are skipped.
    """
    prices: Dict[str, float] = {}
    for pool in pools:
        asset = token_asset(pool)
        price = xrp_price_from_pool(pool)
        if asset is not None and price is not None:
            prices[asset.price_key] = price
    return prices


def index_pools(pools: Iterable[AmmPool]) -> Mapping[str, AmmPool]:
    """Key pools by pair key; a later pool for the same pair wins."""
    return {pool.pair_key: pool for pool in pools}
