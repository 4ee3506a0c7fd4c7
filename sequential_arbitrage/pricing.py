"""
Reverse-quote pricing engine.

Estimates what unwinding a swap (or an open position) would return right now,
either against live AMM pool reserves or against an external price table
denominated in the native currency. Unpriceable or numerically degenerate
inputs produce None, never NaN or Infinity.
"""

import logging
import math
from typing import Dict, Iterable, Mapping, Optional

from sequential_arbitrage.constants import DEFAULT_CONFIG
from sequential_arbitrage.exceptions import ValidationError
from sequential_arbitrage.grouping import latest_position
from sequential_arbitrage.models import (
    Asset,
    PoolReserves,
    Position,
    ReverseQuote,
    Swap,
    SwapGroup,
)
from sequential_arbitrage.utils import calculate_percentage, is_positive_number

logger = logging.getLogger(__name__)

DEFAULT_TRADING_FEE = DEFAULT_CONFIG["TRADING_FEE"]


def validate_trading_fee(trading_fee: float) -> float:
    """
    Check that a trading fee is a fraction in [0, 1).

    Raises:
        ValidationError: If the fee is not a finite fraction
    """
    if (
        isinstance(trading_fee, bool)
        or not isinstance(trading_fee, (int, float))
        or not math.isfinite(trading_fee)
        or not 0 <= trading_fee < 1
    ):
        raise ValidationError(
            f"Trading fee must be a fraction in [0, 1): {trading_fee}",
            field="trading_fee",
            value=trading_fee,
        )
    return float(trading_fee)


def swap_out(amount_in: float, reserve_in: float, reserve_out: float, fee: float) -> float:
    """
    Calculate output amount of a constant-product swap.

    Works in floats rather than Decimal; callers reject non-finite results.

    Formula (with fee embedded):
        amountInWithFee = amountIn * (1 - fee)
        amountOut = (amountInWithFee * reserveOut) / (reserveIn + amountInWithFee)

    Args:
        amount_in: Input amount
        reserve_in: Pool reserve of the input asset
        reserve_out: Pool reserve of the output asset
        fee: Fee as a fraction (e.g., 0.01 for 1%)

    Returns:
        Output amount

    Raises:
        ValueError: If inputs are invalid (negative, zero reserves, etc.)
    """
    if amount_in <= 0:
        raise ValueError(f"amount_in must be positive: {amount_in}")
    if reserve_in <= 0 or reserve_out <= 0:
        raise ValueError(
            f"Reserves must be positive: in={reserve_in}, out={reserve_out}"
        )
    if fee < 0 or fee >= 1:
        raise ValueError(f"Fee must be in [0, 1): {fee}")

    amount_in_with_fee = amount_in * (1 - fee)
    numerator = amount_in_with_fee * reserve_out
    denominator = reserve_in + amount_in_with_fee
    return numerator / denominator


def _build_quote(swap: Swap, reverse_amount: float) -> Optional[ReverseQuote]:
    """Assemble a quote, or None when any figure is degenerate."""
    base_amount = swap.v1
    if not math.isfinite(reverse_amount) or not is_positive_number(base_amount):
        return None

    profit_loss = reverse_amount - base_amount
    profit_percent = calculate_percentage(profit_loss, base_amount)
    if profit_percent is None or not math.isfinite(profit_loss):
        return None

    return ReverseQuote(
        reverse_amount=reverse_amount,
        original_amount=base_amount,
        original_currency=swap.c1,
        original_issuer=swap.sent_asset.issuer,
        received_amount=swap.v2,
        received_currency=swap.c2,
        received_issuer=swap.received_asset.issuer,
        profit_loss=profit_loss,
        profit_percent=profit_percent,
        is_profit=profit_loss > 0,
    )


def quote_from_pool(
    swap: Swap,
    reserves: Optional[PoolReserves],
    trading_fee: float = DEFAULT_TRADING_FEE,
) -> Optional[ReverseQuote]:
    """
    Price the reversal of a swap against live AMM reserves.

    Selling ``v2`` back into the pool yields
    ``v2*(1-fee) * pool1 / (pool2 + v2*(1-fee))`` of the original asset.

    Args:
        swap: Swap or position view to reverse
        reserves: Pool reserves oriented for the reversal
        trading_fee: Pool fee as a fraction

    Returns:
        ReverseQuote, or None when reserves or amounts are unusable
    """
    fee = validate_trading_fee(trading_fee)
    if reserves is None:
        return None
    if not (is_positive_number(reserves.pool1) and is_positive_number(reserves.pool2)):
        logger.debug("Unusable pool reserves for %s: %s", swap.pair_key, reserves)
        return None
    if not (is_positive_number(swap.v1) and is_positive_number(swap.v2)):
        return None

    reverse_amount = swap_out(swap.v2, reserves.pool2, reserves.pool1, fee)
    return _build_quote(swap, reverse_amount)


def _asset_price(asset: Asset, prices: Mapping[str, float]) -> Optional[float]:
    """Native-unit price of an asset; the native currency is always 1."""
    if asset.is_native:
        return 1.0
    price = prices.get(asset.price_key)
    return price if is_positive_number(price) else None


def quote_from_prices(
    swap: Swap,
    prices: Optional[Mapping[str, float]],
    trading_fee: float = DEFAULT_TRADING_FEE,
) -> Optional[ReverseQuote]:
    """
    Price the reversal of a swap against an external price table.

    Both legs are valued in the native currency, the fee is taken from the
    received leg, and the result is converted back into the sent asset.

    Args:
        swap: Swap or position view to reverse
        prices: "<currency>-<issuer>" -> price in native units
        trading_fee: Fee as a fraction

    Returns:
        ReverseQuote, or None when a required price is missing or invalid
    """
    fee = validate_trading_fee(trading_fee)
    if prices is None:
        return None

    price1 = _asset_price(swap.sent_asset, prices)
    price2 = _asset_price(swap.received_asset, prices)
    if price1 is None or price2 is None:
        return None
    if not (is_positive_number(swap.v1) and is_positive_number(swap.v2)):
        return None

    native_value_received = swap.v2 * price2
    native_after_fee = native_value_received * (1 - fee)
    reverse_amount = native_after_fee / price1
    return _build_quote(swap, reverse_amount)


def quote_position(
    position: Optional[Position],
    reserves: Optional[PoolReserves] = None,
    prices: Optional[Mapping[str, float]] = None,
    trading_fee: float = DEFAULT_TRADING_FEE,
) -> Optional[ReverseQuote]:
    """
    Quote the reversal of an open position.

    Pool reserves take precedence when both sources are supplied.
    """
    if position is None:
        return None
    swap = position.as_swap()
    if reserves is not None:
        return quote_from_pool(swap, reserves, trading_fee)
    return quote_from_prices(swap, prices, trading_fee)


def build_reverse_quotes(
    groups: Iterable[SwapGroup],
    pools: Optional[Mapping[str, object]] = None,
    prices: Optional[Mapping[str, float]] = None,
    trading_fee: float = DEFAULT_TRADING_FEE,
) -> Dict[str, Optional[ReverseQuote]]:
    """
    Quote the open position of every group.

    Args:
        groups: Swap groups to price
        pools: pair key -> AMM pool exposing ``reserves_for(sent, received)``
        prices: "<currency>-<issuer>" -> price in native units
        trading_fee: Fee as a fraction, applied to every quote

    Returns:
        pair key -> quote; a key maps to None when the pair is unpriceable
    """
    validate_trading_fee(trading_fee)
    pools = pools or {}
    quotes: Dict[str, Optional[ReverseQuote]] = {}

    for group in groups:
        position = latest_position(group)
        reserves = None
        pool = pools.get(group.pair_key)
        if pool is not None and position is not None:
            reserves = pool.reserves_for(position.sent_asset, position.received_asset)
        quotes[group.pair_key] = quote_position(position, reserves, prices, trading_fee)

    priced = sum(1 for quote in quotes.values() if quote is not None)
    logger.info("Priced %d of %d pairs", priced, len(quotes))
    return quotes
