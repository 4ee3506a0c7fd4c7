"""
End-to-end analysis of one account history.

normalize -> group -> quote -> chain search, with AMM pool reserves taking
precedence over the price table for any pair that has a pool.
"""

import logging
from typing import Any, Dict, Iterable, Mapping, Optional

from sequential_arbitrage.chains import find_arbitrage_chains
from sequential_arbitrage.config import AnalysisConfig
from sequential_arbitrage.grouping import group_by_pair
from sequential_arbitrage.ledger.amm import AmmPool, build_price_table, index_pools
from sequential_arbitrage.ledger.normalizer import normalize_records
from sequential_arbitrage.models import AnalysisResult
from sequential_arbitrage.pricing import build_reverse_quotes

logger = logging.getLogger(__name__)


def merge_price_tables(
    pools: Iterable[AmmPool], prices: Optional[Mapping[str, float]] = None
) -> Dict[str, float]:
    """AMM-derived native prices, overridden by any explicit prices."""
    merged = build_price_table(pools)
    if prices:
        merged.update(prices)
    return merged


def analyze_account(
    records: Iterable[Any],
    config: Optional[AnalysisConfig] = None,
    pools: Optional[Iterable[AmmPool]] = None,
    prices: Optional[Mapping[str, float]] = None,
) -> AnalysisResult:
    """
    Run the full analysis over raw ledger records.

    Args:
        records: Raw ``{tx, meta}`` records of one account
        config: Analysis settings (defaults when omitted)
        pools: Parsed AMM pools, used for reserves and derived prices
        prices: "<currency>-<issuer>" -> native price, overrides pool prices

    Returns:
        AnalysisResult with swaps, groups, quotes and ranked chains
    """
    config = config or AnalysisConfig()
    pools = list(pools or [])

    swaps = normalize_records(records)
    groups = group_by_pair(swaps)

    price_table = merge_price_tables(pools, prices)
    quotes = build_reverse_quotes(
        groups,
        pools=index_pools(pools),
        prices=price_table,
        trading_fee=config.trading_fee,
    )

    chains = find_arbitrage_chains(
        groups,
        quotes,
        hidden_pairs=config.hidden_pair_set,
        threshold=config.chain_profit_threshold,
        max_chain_length=config.max_chain_length,
        max_results=config.max_chains,
    )

    logger.info(
        "Analysis complete: %d swaps, %d pairs, %d chains",
        len(swaps),
        len(groups),
        len(chains),
    )
    return AnalysisResult(swaps=swaps, groups=groups, quotes=quotes, chains=chains)
