"""
Sequential Swap Reversal Analyzer.

Reconstructs the cross-asset swaps of an XRP Ledger account, groups them by
asset pair, prices what unwinding each open position would return now, and
searches for chains of profitable reversals that could be executed in sequence.
"""

PROJECT_NAME = "Sequential-Swap-Arbitrage"

from sequential_arbitrage.version import __version__ as VERSION

# Export main components for easier imports
from sequential_arbitrage.chains import find_arbitrage_chains
from sequential_arbitrage.config import AnalysisConfig, load_config
from sequential_arbitrage.grouping import (
    group_by_pair,
    latest_position,
    realized_profits_by_token,
    summarize_pair,
)
from sequential_arbitrage.models import (
    AnalysisResult,
    ArbitrageChain,
    ArbitrageChainLink,
    Asset,
    Position,
    ReverseQuote,
    Swap,
    SwapGroup,
    pair_key,
)
from sequential_arbitrage.pipeline import analyze_account
from sequential_arbitrage.pricing import (
    build_reverse_quotes,
    quote_from_pool,
    quote_from_prices,
)

__all__ = [
    "PROJECT_NAME",
    "VERSION",
    "AnalysisConfig",
    "load_config",
    "analyze_account",
    "find_arbitrage_chains",
    "group_by_pair",
    "latest_position",
    "realized_profits_by_token",
    "summarize_pair",
    "build_reverse_quotes",
    "quote_from_pool",
    "quote_from_prices",
    "AnalysisResult",
    "ArbitrageChain",
    "ArbitrageChainLink",
    "Asset",
    "Position",
    "ReverseQuote",
    "Swap",
    "SwapGroup",
    "pair_key",
]
