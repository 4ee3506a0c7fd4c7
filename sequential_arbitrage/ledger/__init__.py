"""
XRP Ledger data adapters: amount decoding, swap extraction from account
history records, and AMM pool parsing.
"""

from sequential_arbitrage.ledger.amounts import (
    Amount,
    IssuedAmount,
    NativeAmount,
    decode_amount,
)
from sequential_arbitrage.ledger.amm import (
    AmmPool,
    build_price_table,
    parse_amm_info,
)
from sequential_arbitrage.ledger.normalizer import (
    extract_swap,
    is_token_swap_transaction,
    normalize_records,
)

__all__ = [
    "Amount",
    "IssuedAmount",
    "NativeAmount",
    "decode_amount",
    "AmmPool",
    "build_price_table",
    "parse_amm_info",
    "extract_swap",
    "is_token_swap_transaction",
    "normalize_records",
]
