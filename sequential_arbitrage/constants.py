"""
Constants for the sequential arbitrage analyzer.

Centralizes ledger-specific magic numbers and analysis defaults so that
no module hard-codes its own copy.
"""

# Native ledger currency
NATIVE_CURRENCY = "XRP"

# Issuer placeholder used in pair keys for the native currency
NATIVE_ISSUER_LABEL = "XRP"

# Drops per XRP
DROPS_PER_XRP = 1_000_000

# Seconds between the Unix epoch and the ledger epoch (2000-01-01T00:00:00Z)
LEDGER_EPOCH_OFFSET = 946_684_800

# amm_info reports trading_fee in units of 1/100,000
AMM_FEE_DENOMINATOR = 100_000
DEFAULT_AMM_TRADING_FEE_UNITS = 1000

# Only payments can deliver a cross-asset exchange
SWAP_TRANSACTION_TYPE = "Payment"

# Analysis defaults
DEFAULT_CONFIG = {
    "TRADING_FEE": 0.01,
    "CHAIN_PROFIT_THRESHOLD": 0.5,
    "MAX_CHAIN_LENGTH": 4,
    "MAX_CHAINS": 10,
    "SERIALIZED_SWAPS_PER_GROUP": 100,
}

# Balances at or below this magnitude are treated as settled
DUST_THRESHOLD = 0.000001

# Decimal places kept when serializing swap amounts
AMOUNT_PRECISION = 6
