"""
Swap normalization for raw ledger transaction records.

Turns ``{tx, meta}`` records from an account history into canonical ``Swap``
facts. Malformed or non-swap records are dropped, never raised on.
"""

import logging
import math
from collections import Counter
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sequential_arbitrage.constants import SWAP_TRANSACTION_TYPE
from sequential_arbitrage.ledger.amounts import Amount, NativeAmount, decode_amount
from sequential_arbitrage.models import Asset, Swap
from sequential_arbitrage.utils import iso_to_timestamp, ledger_time_to_iso

logger = logging.getLogger(__name__)


def _first_present(source: Dict, key: str, fallback: Any) -> Any:
    """Value under key when present and not None, otherwise the fallback."""
    value = source.get(key)
    return fallback if value is None else value


def _split_record(record: Any) -> Tuple[Optional[Dict], Optional[Dict]]:
    """Return (tx, meta) from a record, tolerating the metaData spelling."""
    if not isinstance(record, dict):
        return None, None
    tx = record.get("tx")
    meta = _first_present(record, "meta", record.get("metaData"))
    if not isinstance(tx, dict) or not isinstance(meta, dict):
        return None, None
    return tx, meta


def _payment_sides(tx: Dict, meta: Dict) -> Tuple[Optional[Amount], Optional[Amount]]:
    """Decode the (sent, delivered) amounts of a payment."""
    send_raw = _first_present(tx, "SendMax", tx.get("Amount"))
    delivered_raw = _first_present(meta, "DeliveredAmount", tx.get("Amount"))
    return decode_amount(send_raw), decode_amount(delivered_raw)


def _transaction_type(record: Any) -> str:
    tx = record.get("tx") if isinstance(record, dict) else None
    if not isinstance(tx, dict):
        return "Unknown"
    return tx.get("TransactionType") or "Unknown"


def is_token_swap_transaction(record: Any) -> bool:
    """
    Check whether a record can carry a cross-asset payment.

    Args:
        record: Raw ledger record with ``tx`` and ``meta``/``metaData``

    Returns:
        True for payments with a decodable send side and delivered side
    """
    tx, meta = _split_record(record)
    if tx is None:
        return False
    if tx.get("TransactionType") != SWAP_TRANSACTION_TYPE:
        return False
    sent, delivered = _payment_sides(tx, meta)
    return sent is not None and delivered is not None


def extract_swap(record: Any) -> Optional[Swap]:
    """
    Normalize one raw record into a Swap.

    Args:
        record: Raw ledger record with ``tx`` and ``meta``/``metaData``

    Returns:
        The swap, or None when the record is not a genuine cross-asset
        exchange with positive, finite amounts and a ledger timestamp
    """
    if not is_token_swap_transaction(record):
        return None

    tx, meta = _split_record(record)
    sent, delivered = _payment_sides(tx, meta)

    # Native amounts carry no issuer; fall back to the accounts involved
    i1 = tx.get("Account") if isinstance(sent, NativeAmount) else sent.issuer
    if isinstance(delivered, NativeAmount):
        i2 = tx.get("Destination")
    else:
        i2 = delivered.issuer

    v1, v2 = sent.value, delivered.value
    if not (math.isfinite(v1) and math.isfinite(v2)) or v1 <= 0 or v2 <= 0:
        return None

    if Asset.of(sent.currency, i1) == Asset.of(delivered.currency, i2):
        return None

    ledger_date = tx.get("date", record.get("date"))
    if isinstance(ledger_date, bool) or not isinstance(ledger_date, (int, float)):
        return None

    try:
        date = ledger_time_to_iso(ledger_date)
    except (OverflowError, OSError, ValueError):
        return None

    return Swap(
        hash=tx.get("hash") or record.get("hash"),
        date=date,
        c1=sent.currency,
        i1=i1,
        v1=v1,
        c2=delivered.currency,
        i2=i2,
        v2=v2,
    )


def normalize_records(records: Iterable[Any]) -> List[Swap]:
    """
    Extract every swap from an account history.

    Args:
        records: Flat, order-independent list of raw ledger records

    Returns:
        Swaps sorted newest first
    """
    records = list(records)
    transaction_types = Counter(_transaction_type(record) for record in records)
    logger.debug("Transaction types: %s", dict(transaction_types))

    swaps = []
    for record in records:
        swap = extract_swap(record)
        if swap is None:
            logger.debug("Skipping %s record: not a swap", _transaction_type(record))
            continue
        swaps.append(swap)

    logger.info("Extracted %d swaps from %d records", len(swaps), len(records))
    return sorted(swaps, key=lambda s: iso_to_timestamp(s.date), reverse=True)
