"""
Ledger amount decoding.

Ledger amounts come in two shapes: a string of drops for the native currency,
or an object ``{currency, issuer, value}`` for issued assets. Both are decoded
once into an explicit ``Amount`` union so callers never branch on raw types.
"""

import math
from dataclasses import dataclass
from typing import Any, Optional, Union

from sequential_arbitrage.constants import DROPS_PER_XRP, NATIVE_CURRENCY


@dataclass(frozen=True)
class NativeAmount:
    """Native currency amount, already converted from drops to XRP."""

    value: float

    @property
    def currency(self) -> str:
        return NATIVE_CURRENCY

    @property
    def issuer(self) -> None:
        return None


@dataclass(frozen=True)
class IssuedAmount:
    """Issued asset amount; ``value`` is taken as-is from the ledger."""

    currency: str
    issuer: Optional[str]
    value: float


Amount = Union[NativeAmount, IssuedAmount]


def _parse_float(raw: Any) -> Optional[float]:
    if isinstance(raw, bool):
        return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    return value if math.isfinite(value) else None


def decode_amount(raw: Any) -> Optional[Amount]:
    """
    Decode a raw ledger amount.

    Args:
        raw: Drops string, issued-amount dict, or anything else

    Returns:
        NativeAmount / IssuedAmount, or None when the shape is unrecognized
        or the numeric value cannot be parsed
    """
    if isinstance(raw, str):
        drops = _parse_float(raw)
        if drops is None:
            return None
        return NativeAmount(value=drops / DROPS_PER_XRP)

    if isinstance(raw, dict):
        currency = raw.get("currency")
        if not currency or "value" not in raw:
            return None
        value = _parse_float(raw["value"])
        if value is None:
            return None
        return IssuedAmount(currency=currency, issuer=raw.get("issuer"), value=value)

    return None
