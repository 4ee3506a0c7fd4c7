"""
Common utilities and helper functions for the sequential arbitrage analyzer.

This module provides centralized helper functions for timestamp handling,
JSON serialization, numeric validation, display formatting and logging.
"""

import json
import logging
import math
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

from sequential_arbitrage.constants import LEDGER_EPOCH_OFFSET, NATIVE_CURRENCY


# Timestamp utilities
def timestamp_to_iso(timestamp: float) -> str:
    """Convert Unix timestamp to an ISO 8601 string with millisecond precision."""
    dt = datetime.fromtimestamp(timestamp, tz=timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def iso_to_timestamp(iso_string: str) -> float:
    """Convert ISO 8601 string to Unix timestamp."""
    return datetime.fromisoformat(iso_string.replace("Z", "+00:00")).timestamp()


def ledger_time_to_iso(ledger_seconds: Union[int, float]) -> str:
    """
    Convert ledger-native time (seconds since 2000-01-01) to ISO 8601.

    Args:
        ledger_seconds: Seconds since the ledger epoch

    Returns:
        ISO 8601 string in UTC, e.g. "2024-03-01T12:00:00.000Z"
    """
    return timestamp_to_iso(ledger_seconds + LEDGER_EPOCH_OFFSET)


# JSON utilities
def safe_json_dump(data: Any, **kwargs) -> str:
    """
    Safely serialize data to JSON with sensible defaults.

    Args:
        data: Data to serialize
        **kwargs: Additional arguments to json.dumps

    Returns:
        JSON string
    """
    defaults = {"ensure_ascii": False, "indent": 2, "default": _json_default_handler}
    defaults.update(kwargs)
    return json.dumps(data, **defaults)


def safe_json_load(json_str: str) -> Any:
    """
    Safely load JSON string with error handling.

    Args:
        json_str: JSON string to parse

    Returns:
        Parsed data or None if parsing fails
    """
    try:
        return json.loads(json_str)
    except (json.JSONDecodeError, TypeError) as e:
        logging.warning(f"Failed to parse JSON: {e}")
        return None


def _json_default_handler(obj: Any) -> Any:
    """Default JSON serialization handler for custom types."""
    if isinstance(obj, datetime):
        return obj.isoformat()
    elif isinstance(obj, (set, frozenset)):
        return sorted(obj)
    elif hasattr(obj, "to_dict"):
        return obj.to_dict()
    elif hasattr(obj, "__dict__"):
        return obj.__dict__
    else:
        return str(obj)


# Math utilities
def is_finite_number(value: Any) -> bool:
    """Check if value is a real, finite number (bools excluded)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def is_positive_number(value: Any) -> bool:
    """Check if value is a finite number strictly greater than zero."""
    return is_finite_number(value) and value > 0


def calculate_percentage(value: float, total: float) -> Optional[float]:
    """Calculate percentage, returning None instead of dividing by zero."""
    if total == 0:
        return None
    result = (value / total) * 100
    return result if math.isfinite(result) else None


# Display formatting
def format_currency_code(code: Optional[str]) -> str:
    """
    Render a ledger currency code for display.

    40-character codes are hex-encoded; they are decoded to ASCII with null
    padding removed. Other long codes are truncated.

    Examples:
        >>> format_currency_code("XRP")
        'XRP'
        >>> format_currency_code("534F4C4F00000000000000000000000000000000")
        'SOLO'
    """
    if code == NATIVE_CURRENCY:
        return NATIVE_CURRENCY

    if isinstance(code, str) and len(code) == 40:
        try:
            raw = bytes.fromhex(code)
        except ValueError:
            raw = None
        if raw is not None:
            ascii_code = raw.replace(b"\x00", b"").decode("latin-1")
            if 0 < len(ascii_code) <= 20:
                return ascii_code

    if code and len(code) > 12:
        return code[:12] + "..."
    return code or "Unknown"


def format_value_with_commas(value: Any) -> str:
    """Format a number with thousands separators and two decimals."""
    if not is_finite_number(value):
        return "0.00"
    return f"{value:,.2f}"


def truncate_address(address: Optional[str]) -> str:
    """Shorten a long account address to head...tail form."""
    if not address:
        return "Unknown"
    if len(address) > 20:
        return address[:10] + "..." + address[-7:]
    return address


def format_profit(profit_percent: float) -> str:
    """Format a profit percentage with a sign prefix.

    Examples:
        >>> format_profit(1.234)
        '+1.23%'
        >>> format_profit(-4.56)
        '-4.56%'
    """
    if profit_percent >= 0:
        return f"+{profit_percent:.2f}%"
    return f"{profit_percent:.2f}%"


# Logging utilities
def get_logger(
    name: str,
    level: Union[str, int] = logging.INFO,
    extra: Optional[Dict[str, Any]] = None,
    minimal: bool = False,
) -> logging.Logger:
    """
    Get a structured logger with consistent formatting and extra context.

    Args:
        name: Logger name (typically __name__)
        level: Logging level
        extra: Additional context fields to include in all log messages
        minimal: If True, use simplified format (time + message only)

    Returns:
        Configured logger with structured output
    """
    logger = logging.getLogger(name)

    if logger.level == logging.NOTSET:
        logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler()

        if minimal:
            format_str = "%(asctime)s | %(message)s"
        else:
            format_str = (
                "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | " "%(message)s"
            )

        if extra:
            extra_fields = " | ".join([f"{k}=%(extra_{k})s" for k in extra.keys()])
            format_str = format_str.replace(
                " | %(message)s", f" | {extra_fields} | %(message)s"
            )

        formatter = logging.Formatter(format_str, datefmt="%H:%M:%S")
        handler.setFormatter(formatter)
        logger.addHandler(handler)

        if extra:
            logger = logging.LoggerAdapter(
                logger, {"extra_" + k: v for k, v in extra.items()}
            )

    return logger
