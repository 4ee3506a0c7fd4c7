"""
Unit tests for sequential_arbitrage.utils module.

Tests timestamp, JSON, numeric and display helpers.
"""

import json
import math
from datetime import datetime, timezone

import pytest

from sequential_arbitrage.models import Asset
from sequential_arbitrage.utils import (
    calculate_percentage,
    format_currency_code,
    format_profit,
    format_value_with_commas,
    is_finite_number,
    is_positive_number,
    iso_to_timestamp,
    ledger_time_to_iso,
    safe_json_dump,
    safe_json_load,
    timestamp_to_iso,
    truncate_address,
)


class TestTimestampUtils:
    """Test timestamp utilities."""

    def test_timestamp_iso_conversion(self):
        """Test timestamp to ISO conversion and back."""
        iso_string = timestamp_to_iso(1700000000.0)
        assert iso_string == "2023-11-14T22:13:20.000Z"
        assert iso_to_timestamp(iso_string) == 1700000000.0

    def test_ledger_time(self):
        """Test that ledger time counts from 2000-01-01."""
        assert ledger_time_to_iso(0) == "2000-01-01T00:00:00.000Z"
        assert ledger_time_to_iso(3600) == "2000-01-01T01:00:00.000Z"


class TestJsonUtils:
    """Test JSON utilities."""

    def test_safe_json_dump_custom_types(self):
        data = {
            "asset": Asset.of("USD", "rB"),
            "tags": {"b", "a"},
            "when": datetime(2024, 1, 1, tzinfo=timezone.utc),
        }
        parsed = json.loads(safe_json_dump(data))
        assert parsed["asset"] == {"currency": "USD", "issuer": "rB"}
        assert parsed["tags"] == ["a", "b"]
        assert parsed["when"].startswith("2024-01-01T00:00:00")

    def test_safe_json_load(self):
        assert safe_json_load('{"a": 1}') == {"a": 1}
        assert safe_json_load("{not json") is None
        assert safe_json_load(None) is None


class TestMathUtils:
    """Test numeric helpers."""

    @pytest.mark.parametrize(
        "value,expected",
        [(1, True), (0.5, True), (0, True), (-3, True), (math.inf, False),
         (math.nan, False), (True, False), ("1", False), (None, False)],
    )
    def test_is_finite_number(self, value, expected):
        assert is_finite_number(value) is expected

    def test_is_positive_number(self):
        assert is_positive_number(0.1)
        assert not is_positive_number(0)
        assert not is_positive_number(-1)
        assert not is_positive_number(math.inf)

    def test_calculate_percentage(self):
        assert calculate_percentage(2, 100) == 2.0
        assert calculate_percentage(-75, 100) == -75.0
        assert calculate_percentage(1, 0) is None
        assert calculate_percentage(math.inf, 1) is None


class TestFormatting:
    """Test display helpers."""

    def test_format_currency_code_plain(self):
        assert format_currency_code("XRP") == "XRP"
        assert format_currency_code("USD") == "USD"

    def test_format_currency_code_hex(self):
        assert format_currency_code("534F4C4F00000000000000000000000000000000") == "SOLO"

    def test_format_currency_code_long(self):
        assert format_currency_code("ABCDEFGHIJKLMNOP") == "ABCDEFGHIJKL..."
        assert format_currency_code("") == "Unknown"
        assert format_currency_code(None) == "Unknown"

    def test_format_currency_code_bad_hex(self):
        code = "Z" * 40
        assert format_currency_code(code) == "ZZZZZZZZZZZZ..."

    def test_format_value_with_commas(self):
        assert format_value_with_commas(1234567.891) == "1,234,567.89"
        assert format_value_with_commas(math.nan) == "0.00"

    def test_truncate_address(self):
        address = "rN7n7otQDd6FczFgLdSqtcsAUxDkw6fzRH"
        assert truncate_address(address) == "rN7n7otQDd...kw6fzRH"
        assert truncate_address("rShort") == "rShort"
        assert truncate_address(None) == "Unknown"

    def test_format_profit(self):
        assert format_profit(1.234) == "+1.23%"
        assert format_profit(0) == "+0.00%"
        assert format_profit(-4.56) == "-4.56%"
