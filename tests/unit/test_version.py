"""Tests for version information."""

import sequential_arbitrage
from sequential_arbitrage.version import (
    VERSION_MAJOR,
    VERSION_MINOR,
    VERSION_PATCH,
    __version__,
    get_version,
)


def test_version_parts_match_string():
    assert get_version() == __version__
    assert f"{VERSION_MAJOR}.{VERSION_MINOR}.{VERSION_PATCH}" == __version__


def test_package_exports_version():
    assert sequential_arbitrage.VERSION == __version__
    assert sequential_arbitrage.PROJECT_NAME
    assert "analyze_account" in sequential_arbitrage.__all__
