"""
Exception hierarchy for the sequential arbitrage analyzer.

The analytical core never raises for malformed ledger data; these exceptions
cover configuration files, unreadable input files and caller mistakes.
"""

from typing import Any, Dict, Optional


class SequentialArbitrageError(Exception):
    """Base exception for all sequential arbitrage related errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.details = details or {}


class ConfigurationError(SequentialArbitrageError):
    """Raised when there are configuration-related issues."""

    pass


class ValidationError(SequentialArbitrageError):
    """Raised when a caller passes parameters outside their valid range."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details)
        self.field = field
        self.value = value


class DataError(SequentialArbitrageError):
    """Raised when an input file cannot be read as ledger or price data."""

    def __init__(
        self,
        message: str,
        source: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details)
        self.source = source
