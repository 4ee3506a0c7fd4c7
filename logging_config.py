"""
Logging configuration for cleaner CLI output.

Usage:
    import logging_config
    logging_config.setup()
"""

import logging
import sys


def setup(level=logging.INFO):
    """
    Configure logging for cleaner, more readable output.

    - Uses shorter timestamp format (HH:MM:SS instead of full datetime)
    - Writes to stderr so JSON reports on stdout stay parseable
    """

    # Root logger - minimal format
    root = logging.getLogger()
    root.setLevel(level)

    # Clear existing handlers
    root.handlers.clear()

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)

    # Minimal format: time + level + message
    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-7s | %(message)s", datefmt="%H:%M:%S"
    )
    console.setFormatter(formatter)
    root.addHandler(console)

    logging.getLogger("__main__").setLevel(level)
    logging.getLogger("sequential_arbitrage").setLevel(level)


def setup_minimal():
    """
    Even more minimal logging - only warnings and errors.
    Good for scripted runs where only problems matter.
    """
    setup(level=logging.WARNING)


def setup_debug():
    """
    Verbose logging for debugging.
    Shows per-record rejections and graph statistics.
    """
    setup(level=logging.DEBUG)
