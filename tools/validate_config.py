#!/usr/bin/env python3
"""
Configuration validation CLI tool

Validates YAML analysis configuration files against the schema.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List

from sequential_arbitrage.config import load_config
from sequential_arbitrage.exceptions import ConfigurationError
from sequential_arbitrage.utils import get_logger

logger = get_logger("validate_config", minimal=True)


def validate_single_config(config_path: Path, verbose: bool = False) -> Dict[str, Any]:
    """
    Validate a single configuration file

    Returns:
        Dictionary with validation results
    """
    result = {
        "file": str(config_path),
        "valid": False,
        "errors": [],
        "warnings": [],
        "config": None,
    }

    try:
        config = load_config(config_path)
    except ConfigurationError as e:
        result["errors"].append(str(e))
        for error in e.details.get("errors", []):
            location = ".".join(str(part) for part in error.get("loc", ()))
            result["errors"].append(f"{location}: {error.get('msg')}")
        return result

    result["valid"] = True
    result["config"] = config.model_dump() if verbose else None

    warnings = []
    if config.chain_profit_threshold <= 0:
        warnings.append(
            "chain_profit_threshold is not positive - every priced pair becomes a link"
        )
    if config.max_chain_length > 6:
        warnings.append(
            f"max_chain_length ({config.max_chain_length}) is high - search time grows quickly"
        )
    if config.trading_fee == 0:
        warnings.append("trading_fee is zero - quotes will overstate reversals")
    result["warnings"] = warnings

    return result


def print_validation_results(results: List[Dict[str, Any]], json_output: bool = False):
    """Print validation results in human-readable or JSON format"""
    if json_output:
        print(json.dumps(results, indent=2, default=str))
        return

    for result in results:
        status = "✓ VALID" if result["valid"] else "✗ INVALID"
        print(f"\n{status}: {result['file']}")

        if result["errors"]:
            print("  Errors:")
            for error in result["errors"]:
                print(f"    - {error}")

        if result["warnings"]:
            print("  Warnings:")
            for warning in result["warnings"]:
                print(f"    - {warning}")

        if result["config"]:
            print("  Configuration:")
            for key, value in result["config"].items():
                print(f"    - {key}: {value}")


def main(argv=None):
    """Main CLI entry point"""
    parser = argparse.ArgumentParser(
        description="Validate sequential arbitrage analysis configuration files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Validate a single configuration file
  python tools/validate_config.py config/analysis.yaml

  # Output results as JSON
  python tools/validate_config.py --json config/*.yaml
        """,
    )
    parser.add_argument(
        "config_files", nargs="+", help="Configuration file(s) to validate"
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Show the validated configuration values",
    )
    parser.add_argument(
        "--json", "-j", action="store_true", help="Output results in JSON format"
    )
    args = parser.parse_args(argv)

    results = [
        validate_single_config(Path(path), verbose=args.verbose)
        for path in args.config_files
    ]
    print_validation_results(results, json_output=args.json)

    invalid_count = sum(1 for r in results if not r["valid"])
    if invalid_count > 0:
        logger.error("Validation failed: %d invalid configuration(s)", invalid_count)
        return 1

    logger.info("Validation complete: %d configuration(s) valid", len(results))
    return 0


if __name__ == "__main__":
    sys.exit(main())
