#!/usr/bin/env python3
"""
Main Entry Point for the Sequential Swap Reversal Analyzer.

Reads an account's ledger history from a JSON file, reconstructs its swaps,
prices what reversing each open position would return, and prints the most
profitable chains of reversals.

Usage:
    python main.py --records history.json --pools pools.json
    python main.py --records history.json --prices prices.json --json

The configuration file may also be given through the SEQARB_CONFIG
environment variable (a .env file is honoured).
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

import logging_config
from sequential_arbitrage.config import AnalysisConfig, load_config
from sequential_arbitrage.exceptions import (
    ConfigurationError,
    DataError,
    SequentialArbitrageError,
)
from sequential_arbitrage.grouping import realized_profits_by_token
from sequential_arbitrage.ledger.amm import parse_amm_info
from sequential_arbitrage.pipeline import analyze_account
from sequential_arbitrage.serialization import (
    chains_to_dicts,
    dump_json,
    quotes_to_dict,
    serialize_swap_groups,
)
from sequential_arbitrage.utils import (
    format_currency_code,
    format_profit,
    format_value_with_commas,
    truncate_address,
)

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "SEQARB_CONFIG"


def read_json_file(path):
    """Load a JSON input file, raising DataError when it cannot be used."""
    path = Path(path)
    try:
        with open(path, "r") as f:
            return json.load(f)
    except FileNotFoundError:
        raise DataError(f"Input file not found: {path}", source=str(path))
    except (OSError, json.JSONDecodeError) as e:
        raise DataError(f"Failed to read {path}: {e}", source=str(path))


def load_records(path):
    """Account history as a list; accepts a bare list or {"transactions": [...]}."""
    data = read_json_file(path)
    if isinstance(data, dict):
        data = data.get("transactions")
    if not isinstance(data, list):
        raise DataError(
            f"Expected a list of transactions in {path}", source=str(path)
        )
    return data


def load_prices(path):
    """Price table keyed "<currency>-<issuer>"; numeric strings are accepted."""
    data = read_json_file(path)
    if not isinstance(data, dict):
        raise DataError(f"Expected a price mapping in {path}", source=str(path))

    prices = {}
    for key, value in data.items():
        if isinstance(value, bool) or not isinstance(value, (int, float, str)):
            logger.warning("Skipping price for %s in %s: %r", key, path, value)
            continue
        try:
            prices[key] = float(value)
        except ValueError:
            logger.warning("Skipping price for %s in %s: %r", key, path, value)
    return prices


def load_pools(path):
    """Parse a list of amm_info results (or full responses with a result key)."""
    data = read_json_file(path)
    if not isinstance(data, list):
        raise DataError(
            f"Expected a list of amm_info results in {path}", source=str(path)
        )

    pools = []
    for entry in data:
        if isinstance(entry, dict) and "result" in entry:
            entry = entry["result"]
        pool = parse_amm_info(entry)
        if pool is None:
            logger.warning("Skipping unusable amm_info entry in %s", path)
            continue
        pools.append(pool)
    return pools


def resolve_config(config_path):
    config_path = config_path or os.getenv(CONFIG_ENV_VAR)
    if not config_path:
        return AnalysisConfig()
    logger.info("Loading configuration from %s", config_path)
    return load_config(config_path)


def print_report(result, config):
    """Human-readable summary of quotes, token balances and chains."""
    print(f"\nSwaps found: {len(result.swaps)} across {len(result.groups)} pairs")

    priced = {key: quote for key, quote in result.quotes.items() if quote}
    if priced:
        print("\n--- Open Positions ---")
        for key, quote in priced.items():
            print("-" * 60)
            print(f"Pair:        {key}")
            print(
                f"  Reverse:   {format_value_with_commas(quote.received_amount)} "
                f"{format_currency_code(quote.received_currency)} -> "
                f"{format_value_with_commas(quote.reverse_amount)} "
                f"{format_currency_code(quote.original_currency)}"
            )
            print(f"  Result:    {format_profit(quote.profit_percent)}")

    profitable, deficit = realized_profits_by_token(
        result.swaps, config.hidden_pair_set
    )
    if profitable or deficit:
        print("\n--- Token Balances ---")
        for entry in profitable + deficit:
            print(
                f"  {format_currency_code(entry.asset.currency):<16} "
                f"{truncate_address(entry.asset.issuer):<22} "
                f"{entry.balance:+.6f}"
            )

    if not result.chains:
        print("\nNo profitable chains found.")
        return

    print(f"\n--- Top {len(result.chains)} Chains ---")
    for rank, chain in enumerate(result.chains, start=1):
        print(f"{rank:>2}. {format_profit(chain.total_profit_percent)}  {chain.chain_path}")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Find chains of profitable swap reversals in an account history"
    )
    parser.add_argument(
        "--records", required=True, help="JSON file with the account's transactions"
    )
    parser.add_argument(
        "--prices", help='JSON mapping of "<currency>-<issuer>" to XRP price'
    )
    parser.add_argument("--pools", help="JSON list of amm_info results")
    parser.add_argument(
        "--config", help=f"YAML analysis config (default: ${CONFIG_ENV_VAR})"
    )
    parser.add_argument(
        "--json", action="store_true", help="Output results in JSON format"
    )
    parser.add_argument("--debug", action="store_true", help="Verbose logging")
    return parser.parse_args(argv)


def main(argv=None):
    """
    Main execution function.
    """
    load_dotenv()
    args = parse_args(argv)

    if args.debug:
        logging_config.setup_debug()
    elif args.json:
        logging_config.setup_minimal()
    else:
        logging_config.setup()

    try:
        config = resolve_config(args.config)
        records = load_records(args.records)
        prices = load_prices(args.prices) if args.prices else None
        pools = load_pools(args.pools) if args.pools else None
        result = analyze_account(records, config, pools=pools, prices=prices)
    except ConfigurationError as e:
        logger.error("Configuration error: %s", e)
        return 2
    except DataError as e:
        logger.error("Input error: %s", e)
        return 1
    except SequentialArbitrageError as e:
        logger.error("Analysis failed: %s", e)
        return 1

    if args.json:
        print(
            dump_json(
                {
                    "groups": serialize_swap_groups(
                        result.groups, config.serialized_swaps_per_group
                    ),
                    "quotes": quotes_to_dict(result.quotes),
                    "chains": chains_to_dicts(result.chains),
                }
            )
        )
    else:
        print_report(result, config)
    return 0


if __name__ == "__main__":
    sys.exit(main())
