"""
Compact serialization of analysis results.

Swap groups are written with one-letter swap keys so long account histories
stay small when cached or handed to a display layer.
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from sequential_arbitrage.constants import AMOUNT_PRECISION, DEFAULT_CONFIG
from sequential_arbitrage.models import (
    ArbitrageChain,
    Asset,
    ReverseQuote,
    Swap,
    SwapGroup,
)
from sequential_arbitrage.utils import (
    is_positive_number,
    iso_to_timestamp,
    safe_json_dump,
)

logger = logging.getLogger(__name__)


def _compact_swap(swap: Swap) -> Dict[str, Any]:
    return {
        "h": swap.hash,
        "c1": swap.c1,
        "i1": swap.i1,
        "v1": round(swap.v1, AMOUNT_PRECISION),
        "c2": swap.c2,
        "i2": swap.i2,
        "v2": round(swap.v2, AMOUNT_PRECISION),
        "d": swap.date,
    }


def serialize_swap_groups(
    groups: Iterable[SwapGroup],
    limit: int = DEFAULT_CONFIG["SERIALIZED_SWAPS_PER_GROUP"],
) -> List[Dict[str, Any]]:
    """
    Serialize groups to compact dictionaries.

    Args:
        groups: Swap groups, swaps newest first
        limit: Maximum swaps kept per group (the newest ones)

    Returns:
        List of ``{asset1, asset2, swaps}`` dictionaries
    """
    return [
        {
            "asset1": group.asset1.to_dict(),
            "asset2": group.asset2.to_dict(),
            "swaps": [_compact_swap(swap) for swap in group.swaps[:limit]],
        }
        for group in groups
    ]


def _expand_swap(data: Any) -> Optional[Swap]:
    if not isinstance(data, dict):
        return None
    try:
        swap = Swap(
            hash=data.get("h"),
            date=data["d"],
            c1=data["c1"],
            i1=data.get("i1"),
            v1=float(data["v1"]),
            c2=data["c2"],
            i2=data.get("i2"),
            v2=float(data["v2"]),
        )
        # Unparsable dates would break newest-first ordering later
        iso_to_timestamp(swap.date)
    except (KeyError, TypeError, ValueError, AttributeError):
        return None
    if not (is_positive_number(swap.v1) and is_positive_number(swap.v2)):
        return None
    return swap


def _asset_from_dict(data: Any) -> Optional[Asset]:
    if not isinstance(data, dict) or not data.get("currency"):
        return None
    return Asset.of(data["currency"], data.get("issuer"))


def deserialize_swap_groups(data: Iterable[Any]) -> List[SwapGroup]:
    """
    Rebuild groups from ``serialize_swap_groups`` output.

    Invalid swaps are dropped; groups without valid assets are skipped.
    """
    groups = []
    for entry in data:
        if not isinstance(entry, dict):
            continue
        asset1 = _asset_from_dict(entry.get("asset1"))
        asset2 = _asset_from_dict(entry.get("asset2"))
        if asset1 is None or asset2 is None:
            logger.debug("Skipping group without valid assets: %s", entry)
            continue
        swaps = [_expand_swap(raw) for raw in entry.get("swaps") or []]
        groups.append(
            SwapGroup(
                asset1=asset1,
                asset2=asset2,
                swaps=tuple(swap for swap in swaps if swap is not None),
            )
        )
    return groups


def quotes_to_dict(
    quotes: Mapping[str, Optional[ReverseQuote]]
) -> Dict[str, Optional[Dict[str, Any]]]:
    return {key: quote.to_dict() if quote else None for key, quote in quotes.items()}


def chains_to_dicts(chains: Iterable[ArbitrageChain]) -> List[Dict[str, Any]]:
    return [chain.to_dict() for chain in chains]


def dump_json(data: Any, **kwargs) -> str:
    """JSON text for any result object, list or dictionary."""
    return safe_json_dump(data, **kwargs)
