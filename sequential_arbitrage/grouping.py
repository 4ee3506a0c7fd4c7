"""
Pair grouping and position aggregation.

Swaps are partitioned by canonical pair key. Within a pair, the newest run of
same-direction swaps is the open position that a reverse quote would unwind.
"""

import logging
from typing import Dict, Iterable, List, Optional, Set, Tuple

from sequential_arbitrage.constants import DUST_THRESHOLD
from sequential_arbitrage.models import (
    Asset,
    PairSummary,
    Position,
    Swap,
    SwapGroup,
    TokenBalance,
)
from sequential_arbitrage.utils import iso_to_timestamp

logger = logging.getLogger(__name__)


def sort_newest_first(swaps: Iterable[Swap]) -> Tuple[Swap, ...]:
    """Stable newest-first ordering by swap date."""
    return tuple(sorted(swaps, key=lambda s: iso_to_timestamp(s.date), reverse=True))


def group_by_pair(swaps: Iterable[Swap]) -> List[SwapGroup]:
    """
    Partition swaps into one group per unordered asset pair.

    Args:
        swaps: Swaps in any order

    Returns:
        Groups in first-seen order; asset1/asset2 follow the first swap seen
        for the pair and swaps are sorted newest first (ties keep input order)
    """
    assets: Dict[str, Tuple[Asset, Asset]] = {}
    members: Dict[str, List[Swap]] = {}

    for swap in swaps:
        key = swap.pair_key
        if key not in assets:
            assets[key] = (swap.sent_asset, swap.received_asset)
            members[key] = []
        members[key].append(swap)

    groups = [
        SwapGroup(
            asset1=assets[key][0],
            asset2=assets[key][1],
            swaps=sort_newest_first(members[key]),
        )
        for key in assets
    ]
    logger.debug("Grouped swaps into %d pairs", len(groups))
    return groups


def latest_position(group: SwapGroup) -> Optional[Position]:
    """
    Accumulate the newest run of same-direction swaps in a group.

    Walks swaps newest first and stops at the first direction reversal, so
    the result models the currently open leg rather than the full history.
    """
    if not group.swaps:
        return None

    direction = group.is_asset1_to_asset2(group.swaps[0])
    total_asset1 = 0.0
    total_asset2 = 0.0
    count = 0

    for swap in group.swaps:
        if group.is_asset1_to_asset2(swap) != direction:
            break
        if direction:
            total_asset1 += swap.v1
            total_asset2 += swap.v2
        else:
            total_asset2 += swap.v1
            total_asset1 += swap.v2
        count += 1

    return Position(
        asset1=group.asset1,
        asset2=group.asset2,
        total_asset1=total_asset1,
        total_asset2=total_asset2,
        asset1_to_asset2=direction,
        swap_count=count,
        date=group.swaps[0].date,
    )


def has_complete_cycle(group: SwapGroup) -> bool:
    """True when the group holds at least one swap in each direction."""
    directions = {group.is_asset1_to_asset2(swap) for swap in group.swaps}
    return len(directions) == 2


def summarize_pair(group: SwapGroup) -> PairSummary:
    """
    Net flows of a pair over its whole history.

    Realized profit is only reported once both directions were traded;
    otherwise the net figures are an unrealized exposure.
    """
    net_asset1 = 0.0
    net_asset2 = 0.0
    for swap in group.swaps:
        if group.is_asset1_to_asset2(swap):
            net_asset1 -= swap.v1
            net_asset2 += swap.v2
        else:
            net_asset2 -= swap.v1
            net_asset1 += swap.v2

    complete = has_complete_cycle(group)
    return PairSummary(
        net_asset1=net_asset1,
        net_asset2=net_asset2,
        has_complete_cycle=complete,
        realized_profit_asset1=max(0.0, net_asset1) if complete else 0.0,
        realized_profit_asset2=max(0.0, net_asset2) if complete else 0.0,
    )


def _is_visible(group: SwapGroup, hidden_pairs: Set[str], exclude_native: bool) -> bool:
    if group.pair_key in hidden_pairs:
        return False
    return not (exclude_native and group.contains_native)


def visible_groups(
    groups: Iterable[SwapGroup],
    hidden_pairs: Optional[Set[str]] = None,
    exclude_native: bool = True,
) -> List[SwapGroup]:
    """Drop hidden pairs and, by default, pairs that involve the native currency."""
    hidden = hidden_pairs or set()
    return [g for g in groups if _is_visible(g, hidden, exclude_native)]


def realized_profits_by_token(
    swaps: Iterable[Swap], hidden_pairs: Optional[Set[str]] = None
) -> Tuple[List[TokenBalance], List[TokenBalance]]:
    """
    Net balance change per token across visible issued-asset swaps.

    Args:
        swaps: Swaps in any order
        hidden_pairs: Pair keys to leave out

    Returns:
        (profitable, deficit) balances; profitable sorted largest first,
        deficit sorted most negative first, dust dropped
    """
    hidden = hidden_pairs or set()
    balances: Dict[Asset, float] = {}

    for swap in swaps:
        sent, received = swap.sent_asset, swap.received_asset
        if sent.is_native or received.is_native or swap.pair_key in hidden:
            continue
        balances[sent] = balances.get(sent, 0.0) - swap.v1
        balances[received] = balances.get(received, 0.0) + swap.v2

    profitable = []
    deficit = []
    for asset, balance in balances.items():
        if abs(balance) <= DUST_THRESHOLD:
            continue
        entry = TokenBalance(asset=asset, balance=balance)
        if balance > 0:
            profitable.append(entry)
        else:
            deficit.append(entry)

    profitable.sort(key=lambda t: t.balance, reverse=True)
    deficit.sort(key=lambda t: t.balance)
    return profitable, deficit
