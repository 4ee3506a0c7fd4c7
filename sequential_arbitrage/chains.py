"""
Sequential swap chain detection using graph search.

Profitable pair reversals are modelled as edges of a NetworkX multigraph over
assets. A depth-bounded search chains them into contiguous paths of distinct
currency pairs and ranks the results by summed profit percentage.
"""

import logging
from typing import Iterable, List, Mapping, Optional, Set, Tuple

import networkx as nx

from sequential_arbitrage.constants import DEFAULT_CONFIG
from sequential_arbitrage.exceptions import ValidationError
from sequential_arbitrage.grouping import visible_groups
from sequential_arbitrage.models import (
    ArbitrageChain,
    ArbitrageChainLink,
    ReverseQuote,
    SwapGroup,
)
from sequential_arbitrage.utils import format_currency_code

logger = logging.getLogger(__name__)

DEFAULT_CHAIN_PROFIT_THRESHOLD = DEFAULT_CONFIG["CHAIN_PROFIT_THRESHOLD"]
DEFAULT_MAX_CHAIN_LENGTH = DEFAULT_CONFIG["MAX_CHAIN_LENGTH"]
DEFAULT_MAX_CHAINS = DEFAULT_CONFIG["MAX_CHAINS"]


def build_chain_link(
    index: int,
    group: SwapGroup,
    reverse_quote: Optional[ReverseQuote],
    threshold: float,
) -> ArbitrageChainLink:
    """
    Annotate a group with its quote and hop direction.

    The hop runs from the asset the quote originally sent to the asset it
    received; without a quote it runs asset1 -> asset2 and is never profitable.
    """
    key = group.pair_key
    if reverse_quote is None:
        return ArbitrageChainLink(
            index=index,
            group=group,
            pair_key=key,
            reverse_quote=None,
            from_currency=group.asset1.currency,
            from_issuer=group.asset1.issuer,
            to_currency=group.asset2.currency,
            to_issuer=group.asset2.issuer,
            profit_percent=0.0,
            is_profitable=False,
        )

    origin = reverse_quote.original_asset
    received = reverse_quote.received_asset
    return ArbitrageChainLink(
        index=index,
        group=group,
        pair_key=key,
        reverse_quote=reverse_quote,
        from_currency=origin.currency,
        from_issuer=origin.issuer,
        to_currency=received.currency,
        to_issuer=received.issuer,
        profit_percent=reverse_quote.profit_percent,
        is_profitable=(
            reverse_quote.is_profit and reverse_quote.profit_percent >= threshold
        ),
    )


def build_chain_links(
    groups: Iterable[SwapGroup],
    reverse_quotes: Mapping[str, Optional[ReverseQuote]],
    hidden_pairs: Optional[Set[str]] = None,
    threshold: float = DEFAULT_CHAIN_PROFIT_THRESHOLD,
) -> List[ArbitrageChainLink]:
    """
    Build one link per visible issued-asset group.

    Args:
        groups: All swap groups
        reverse_quotes: pair key -> quote (missing or None means unpriced)
        hidden_pairs: Pair keys excluded from the search
        threshold: Minimum profit percentage for a profitable link

    Returns:
        Links indexed by their position among the visible groups
    """
    visible = visible_groups(groups, hidden_pairs, exclude_native=True)
    return [
        build_chain_link(index, group, reverse_quotes.get(group.pair_key), threshold)
        for index, group in enumerate(visible)
    ]


def build_link_graph(links: Iterable[ArbitrageChainLink]) -> nx.MultiDiGraph:
    """
    Build a directed multigraph of profitable hops.

    Nodes are assets; each profitable link adds one edge from its source asset
    to its target asset, keyed by the link index.

    Returns:
        NetworkX MultiDiGraph with the link stored under the ``link`` attribute
    """
    graph = nx.MultiDiGraph()
    for link in links:
        if link.is_profitable:
            graph.add_edge(link.from_asset, link.to_asset, key=link.index, link=link)
    return graph


def _format_chain_path(chain: Tuple[ArbitrageChainLink, ...]) -> str:
    return " → ".join(
        f"{format_currency_code(link.from_currency)}→{format_currency_code(link.to_currency)}"
        for link in chain
    )


def _next_links(
    graph: nx.MultiDiGraph, chain: Tuple[ArbitrageChainLink, ...]
) -> List[ArbitrageChainLink]:
    """
    Candidate links that may extend a chain.

    A candidate must start where the chain ends (currency and issuer), use a
    currency pair not yet in the chain, and come from a group not yet used.
    """
    last = chain[-1]
    if last.to_asset not in graph:
        return []

    used_pairs = {link.currency_pair for link in chain}
    used_indices = {link.index for link in chain}

    candidates = [
        data["link"] for _, _, data in graph.out_edges(last.to_asset, data=True)
    ]
    candidates.sort(key=lambda link: link.index)
    return [
        link
        for link in candidates
        if link.currency_pair not in used_pairs
        and link.index not in used_indices
        and link.is_profitable
    ]


def _extend_chain(
    graph: nx.MultiDiGraph,
    chain: Tuple[ArbitrageChainLink, ...],
    max_chain_length: int,
    threshold: float,
    results: List[ArbitrageChain],
) -> None:
    if len(chain) >= max_chain_length:
        total_profit_percent = sum(link.profit_percent for link in chain)
        if total_profit_percent >= threshold:
            results.append(
                ArbitrageChain(
                    pairs=chain,
                    total_profit_percent=total_profit_percent,
                    chain_path=_format_chain_path(chain),
                )
            )
        return

    for link in _next_links(graph, chain):
        _extend_chain(graph, chain + (link,), max_chain_length, threshold, results)


def find_arbitrage_chains(
    groups: Iterable[SwapGroup],
    reverse_quotes: Mapping[str, Optional[ReverseQuote]],
    hidden_pairs: Optional[Set[str]] = None,
    threshold: float = DEFAULT_CHAIN_PROFIT_THRESHOLD,
    max_chain_length: int = DEFAULT_MAX_CHAIN_LENGTH,
    max_results: int = DEFAULT_MAX_CHAINS,
) -> List[ArbitrageChain]:
    """
    Find the most profitable sequential swap chains.

    Every profitable link seeds a depth-first search. Chains are only kept
    once they hold exactly ``max_chain_length`` links and their summed
    profit percentage reaches ``threshold``.

    Args:
        groups: All swap groups (native-currency pairs are ignored)
        reverse_quotes: pair key -> quote
        hidden_pairs: Pair keys excluded from the search
        threshold: Minimum profit percentage per link and per chain
        max_chain_length: Exact number of links in a reported chain
        max_results: Number of chains to return

    Returns:
        Chains sorted by total profit percentage, best first (ties keep
        discovery order)

    Raises:
        ValidationError: If max_chain_length is below 2
    """
    if isinstance(max_chain_length, bool) or not isinstance(max_chain_length, int):
        raise ValidationError(
            f"max_chain_length must be an integer: {max_chain_length!r}",
            field="max_chain_length",
            value=max_chain_length,
        )
    if max_chain_length < 2:
        raise ValidationError(
            f"max_chain_length must be at least 2: {max_chain_length}",
            field="max_chain_length",
            value=max_chain_length,
        )

    links = build_chain_links(groups, reverse_quotes, hidden_pairs, threshold)
    profitable = [
        link for link in links if link.is_profitable and link.profit_percent >= 0
    ]
    if len(profitable) < 2:
        logger.debug("Only %d profitable pairs, no chains possible", len(profitable))
        return []

    graph = build_link_graph(profitable)
    logger.debug(
        "Link graph built with %d assets and %d profitable hops.",
        graph.number_of_nodes(),
        graph.number_of_edges(),
    )

    results: List[ArbitrageChain] = []
    for seed in profitable:
        _extend_chain(graph, (seed,), max_chain_length, threshold, results)

    results.sort(key=lambda chain: chain.total_profit_percent, reverse=True)
    logger.info(
        "Found %d chains of length %d from %d profitable pairs",
        len(results),
        max_chain_length,
        len(profitable),
    )
    return results[:max_results]
