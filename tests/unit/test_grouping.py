"""Tests for pair grouping, position aggregation and token balances."""

import pytest

from sequential_arbitrage.grouping import (
    group_by_pair,
    has_complete_cycle,
    latest_position,
    realized_profits_by_token,
    summarize_pair,
    visible_groups,
)
from sequential_arbitrage.models import Asset, Swap

FOO = ("FOO", "rIssuerA")
BAR = ("BAR", "rIssuerB")


def make_swap(sent, received, v1, v2, day, tx_hash=None):
    return Swap(
        hash=tx_hash or f"H{day}",
        date=f"2024-01-{day:02d}T00:00:00.000Z",
        c1=sent[0],
        i1=sent[1],
        v1=v1,
        c2=received[0],
        i2=received[1],
        v2=v2,
    )


@pytest.fixture
def swaps():
    return [
        make_swap(FOO, BAR, 100.0, 50.0, 3),
        make_swap(BAR, FOO, 40.0, 90.0, 2),
        make_swap(FOO, BAR, 10.0, 5.0, 4),
        make_swap(("XRP", "rTrader"), FOO, 20.0, 10.0, 1),
    ]


def test_every_swap_lands_in_exactly_one_group(swaps):
    groups = group_by_pair(swaps)
    assert len(groups) == 2
    assert sum(len(group.swaps) for group in groups) == len(swaps)
    for group in groups:
        assert all(swap.pair_key == group.pair_key for swap in group.swaps)


def test_group_assets_follow_first_swap_seen(swaps):
    group = group_by_pair(swaps)[0]
    assert group.asset1 == Asset.of(*FOO)
    assert group.asset2 == Asset.of(*BAR)
    assert [swap.hash for swap in group.swaps] == ["H4", "H3", "H2"]


def test_latest_position_stops_at_direction_change(swaps):
    position = latest_position(group_by_pair(swaps)[0])

    assert position.asset1_to_asset2 is True
    assert position.swap_count == 2
    assert position.total_asset1 == pytest.approx(110.0)
    assert position.total_asset2 == pytest.approx(55.0)
    assert position.date == "2024-01-04T00:00:00.000Z"

    as_swap = position.as_swap()
    assert (as_swap.c1, as_swap.v1) == ("FOO", pytest.approx(110.0))
    assert (as_swap.c2, as_swap.v2) == ("BAR", pytest.approx(55.0))


def test_latest_position_in_reverse_direction():
    group = group_by_pair(
        [make_swap(FOO, BAR, 100.0, 50.0, 3), make_swap(BAR, FOO, 40.0, 90.0, 5)]
    )[0]
    position = latest_position(group)

    assert position.asset1_to_asset2 is False
    assert position.swap_count == 1
    assert position.sent_asset == Asset.of(*BAR)
    as_swap = position.as_swap()
    assert (as_swap.c1, as_swap.v1) == ("BAR", 40.0)
    assert (as_swap.c2, as_swap.v2) == ("FOO", 90.0)


def test_complete_cycle(swaps):
    token_group, native_group = group_by_pair(swaps)
    assert has_complete_cycle(token_group)
    assert not has_complete_cycle(native_group)


def test_summarize_pair(swaps):
    summary = summarize_pair(group_by_pair(swaps)[0])
    assert summary.net_asset1 == pytest.approx(-20.0)
    assert summary.net_asset2 == pytest.approx(15.0)
    assert summary.has_complete_cycle
    assert summary.realized_profit_asset1 == 0.0
    assert summary.realized_profit_asset2 == pytest.approx(15.0)


def test_summarize_open_pair_reports_no_realized_profit(swaps):
    summary = summarize_pair(group_by_pair(swaps)[1])
    assert not summary.has_complete_cycle
    assert summary.realized_profit_asset1 == 0.0
    assert summary.realized_profit_asset2 == 0.0


def test_visible_groups_drop_native_and_hidden(swaps):
    groups = group_by_pair(swaps)
    assert visible_groups(groups) == [groups[0]]
    assert visible_groups(groups, exclude_native=False) == groups
    assert visible_groups(groups, hidden_pairs={groups[0].pair_key}) == []


def test_realized_profits_by_token(swaps):
    profitable, deficit = realized_profits_by_token(swaps)

    assert [entry.asset for entry in profitable] == [Asset.of(*BAR)]
    assert profitable[0].balance == pytest.approx(15.0)
    assert [entry.asset for entry in deficit] == [Asset.of(*FOO)]
    assert deficit[0].balance == pytest.approx(-20.0)


def test_realized_profits_drop_dust_and_hidden_pairs():
    settled = [make_swap(FOO, BAR, 10.0, 5.0, 1), make_swap(BAR, FOO, 5.0, 10.0, 2)]
    assert realized_profits_by_token(settled) == ([], [])

    hidden = {settled[0].pair_key}
    assert realized_profits_by_token(
        [make_swap(FOO, BAR, 1.0, 2.0, 3)], hidden_pairs=hidden
    ) == ([], [])


def test_same_date_swaps_keep_input_order():
    first = make_swap(FOO, BAR, 10.0, 5.0, 7, tx_hash="1")
    second = make_swap(BAR, FOO, 5.0, 11.0, 7, tx_hash="2")

    assert [s.hash for s in group_by_pair([first, second])[0].swaps] == ["1", "2"]
    assert [s.hash for s in group_by_pair([second, first])[0].swaps] == ["2", "1"]


def test_empty_input():
    assert group_by_pair([]) == []
    assert realized_profits_by_token([]) == ([], [])
