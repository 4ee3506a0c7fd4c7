"""Tests for swap extraction from raw ledger records."""

import logging

import pytest

from sequential_arbitrage.ledger.normalizer import (
    extract_swap,
    is_token_swap_transaction,
    normalize_records,
)


def issued(currency, issuer, value):
    return {"currency": currency, "issuer": issuer, "value": str(value)}


def payment(
    send,
    delivered,
    date=86400,
    tx_hash="HASH1",
    account="rTrader",
    destination="rTrader",
    tx_type="Payment",
    meta_key="meta",
):
    tx = {
        "TransactionType": tx_type,
        "Account": account,
        "Destination": destination,
        "Amount": delivered,
        "hash": tx_hash,
    }
    if send is not None:
        tx["SendMax"] = send
    if date is not None:
        tx["date"] = date
    meta = {"TransactionResult": "tesSUCCESS"}
    if delivered is not None:
        meta["DeliveredAmount"] = delivered
    return {"tx": tx, meta_key: meta}


def test_xrp_to_token_swap():
    record = payment("10000000", issued("USD", "rBitstamp", 5))
    swap = extract_swap(record)

    assert swap is not None
    assert swap.hash == "HASH1"
    assert swap.c1 == "XRP"
    assert swap.i1 == "rTrader"
    assert swap.v1 == pytest.approx(10.0)
    assert swap.c2 == "USD"
    assert swap.i2 == "rBitstamp"
    assert swap.v2 == pytest.approx(5.0)


def test_token_to_xrp_uses_destination_as_issuer():
    record = payment(
        issued("USD", "rBitstamp", 5), "8000000", destination="rReceiver"
    )
    swap = extract_swap(record)
    assert swap.c2 == "XRP"
    assert swap.i2 == "rReceiver"
    assert swap.v2 == pytest.approx(8.0)


def test_ledger_epoch_conversion():
    assert extract_swap(payment("1000000", issued("USD", "rB", 1), date=0)).date == (
        "2000-01-01T00:00:00.000Z"
    )
    assert extract_swap(payment("1000000", issued("USD", "rB", 1))).date == (
        "2000-01-02T00:00:00.000Z"
    )


def test_date_falls_back_to_record_level():
    record = payment("1000000", issued("USD", "rB", 1), date=None)
    record["date"] = 0
    assert extract_swap(record).date == "2000-01-01T00:00:00.000Z"


def test_missing_date_is_rejected():
    record = payment("1000000", issued("USD", "rB", 1), date=None)
    assert extract_swap(record) is None


def test_plain_xrp_payment_is_not_a_swap():
    # Amount used for both legs with no SendMax: XRP in, XRP out
    record = payment(None, "1000000", destination="rSomeoneElse")
    assert is_token_swap_transaction(record)
    assert extract_swap(record) is None


def test_same_issued_asset_is_not_a_swap():
    record = payment(issued("USD", "rB", 10), issued("USD", "rB", 9.9))
    assert extract_swap(record) is None


def test_same_currency_different_issuer_is_a_swap():
    swap = extract_swap(payment(issued("USD", "rA", 10), issued("USD", "rB", 9.9)))
    assert swap is not None
    assert swap.i1 == "rA"
    assert swap.i2 == "rB"


@pytest.mark.parametrize("value", [0, -5])
def test_non_positive_amounts_are_rejected(value):
    record = payment(issued("FOO", "rA", 10), issued("BAR", "rB", value))
    assert extract_swap(record) is None


def test_metadata_spelling_is_accepted():
    record = payment(
        issued("FOO", "rA", 10), issued("BAR", "rB", 5), meta_key="metaData"
    )
    assert extract_swap(record) is not None


def test_empty_meta_falls_back_to_amount():
    record = payment(issued("FOO", "rI1", 10), issued("BAR", "rI2", 5), date=700000000)
    record["meta"] = {}

    swap = extract_swap(record)
    assert swap is not None
    assert (swap.c1, swap.c2) == ("FOO", "BAR")
    assert swap.v2 == pytest.approx(5.0)


def test_empty_meta_wins_over_metadata_spelling():
    record = payment(issued("FOO", "rI1", 10), issued("BAR", "rI2", 5), meta_key="metaData")
    record["metaData"]["DeliveredAmount"] = issued("BAR", "rI2", 7)
    record["meta"] = {}

    assert extract_swap(record).v2 == pytest.approx(5.0)


def test_empty_send_max_does_not_fall_back_to_amount():
    record = payment({}, issued("BAR", "rI2", 5))

    assert is_token_swap_transaction(record) is False
    assert extract_swap(record) is None


def test_empty_delivered_amount_does_not_fall_back_to_amount():
    record = payment(issued("FOO", "rI1", 10), issued("BAR", "rI2", 5))
    record["meta"]["DeliveredAmount"] = {}

    assert extract_swap(record) is None


@pytest.mark.parametrize(
    "record",
    [
        None,
        "garbage",
        {},
        {"tx": {"TransactionType": "Payment"}},
        {"tx": "x", "meta": {}},
        payment(issued("FOO", "rA", 1), issued("BAR", "rB", 1), tx_type="OfferCreate"),
        payment({"currency": "FOO"}, issued("BAR", "rB", 1)),
    ],
)
def test_malformed_records_are_dropped(record):
    assert is_token_swap_transaction(record) is False
    assert extract_swap(record) is None


def test_normalize_records_sorts_newest_first(caplog):
    records = [
        payment(issued("FOO", "rA", 1), issued("BAR", "rB", 2), date=100, tx_hash="OLD"),
        {"tx": {"TransactionType": "OfferCreate"}, "meta": {}},
        payment(issued("BAR", "rB", 2), issued("FOO", "rA", 1), date=300, tx_hash="NEW"),
        payment(issued("FOO", "rA", 1), issued("BAZ", "rC", 2), date=200, tx_hash="MID"),
    ]

    with caplog.at_level(logging.INFO, logger="sequential_arbitrage"):
        swaps = normalize_records(records)

    assert [swap.hash for swap in swaps] == ["NEW", "MID", "OLD"]
    assert "Extracted 3 swaps from 4 records" in caplog.text


def test_normalize_records_empty():
    assert normalize_records([]) == []
