import logging
from datetime import date
from decimal import Decimal

import pytest

from loanfx.models.contract import Contract
from loanfx.models.evolution import BalanceSnapshot
from loanfx.models.rate import RateEntry
from loanfx.models.transaction import Transaction
from loanfx.services.balances import snapshot, snapshots_at
from loanfx.services.errors import InvalidDate
from loanfx.services.evolution import evolve
from loanfx.utils.dates import parse_reference_month


def _mk_contract(**kw) -> Contract:
    base = dict(start=date(2026, 1, 1), principal=Decimal("1000"), rate_percent=Decimal("36"), day_count_base=360)
    base.update(kw)
    return Contract(**base)


def test_snapshot_reads_last_daily_entry():
    rates = [RateEntry(date=date(2026, 1, 1), buy=Decimal("5"))]
    snap = snapshot(evolve(_mk_contract(), [], rates, date(2026, 1, 31)))
    assert snap.balance == Decimal("1030")
    assert snap.balance_domestic == Decimal("5150")
    assert snap.rate == Decimal("5")
    assert snap.is_liquidated is False


def test_empty_evolution_gives_zero_snapshot():
    assert snapshot([]) == BalanceSnapshot()
    assert snapshot([]).rate == Decimal("1")


def test_fully_repaid_loan_is_liquidated():
    txs = [Transaction(date=date(2026, 1, 15), kind="payment", principal=Decimal("1000"), interest=Decimal("14"))]
    snap = snapshot(evolve(_mk_contract(), txs, [], date(2026, 1, 15)))
    assert snap.balance == 0
    assert snap.is_liquidated is True


def test_reference_month_is_last_day_of_month():
    assert parse_reference_month("2026-02") == date(2026, 2, 28)
    assert parse_reference_month("2024-02") == date(2024, 2, 29)
    for bad in ("2026-13", "2026/02", "", "02-2026"):
        with pytest.raises(InvalidDate):
            parse_reference_month(bad)


def test_snapshots_at_reference_month_across_loans(caplog):
    loans = [
        ("a", _mk_contract(), [], []),
        ("future", _mk_contract(start=date(2026, 3, 1)), [], []),
        ("broken", _mk_contract(start="31/31/2026"), [], []),
        ("usd", _mk_contract(), [], [RateEntry(date="01/01/2026", buy="5")]),
    ]
    with caplog.at_level(logging.ERROR):
        out = snapshots_at(loans, "2026-01")

    assert out["a"].balance == Decimal("1030")
    assert out["future"] == BalanceSnapshot()
    assert out["broken"] == BalanceSnapshot()
    assert out["usd"].balance_domestic == Decimal("5150")
    assert "broken" in caplog.text


def test_snapshots_at_rejects_bad_reference_month():
    with pytest.raises(InvalidDate):
        snapshots_at([], "January")


def test_overflowing_loan_is_contained_in_snapshots(caplog):
    huge = _mk_contract(principal=Decimal("1e999990"), rate_percent=Decimal("0"), category="asset")
    rates = [
        RateEntry(date=date(2026, 1, 1), buy=Decimal("1")),
        RateEntry(date=date(2026, 1, 2), buy=Decimal("1e20")),
    ]
    loans = [("huge", huge, [], rates), ("a", _mk_contract(), [], [])]
    with caplog.at_level(logging.ERROR):
        out = snapshots_at(loans, "2026-01")

    assert out["huge"] == BalanceSnapshot()
    assert out["a"].balance == Decimal("1030")
    assert "huge" in caplog.text
