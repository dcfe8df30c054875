from datetime import date, datetime
from decimal import Decimal

import pytest

from loanfx.core.config import settings
from loanfx.models.contract import Contract
from loanfx.models.rate import RateEntry
from loanfx.models.transaction import Transaction
from loanfx.services.errors import EvolutionError, InvalidDate, InvalidField, InvalidNumeric, RangeTooLong
from loanfx.services.evolution import compute_daily_steps, evolve


def _mk_contract(**kw) -> Contract:
    base = dict(start="2026-01-01", principal="1000", rate_percent="12")
    base.update(kw)
    return Contract(**base)


def test_cutoff_before_start_returns_empty():
    assert evolve(_mk_contract(), [], [], date(2025, 12, 31)) == []


def test_single_day_range():
    months = evolve(_mk_contract(), [], [], date(2026, 1, 1))
    assert len(months) == 1
    assert len(months[0].daily_logs) == 1


@pytest.mark.parametrize("start", ["2026-13-01", "not a date", "31/02/2026", "", None, 20260101])
def test_malformed_start_date_is_invalid_date(start):
    with pytest.raises(InvalidDate):
        evolve(_mk_contract(start=start), [], [], date(2026, 2, 1))


def test_malformed_transaction_date_aborts_run():
    txs = [Transaction(date="2026/01/05", kind="addition", principal="1")]
    with pytest.raises(InvalidDate) as exc:
        evolve(_mk_contract(), txs, [], date(2026, 2, 1))
    assert exc.value.field == "transactions[0].date"
    assert exc.value.code == "invalid_date"


def test_malformed_cutoff_and_rate_dates():
    with pytest.raises(InvalidDate):
        evolve(_mk_contract(), [], [], "yesterday")
    with pytest.raises(InvalidDate):
        evolve(_mk_contract(), [], [RateEntry(date="32/01/2026", buy="5")], date(2026, 2, 1))


@pytest.mark.parametrize(
    "kw",
    [
        {"principal": float("nan")},
        {"principal": "-1"},
        {"principal": "abc"},
        {"rate_percent": float("inf")},
        {"fixed_rate": "-5"},
        {"day_count_base": 0},
        {"day_count_base": "360"},
    ],
)
def test_bad_contract_numbers_are_invalid_numeric(kw):
    with pytest.raises(InvalidNumeric):
        evolve(_mk_contract(**kw), [], [], date(2026, 2, 1))


def test_bad_transaction_and_rate_numbers_are_invalid_numeric():
    with pytest.raises(InvalidNumeric):
        evolve(_mk_contract(), [Transaction(date="2026-01-02", kind="payment", interest="-1")], [], date(2026, 2, 1))
    with pytest.raises(InvalidNumeric):
        evolve(_mk_contract(), [], [RateEntry(date="2026-01-02", buy=float("inf"))], date(2026, 2, 1))


@pytest.mark.parametrize(
    "kw",
    [{"regime": "Composto"}, {"rate_period": "weekly"}, {"capitalization": "hourly"}, {"category": "equity"}],
)
def test_unknown_contract_choices_are_rejected(kw):
    with pytest.raises(InvalidField):
        evolve(_mk_contract(**kw), [], [], date(2026, 2, 1))


def test_all_errors_share_a_base_class():
    for cls in (InvalidDate, InvalidNumeric, InvalidField, RangeTooLong):
        assert issubclass(cls, EvolutionError)


def test_range_budget_aborts_pathological_ranges(monkeypatch):
    monkeypatch.setattr(settings, "max_evolution_days", 10)
    with pytest.raises(RangeTooLong) as exc:
        evolve(_mk_contract(), [], [], date(2026, 1, 11))
    assert exc.value.days == 11
    assert len(evolve(_mk_contract(), [], [], date(2026, 1, 10))[0].daily_logs) == 1


def test_transactions_outside_range_are_ignored():
    txs = [
        Transaction(date="2025-12-31", kind="addition", principal="999"),
        Transaction(date="2026-03-01", kind="payment", principal="999"),
    ]
    steps = compute_daily_steps(_mk_contract(rate_percent="0"), txs, [], date(2026, 2, 28))
    assert all(st.principal == Decimal("1000") for st in steps)
    assert not any(st.has_transactions for st in steps)


def test_accepted_date_formats():
    txs = [
        Transaction(date="05/01/2026", kind="addition", principal="10"),
        Transaction(date="2026-01-06T12:30:00", kind="addition", principal="10"),
        Transaction(date=datetime(2026, 1, 7, 8, 0), kind="addition", principal="10"),
    ]
    steps = compute_daily_steps(_mk_contract(rate_percent="0"), txs, [], "2026-01-07")
    by_day = {st.date: st for st in steps}
    assert by_day[date(2026, 1, 5)].added == Decimal("10")
    assert by_day[date(2026, 1, 6)].added == Decimal("10")
    assert by_day[date(2026, 1, 7)].principal == Decimal("1030")


def test_overpayment_is_not_an_error():
    txs = [Transaction(date="2026-01-02", kind="payment", principal="1500", interest="50")]
    steps = compute_daily_steps(_mk_contract(regime="compound"), txs, [], date(2026, 1, 5))
    assert steps[1].principal == Decimal("-500")
    assert steps[1].interest < 0
    assert steps[1].capitalized_base <= steps[1].interest
    # nothing left to accrue on
    assert all(st.accrual == 0 for st in steps[2:])


def test_default_cutoff_is_today_in_reporting_timezone(monkeypatch):
    import loanfx.services.evolution as ev

    monkeypatch.setattr(ev, "today_local", lambda: date(2026, 1, 3))
    steps = compute_daily_steps(_mk_contract(), [], [])
    assert steps[-1].date == date(2026, 1, 3)


def test_decimal_overflow_surfaces_as_invalid_numeric():
    c = _mk_contract(principal=Decimal("1e999990"), rate_percent="0", category="asset")
    rates = [
        RateEntry(date=date(2026, 1, 1), buy=Decimal("1")),
        RateEntry(date=date(2026, 1, 2), buy=Decimal("1e20")),
    ]
    with pytest.raises(InvalidNumeric) as exc:
        evolve(c, [], rates, date(2026, 1, 2))
    assert exc.value.field == "evolution"
    assert exc.value.code == "invalid_numeric"


def test_daily_rate_uses_configured_precision():
    c = _mk_contract(principal="1", rate_percent="12", day_count_base=360)
    steps = compute_daily_steps(c, [], [], date(2026, 1, 2))
    digits = steps[1].accrual.as_tuple().digits
    assert len(digits) == settings.decimal_precision
    assert set(digits) == {3}
