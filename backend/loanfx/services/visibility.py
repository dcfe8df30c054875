"""Presentation rules on top of the true daily movement.

Interest and FX variation are only *recognized* in a visible row on a
payment day or at month end; until then they accumulate in a buffer.
Principal flows are always shown on the day they happen. Monthly totals
use the true daily deltas and are unaffected by the buffer.
"""
from __future__ import annotations

from dataclasses import dataclass, fields
from decimal import Decimal
from typing import Iterable

from loanfx.models.evolution import DailyLogEntry, DailyStep, MonthlyRecord
from loanfx.utils.dates import month_label

ZERO = Decimal("0")


@dataclass
class _Buffer:
    interest: Decimal = ZERO
    interest_domestic: Decimal = ZERO
    active_variation_principal: Decimal = ZERO
    passive_variation_principal: Decimal = ZERO
    active_variation_interest: Decimal = ZERO
    passive_variation_interest: Decimal = ZERO

    def add(self, st: DailyStep) -> None:
        self.interest += st.accrual
        self.interest_domestic += st.accrual_domestic
        self.active_variation_principal += st.active_variation_principal
        self.passive_variation_principal += st.passive_variation_principal
        self.active_variation_interest += st.active_variation_interest
        self.passive_variation_interest += st.passive_variation_interest

    def flush(self) -> "_Buffer":
        out = _Buffer(**{f.name: getattr(self, f.name) for f in fields(self)})
        for f in fields(self):
            setattr(self, f.name, ZERO)
        return out


def should_log(st: DailyStep) -> bool:
    return st.is_first_day or st.has_transactions or st.is_month_end


def should_flush(st: DailyStep) -> bool:
    return not st.is_first_day and (st.has_payment or st.is_month_end)


def _accumulate(rec: MonthlyRecord, st: DailyStep) -> None:
    rec.interest += st.accrual
    rec.interest_domestic += st.accrual_domestic
    rec.paid += st.paid
    rec.variation_principal += st.variation_principal
    rec.variation_interest += st.variation_interest
    rec.active_variation_principal += st.active_variation_principal
    rec.passive_variation_principal += st.passive_variation_principal
    rec.active_variation_interest += st.active_variation_interest
    rec.passive_variation_interest += st.passive_variation_interest
    rec.rate = st.rate
    rec.closing_principal = st.principal
    rec.closing_interest = st.interest


def build_monthly_records(steps: Iterable[DailyStep], log_every_day: bool = False) -> list[MonthlyRecord]:
    records: list[MonthlyRecord] = []
    rec: MonthlyRecord | None = None
    buf = _Buffer()

    for st in steps:
        label = month_label(st.date)
        if rec is None or rec.label != label:
            rec = MonthlyRecord(
                label=label,
                period_start=st.date.replace(day=1),
                opening_principal=st.opening_principal,
                opening_interest=st.opening_interest,
                opening_rate=st.prev_rate,
            )
            records.append(rec)

        buf.add(st)
        _accumulate(rec, st)

        if not (log_every_day or should_log(st)):
            continue

        shown = buf.flush() if should_flush(st) else _Buffer()
        rec.daily_logs.append(
            DailyLogEntry(
                date=st.date,
                rate=st.rate,
                interest=shown.interest,
                interest_domestic=shown.interest_domestic,
                principal_flow=st.principal_flow,
                active_variation_principal=shown.active_variation_principal,
                passive_variation_principal=shown.passive_variation_principal,
                active_variation_interest=shown.active_variation_interest,
                passive_variation_interest=shown.passive_variation_interest,
                paid=st.paid,
                principal=st.principal,
                interest_balance=st.interest,
            )
        )

    return records
