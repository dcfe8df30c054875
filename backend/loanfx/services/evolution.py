from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal, InvalidOperation, Overflow, localcontext
from typing import Iterable

from loanfx.core.config import settings
from loanfx.models.contract import Contract
from loanfx.models.evolution import DailyStep, MonthlyRecord
from loanfx.models.rate import RateEntry
from loanfx.models.transaction import Transaction
from loanfx.services.errors import InvalidField, InvalidNumeric, RangeTooLong
from loanfx.services.rates import RateBook
from loanfx.services.visibility import build_monthly_records
from loanfx.utils.dates import is_month_end, is_year_end, parse_date
from loanfx.utils.numbers import to_dec, to_dec_opt
from loanfx.utils.timezone import today_local

ZERO = Decimal("0")

_RATE_PERIODS = ("monthly", "annual")
_REGIMES = ("simple", "compound")
_CAPITALIZATIONS = ("daily", "monthly", "annual")
_CATEGORIES = ("asset", "liability")
_TX_KINDS = ("addition", "payment")


def _choice(v, field: str, allowed: tuple[str, ...]) -> str:
    if v not in allowed:
        raise InvalidField(field, v, allowed)
    return v


@dataclass(frozen=True)
class _Terms:
    start: date
    principal: Decimal
    daily_rate: Decimal
    compound: bool
    capitalization: str
    asset: bool
    fixed_rate: Decimal | None

    @classmethod
    def from_contract(cls, c: Contract) -> "_Terms":
        start = parse_date(c.start, "contract.start")
        principal = to_dec(c.principal, "contract.principal")
        rate_percent = to_dec(c.rate_percent, "contract.rate_percent")
        period = _choice(c.rate_period, "contract.rate_period", _RATE_PERIODS)
        regime = _choice(c.regime, "contract.regime", _REGIMES)
        cap = _choice(c.capitalization, "contract.capitalization", _CAPITALIZATIONS)
        category = _choice(c.category, "contract.category", _CATEGORIES)

        base = settings.day_count_base if c.day_count_base is None else c.day_count_base
        if isinstance(base, bool) or not isinstance(base, int) or base <= 0:
            raise InvalidNumeric("contract.day_count_base", base, "must be a positive integer")

        divisor = Decimal(base) if period == "annual" else Decimal("30")
        return cls(
            start=start,
            principal=principal,
            daily_rate=(rate_percent / Decimal("100")) / divisor,
            compound=regime == "compound",
            capitalization=cap,
            asset=category == "asset",
            fixed_rate=to_dec_opt(c.fixed_rate, "contract.fixed_rate"),
        )


@dataclass(frozen=True)
class _Tx:
    payment: bool
    principal: Decimal
    interest: Decimal
    rate: Decimal | None


def _index_transactions(transactions: Iterable[Transaction], start: date, end: date) -> dict[date, list[_Tx]]:
    out: dict[date, list[_Tx]] = {}
    for i, t in enumerate(transactions or ()):
        d = parse_date(t.date, f"transactions[{i}].date")
        kind = _choice(t.kind, f"transactions[{i}].kind", _TX_KINDS)
        tx = _Tx(
            payment=kind == "payment",
            principal=to_dec(t.principal or 0, f"transactions[{i}].principal"),
            interest=to_dec(t.interest or 0, f"transactions[{i}].interest"),
            rate=to_dec_opt(t.rate, f"transactions[{i}].rate"),
        )
        if start <= d <= end:
            out.setdefault(d, []).append(tx)
    return out


def _capitalizes(capitalization: str, day: date) -> bool:
    if capitalization == "daily":
        return True
    if capitalization == "monthly":
        return is_month_end(day)
    return is_year_end(day)


def _bucket(variation: Decimal, asset: bool) -> tuple[Decimal, Decimal]:
    """Split a signed variation into (active, passive) magnitudes."""
    gain = variation > 0 if asset else variation < 0
    if gain:
        return abs(variation), ZERO
    return ZERO, abs(variation)


def compute_daily_steps(
    contract: Contract,
    transactions: Iterable[Transaction] = (),
    rate_series: Iterable[RateEntry] = (),
    cutoff: date | str | None = None,
) -> list[DailyStep]:
    with localcontext() as ctx:
        ctx.prec = settings.decimal_precision

        terms = _Terms.from_contract(contract)
        end = today_local() if cutoff is None else parse_date(cutoff, "cutoff")
        tx_by_day = _index_transactions(transactions, terms.start, end)
        book = RateBook(rate_series, terms.fixed_rate)

        if end < terms.start:
            return []

        n_days = (end - terms.start).days + 1
        if n_days > settings.max_evolution_days:
            raise RangeTooLong(n_days, settings.max_evolution_days)

        try:
            return _walk(terms, end, tx_by_day, book)
        except (Overflow, InvalidOperation) as e:
            raise InvalidNumeric("evolution", type(e).__name__, "left the representable decimal range") from None


def _walk(terms: _Terms, end: date, tx_by_day: dict[date, list[_Tx]], book: RateBook) -> list[DailyStep]:
    principal = terms.principal
    interest = ZERO
    cap_base = ZERO

    steps: list[DailyStep] = []
    day = terms.start
    while day <= end:
        first = day == terms.start
        todays = tx_by_day.get(day, [])
        manual = next((t.rate for t in todays if t.rate), None)

        prev_rate = book.last.side(terms.asset)
        rate = book.resolve(day, first, manual).side(terms.asset)
        if first:
            prev_rate = rate

        accrual = ZERO
        if not first and (principal > 0 or interest > 0):
            if not terms.compound:
                base = principal
            elif terms.capitalization == "daily":
                base = principal + interest
            else:
                base = principal + cap_base
            accrual = base * terms.daily_rate

        var_p = ZERO
        var_i = ZERO
        if not first:
            delta = rate - prev_rate
            var_p = principal * delta
            var_i = interest * delta
        act_p, pas_p = _bucket(var_p, terms.asset)
        act_i, pas_i = _bucket(var_i, terms.asset)

        added = sum((t.principal for t in todays if not t.payment), ZERO)
        paid_p = sum((t.principal for t in todays if t.payment), ZERO)
        paid_i = sum((t.interest for t in todays if t.payment), ZERO)

        end_principal = principal + added - paid_p
        end_interest = interest + accrual - paid_i

        if cap_base > end_interest:
            cap_base = end_interest

        capitalized = False
        if terms.compound and end_interest > 0 and _capitalizes(terms.capitalization, day):
            cap_base = end_interest
            capitalized = True

        steps.append(
            DailyStep(
                date=day,
                rate=rate,
                prev_rate=prev_rate,
                is_first_day=first,
                has_transactions=bool(todays),
                has_payment=any(t.payment for t in todays),
                is_month_end=is_month_end(day),
                opening_principal=principal,
                opening_interest=interest,
                accrual=accrual,
                variation_principal=var_p,
                variation_interest=var_i,
                active_variation_principal=act_p,
                passive_variation_principal=pas_p,
                active_variation_interest=act_i,
                passive_variation_interest=pas_i,
                added=added,
                paid_principal=paid_p,
                paid_interest=paid_i,
                principal=end_principal,
                interest=end_interest,
                capitalized_base=cap_base,
                capitalized=capitalized,
            )
        )

        principal = end_principal
        interest = end_interest
        day = day + timedelta(days=1)

    return steps


def evolve(
    contract: Contract,
    transactions: Iterable[Transaction] = (),
    rate_series: Iterable[RateEntry] = (),
    cutoff: date | str | None = None,
    log_every_day: bool = False,
) -> list[MonthlyRecord]:
    """Day-by-day evolution of a loan from its start to ``cutoff``, grouped by month.

    Pure: performs no I/O and does not log. Raises ``EvolutionError``
    subclasses for unparsable dates, bad numbers, unknown enum values or
    a day range above ``settings.max_evolution_days``. A cutoff before
    the start date returns ``[]``.
    """
    steps = compute_daily_steps(contract, transactions, rate_series, cutoff)
    with localcontext() as ctx:
        ctx.prec = settings.decimal_precision
        try:
            return build_monthly_records(steps, log_every_day=log_every_day)
        except (Overflow, InvalidOperation) as e:
            raise InvalidNumeric("evolution", type(e).__name__, "left the representable decimal range") from None
