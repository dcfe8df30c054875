from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

ZERO = Decimal("0")


@dataclass(frozen=True)
class DailyStep:
    """True per-day movement, before any presentation buffering."""

    date: date
    rate: Decimal
    prev_rate: Decimal

    is_first_day: bool
    has_transactions: bool
    has_payment: bool
    is_month_end: bool

    opening_principal: Decimal
    opening_interest: Decimal

    accrual: Decimal
    variation_principal: Decimal
    variation_interest: Decimal
    active_variation_principal: Decimal
    passive_variation_principal: Decimal
    active_variation_interest: Decimal
    passive_variation_interest: Decimal

    added: Decimal
    paid_principal: Decimal
    paid_interest: Decimal

    principal: Decimal
    interest: Decimal
    capitalized_base: Decimal
    capitalized: bool

    @property
    def principal_flow(self) -> Decimal:
        return self.added - self.paid_principal

    @property
    def paid(self) -> Decimal:
        return self.paid_principal + self.paid_interest

    @property
    def accrual_domestic(self) -> Decimal:
        return self.accrual * self.rate


@dataclass(frozen=True)
class DailyLogEntry:
    date: date
    rate: Decimal
    interest: Decimal
    interest_domestic: Decimal
    principal_flow: Decimal
    active_variation_principal: Decimal
    passive_variation_principal: Decimal
    active_variation_interest: Decimal
    passive_variation_interest: Decimal
    paid: Decimal
    principal: Decimal
    interest_balance: Decimal

    @property
    def principal_domestic(self) -> Decimal:
        return self.principal * self.rate

    @property
    def interest_domestic_balance(self) -> Decimal:
        return self.interest_balance * self.rate

    @property
    def total_domestic(self) -> Decimal:
        return (self.principal + self.interest_balance) * self.rate


@dataclass
class MonthlyRecord:
    label: str
    period_start: date
    opening_principal: Decimal
    opening_interest: Decimal
    opening_rate: Decimal

    rate: Decimal = ZERO
    closing_principal: Decimal = ZERO
    closing_interest: Decimal = ZERO

    interest: Decimal = ZERO
    interest_domestic: Decimal = ZERO
    paid: Decimal = ZERO
    variation_principal: Decimal = ZERO
    variation_interest: Decimal = ZERO
    active_variation_principal: Decimal = ZERO
    passive_variation_principal: Decimal = ZERO
    active_variation_interest: Decimal = ZERO
    passive_variation_interest: Decimal = ZERO

    daily_logs: list[DailyLogEntry] = field(default_factory=list)

    @property
    def opening_principal_domestic(self) -> Decimal:
        return self.opening_principal * self.opening_rate

    @property
    def opening_interest_domestic(self) -> Decimal:
        return self.opening_interest * self.opening_rate

    @property
    def closing_principal_domestic(self) -> Decimal:
        return self.closing_principal * self.rate

    @property
    def closing_interest_domestic(self) -> Decimal:
        return self.closing_interest * self.rate

    @property
    def closing_total_domestic(self) -> Decimal:
        return (self.closing_principal + self.closing_interest) * self.rate


@dataclass(frozen=True)
class BalanceSnapshot:
    balance: Decimal = ZERO
    balance_domestic: Decimal = ZERO
    rate: Decimal = Decimal("1")
    is_liquidated: bool = False
