from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Literal

RatePeriod = Literal["monthly", "annual"]
Regime = Literal["simple", "compound"]
Capitalization = Literal["daily", "monthly", "annual"]
Category = Literal["asset", "liability"]


@dataclass(frozen=True)
class Contract:
    start: date | str
    principal: Decimal | float | int | str
    rate_percent: Decimal | float | int | str = 0
    rate_period: RatePeriod = "annual"
    regime: Regime = "simple"
    capitalization: Capitalization = "monthly"  # only read under compound
    category: Category = "liability"
    currency: str = "USD"
    day_count_base: int | None = None  # None -> settings.day_count_base
    fixed_rate: Decimal | float | int | str | None = None  # day-one FX override

    contract_number: str | None = None
    institution: str | None = None
