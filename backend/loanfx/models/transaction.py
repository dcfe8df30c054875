from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Literal

TxKind = Literal["addition", "payment"]


@dataclass(frozen=True)
class Transaction:
    date: date | str
    kind: TxKind
    principal: Decimal | float | int | str = 0
    interest: Decimal | float | int | str = 0  # payments only
    rate: Decimal | float | int | str | None = None  # manual FX rate for this day
