from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal


@dataclass(frozen=True)
class RateEntry:
    date: date | str
    buy: Decimal | float | int | str
    sell: Decimal | float | int | str | None = None


@dataclass(frozen=True)
class RatePair:
    buy: Decimal
    sell: Decimal

    @classmethod
    def flat(cls, v: Decimal) -> "RatePair":
        return cls(buy=v, sell=v)

    def side(self, asset: bool) -> Decimal:
        """Active side: buy for assets, sell for liabilities, falling back to buy then 1."""
        v = self.buy if asset else self.sell
        if v:
            return v
        if self.buy:
            return self.buy
        return Decimal("1")
