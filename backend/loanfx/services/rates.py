from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Iterable

from loanfx.models.rate import RateEntry, RatePair
from loanfx.utils.dates import parse_date
from loanfx.utils.numbers import to_dec, to_dec_opt

ONE = Decimal("1")


class RateBook:
    """Date-indexed FX series with stale-rate carry-forward.

    Entries are keyed by date, so input order does not matter; a later
    duplicate for the same date replaces the earlier one.
    """

    def __init__(self, entries: Iterable[RateEntry], fixed_first_day: Decimal | None = None):
        self._by_day: dict[date, RatePair] = {}
        for i, e in enumerate(entries or ()):
            d = parse_date(e.date, f"rates[{i}].date")
            buy = to_dec(e.buy, f"rates[{i}].buy")
            sell = to_dec_opt(e.sell, f"rates[{i}].sell")
            self._by_day[d] = RatePair(buy=buy, sell=buy if sell is None else sell)

        self.fixed_first_day = fixed_first_day
        self.last = RatePair.flat(fixed_first_day if fixed_first_day else ONE)

    def resolve(self, d: date, is_first_day: bool, manual: Decimal | None = None) -> RatePair:
        """Manual rate > fixed day-one rate > series entry > previous day's pair."""
        if manual:
            pair = RatePair.flat(manual)
        elif is_first_day and self.fixed_first_day:
            pair = RatePair.flat(self.fixed_first_day)
        else:
            pair = self._by_day.get(d) or self.last
        self.last = pair
        return pair
