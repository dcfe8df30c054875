from __future__ import annotations

import calendar
import re
from datetime import date, datetime, timedelta

from loanfx.services.errors import InvalidDate

_ISO = re.compile(r"^(\d{4})-(\d{2})-(\d{2})(?:[T ].*)?$")
_BR = re.compile(r"^(\d{2})/(\d{2})/(\d{4})$")
_MONTH = re.compile(r"^(\d{4})-(\d{2})$")


def parse_date(v, field: str = "date") -> date:
    """Accept a date, a datetime, ``YYYY-MM-DD[...]`` or ``DD/MM/YYYY``."""
    if isinstance(v, datetime):
        return v.date()
    if isinstance(v, date):
        return v
    if not isinstance(v, str):
        raise InvalidDate(field, v)

    s = v.strip()
    m = _ISO.match(s)
    if m:
        y, mo, d = int(m.group(1)), int(m.group(2)), int(m.group(3))
    else:
        m = _BR.match(s)
        if not m:
            raise InvalidDate(field, v)
        d, mo, y = int(m.group(1)), int(m.group(2)), int(m.group(3))

    try:
        return date(y, mo, d)
    except ValueError:
        raise InvalidDate(field, v) from None


def month_end(d: date) -> date:
    return date(d.year, d.month, calendar.monthrange(d.year, d.month)[1])


def is_month_end(d: date) -> bool:
    return (d + timedelta(days=1)).month != d.month


def is_year_end(d: date) -> bool:
    return d.month == 12 and d.day == 31


def month_label(d: date) -> str:
    return f"{d.month:02d}/{d.year:04d}"


def parse_reference_month(v: str) -> date:
    """``YYYY-MM`` -> last calendar day of that month."""
    m = _MONTH.match((v or "").strip())
    if not m:
        raise InvalidDate("reference_month", v)
    y, mo = int(m.group(1)), int(m.group(2))
    if not 1 <= mo <= 12:
        raise InvalidDate("reference_month", v)
    return month_end(date(y, mo, 1))
