from datetime import date, datetime
from zoneinfo import ZoneInfo

from loanfx.core.config import settings


def reporting_tz() -> ZoneInfo:
    return ZoneInfo(settings.timezone)


def now_local() -> datetime:
    return datetime.now(tz=reporting_tz())


def today_local() -> date:
    return now_local().date()
