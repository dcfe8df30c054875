from pydantic import BaseModel, field_validator

from loanfx.models.rate import RateEntry
from loanfx.schemas.contract import _finite_non_negative

class RateIn(BaseModel):
    date: str
    buy: float
    sell: float | None = None

    @field_validator("buy", "sell")
    @classmethod
    def rate_must_be_finite(cls, v: float | None):
        return _finite_non_negative(v)

    def to_domain(self) -> RateEntry:
        return RateEntry(date=self.date, buy=self.buy, sell=self.sell)
