from pydantic import BaseModel, field_validator
from typing import Literal

from loanfx.models.contract import Contract


def _finite_non_negative(v: float | None):
    if v is None:
        return None
    if v != v:
        raise ValueError("must be a number")
    if v == float("inf") or v == float("-inf"):
        raise ValueError("must be finite")
    if v < 0:
        raise ValueError("must not be negative")
    return v


class ContractIn(BaseModel):
    start: str
    principal: float
    currency: str = "USD"
    rate_percent: float = 0.0
    rate_period: Literal["monthly", "annual"] = "annual"
    regime: Literal["simple", "compound"] = "simple"
    capitalization: Literal["daily", "monthly", "annual"] = "monthly"
    day_count_base: int | None = None
    category: Literal["asset", "liability"] = "liability"
    fixed_rate: float | None = None
    contract_number: str | None = None
    institution: str | None = None

    @field_validator("principal", "rate_percent", "fixed_rate")
    @classmethod
    def numbers_must_be_finite(cls, v: float | None):
        return _finite_non_negative(v)

    @field_validator("currency")
    @classmethod
    def currency_upper(cls, v: str):
        v = (v or "").strip().upper()
        if not v:
            raise ValueError("currency is required")
        return v

    def to_domain(self) -> Contract:
        return Contract(
            start=self.start,
            principal=self.principal,
            currency=self.currency,
            rate_percent=self.rate_percent,
            rate_period=self.rate_period,
            regime=self.regime,
            capitalization=self.capitalization,
            day_count_base=self.day_count_base,
            category=self.category,
            fixed_rate=self.fixed_rate,
            contract_number=self.contract_number,
            institution=self.institution,
        )
