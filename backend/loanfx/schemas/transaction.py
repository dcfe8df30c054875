from pydantic import BaseModel, field_validator
from typing import Literal

from loanfx.models.transaction import Transaction
from loanfx.schemas.contract import _finite_non_negative

TxKind = Literal["addition", "payment"]

class TxIn(BaseModel):
    date: str
    kind: TxKind = "payment"
    principal: float = 0.0
    interest: float = 0.0
    rate: float | None = None

    @field_validator("principal", "interest", "rate")
    @classmethod
    def amounts_must_be_finite(cls, v: float | None):
        return _finite_non_negative(v)

    def to_domain(self) -> Transaction:
        return Transaction(
            date=self.date,
            kind=self.kind,
            principal=self.principal,
            interest=self.interest,
            rate=self.rate,
        )
