from pydantic import BaseModel

from loanfx.schemas.contract import ContractIn
from loanfx.schemas.rate import RateIn
from loanfx.schemas.transaction import TxIn

class LoanIn(BaseModel):
    key: str
    contract: ContractIn
    transactions: list[TxIn] = []
    rates: list[RateIn] = []

class BalancesRequest(BaseModel):
    reference_month: str
    loans: list[LoanIn]

class BalanceOut(BaseModel):
    balance: float
    balance_domestic: float
    rate: float
    is_liquidated: bool

    class Config:
        from_attributes = True
