from pydantic import BaseModel
from datetime import date

from loanfx.schemas.contract import ContractIn
from loanfx.schemas.rate import RateIn
from loanfx.schemas.transaction import TxIn

class EvolutionRequest(BaseModel):
    contract: ContractIn
    transactions: list[TxIn] = []
    rates: list[RateIn] = []
    cutoff: str | None = None
    log_every_day: bool = False

class DailyLogOut(BaseModel):
    date: date
    rate: float
    interest: float
    interest_domestic: float
    principal_flow: float
    active_variation_principal: float
    passive_variation_principal: float
    active_variation_interest: float
    passive_variation_interest: float
    paid: float
    principal: float
    interest_balance: float
    principal_domestic: float
    interest_domestic_balance: float
    total_domestic: float

    class Config:
        from_attributes = True

class MonthlyRecordOut(BaseModel):
    label: str
    period_start: date
    rate: float
    opening_rate: float
    opening_principal: float
    opening_interest: float
    opening_principal_domestic: float
    opening_interest_domestic: float
    closing_principal: float
    closing_interest: float
    closing_principal_domestic: float
    closing_interest_domestic: float
    closing_total_domestic: float
    interest: float
    interest_domestic: float
    paid: float
    variation_principal: float
    variation_interest: float
    active_variation_principal: float
    passive_variation_principal: float
    active_variation_interest: float
    passive_variation_interest: float
    daily_logs: list[DailyLogOut]

    class Config:
        from_attributes = True
