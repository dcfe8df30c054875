from fastapi import APIRouter, HTTPException

from loanfx.schemas.balance import BalanceOut, BalancesRequest
from loanfx.services.balances import snapshots_at
from loanfx.services.errors import InvalidDate

router = APIRouter(prefix="/balances", tags=["balances"])


@router.post("", response_model=dict[str, BalanceOut])
def balances(body: BalancesRequest):
    loans = [
        (
            ln.key,
            ln.contract.to_domain(),
            [t.to_domain() for t in ln.transactions],
            [r.to_domain() for r in ln.rates],
        )
        for ln in body.loans
    ]
    try:
        snaps = snapshots_at(loans, body.reference_month)
    except InvalidDate as e:
        raise HTTPException(status_code=422, detail=e.code)
    return {k: BalanceOut.model_validate(v) for k, v in snaps.items()}
