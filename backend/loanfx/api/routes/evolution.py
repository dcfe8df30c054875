from __future__ import annotations

import logging
import re
from io import BytesIO

from fastapi import APIRouter, HTTPException
from fastapi.responses import StreamingResponse

from loanfx.models.evolution import MonthlyRecord
from loanfx.schemas.evolution import EvolutionRequest, MonthlyRecordOut
from loanfx.services.errors import EvolutionError
from loanfx.services.evolution import evolve
from loanfx.services.reports import build_evolution_report

log = logging.getLogger(__name__)

router = APIRouter(prefix="/evolution", tags=["evolution"])


def _safe_part(v: str | None) -> str:
    s = (v or "").strip()
    s = re.sub(r"\s+", "_", s)
    s = re.sub(r"[^A-Za-z0-9._-]+", "_", s)
    s = re.sub(r"_+", "_", s).strip("_")
    return (s[:40] or "loan")


def _run(body: EvolutionRequest) -> list[MonthlyRecord]:
    try:
        return evolve(
            body.contract.to_domain(),
            [t.to_domain() for t in body.transactions],
            [r.to_domain() for r in body.rates],
            body.cutoff,
            log_every_day=body.log_every_day,
        )
    except EvolutionError as e:
        log.warning("evolution rejected: %s", e)
        raise HTTPException(status_code=422, detail=e.code)


@router.post("", response_model=list[MonthlyRecordOut])
def evolution(body: EvolutionRequest):
    return [MonthlyRecordOut.model_validate(r) for r in _run(body)]


@router.post("/export")
def evolution_export(body: EvolutionRequest):
    records = _run(body)
    contract = body.contract.to_domain()

    buf = BytesIO()
    build_evolution_report(contract, records, buf)
    buf.seek(0)

    last = records[-1].label.replace("/", "-") if records else "empty"
    filename = f"{_safe_part(contract.institution)}_{_safe_part(contract.contract_number)}_{last}.xlsx"
    return StreamingResponse(
        buf,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
