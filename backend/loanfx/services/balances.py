from __future__ import annotations

import logging
from decimal import Decimal
from typing import Hashable, Iterable, Sequence

from loanfx.core.config import settings
from loanfx.models.contract import Contract
from loanfx.models.evolution import BalanceSnapshot, MonthlyRecord
from loanfx.models.rate import RateEntry
from loanfx.models.transaction import Transaction
from loanfx.services.errors import EvolutionError
from loanfx.services.evolution import evolve
from loanfx.utils.dates import parse_date, parse_reference_month

log = logging.getLogger(__name__)

LoanInput = tuple[Hashable, Contract, Sequence[Transaction], Sequence[RateEntry]]


def snapshot(records: list[MonthlyRecord]) -> BalanceSnapshot:
    """Balance at the last visible daily entry of an evolution."""
    if not records or not records[-1].daily_logs:
        return BalanceSnapshot()

    last = records[-1].daily_logs[-1]
    balance = last.principal + last.interest_balance
    return BalanceSnapshot(
        balance=balance,
        balance_domestic=last.total_domestic,
        rate=last.rate,
        is_liquidated=balance <= Decimal(settings.liquidation_threshold),
    )


def snapshots_at(loans: Iterable[LoanInput], reference_month: str) -> dict[Hashable, BalanceSnapshot]:
    ref = parse_reference_month(reference_month)

    out: dict[Hashable, BalanceSnapshot] = {}
    for key, contract, transactions, rates in loans:
        try:
            if parse_date(contract.start, "contract.start") > ref:
                out[key] = BalanceSnapshot()
                continue
            out[key] = snapshot(evolve(contract, transactions, rates, ref))
        except EvolutionError as e:
            log.exception("balance snapshot failed for loan %s", key, exc_info=e)
            out[key] = BalanceSnapshot()

    log.debug("computed %d balance snapshots at %s", len(out), ref)
    return out
