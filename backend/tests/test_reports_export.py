from datetime import date
from decimal import Decimal

import pytest

from loanfx.models.contract import Contract
from loanfx.models.rate import RateEntry
from loanfx.models.transaction import Transaction
from loanfx.services.balances import snapshot
from loanfx.services.evolution import evolve
from loanfx.services.reports import (
    CONTRACT_SHEET,
    DAILY_SHEET,
    MONTHLY_SHEET,
    SUMMARY_SHEET,
    build_evolution_report,
    build_summary_report,
)


def _mk_contract(**kw) -> Contract:
    base = dict(
        start=date(2026, 1, 1),
        principal=Decimal("123456789.00"),
        rate_percent=Decimal("7.123456"),
        currency="USD",
        contract_number="CTR-001",
        institution="First Bank",
    )
    base.update(kw)
    return Contract(**base)


def test_evolution_export_has_unrounded_daily_values(tmp_path):
    pytest.importorskip("openpyxl")
    from openpyxl import load_workbook

    c = _mk_contract()
    txs = [Transaction(date=date(2026, 1, 10), kind="payment", principal=Decimal("1000"), interest=Decimal("10"))]
    rates = [RateEntry(date=date(2026, 1, 1), buy=Decimal("5.4321"))]
    records = evolve(c, txs, rates, date(2026, 2, 28))

    out = tmp_path / "evolution.xlsx"
    build_evolution_report(c, records, str(out))

    wb = load_workbook(out)
    assert wb.sheetnames == [DAILY_SHEET, MONTHLY_SHEET, CONTRACT_SHEET]

    ws = wb[DAILY_SHEET]
    assert ws["A4"].value == "Date"
    assert ws["C4"].value == "Interest (USD)"

    # Jan 1, Jan 10, Jan 31, Feb 28 + totals row
    assert ws.max_row == 4 + 4 + 1
    assert ws["A9"].value == "Totals"

    interest_jan10 = Decimal(str(ws["C6"].value))
    assert interest_jan10 > 0
    assert interest_jan10 != interest_jan10.quantize(Decimal("0.01"))

    monthly = wb[MONTHLY_SHEET]
    assert monthly["A5"].value == "01/2026"
    assert monthly["A6"].value == "02/2026"
    assert monthly["O5"].value == 3


def test_evolution_export_without_rows(tmp_path):
    pytest.importorskip("openpyxl")
    from openpyxl import load_workbook

    c = _mk_contract()
    out = tmp_path / "empty.xlsx"
    build_evolution_report(c, [], str(out))

    wb = load_workbook(out)
    assert wb[DAILY_SHEET].max_row == 4
    assert wb[CONTRACT_SHEET]["A11"].value == "Note"


def test_summary_report_lists_each_loan(tmp_path):
    pytest.importorskip("openpyxl")
    from openpyxl import load_workbook

    a = _mk_contract()
    b = _mk_contract(contract_number="CTR-002", principal=Decimal("100"), rate_percent=Decimal("0"))
    paid = [Transaction(date=date(2026, 1, 5), kind="payment", principal=Decimal("100"))]
    entries = [
        (a, snapshot(evolve(a, [], [], date(2026, 1, 31)))),
        (b, snapshot(evolve(b, paid, [], date(2026, 1, 31)))),
    ]

    out = tmp_path / "summary.xlsx"
    build_summary_report(entries, "2026-01", str(out))

    ws = load_workbook(out)[SUMMARY_SHEET]
    assert ws["A5"].value == "CTR-001"
    assert ws["I5"].value == "Active"
    assert ws["A6"].value == "CTR-002"
    assert ws["I6"].value == "Liquidated"
