from __future__ import annotations

import logging
from datetime import date, datetime, time
from typing import Iterable

import xlsxwriter
from xlsxwriter.utility import xl_col_to_name

from loanfx.models.contract import Contract
from loanfx.models.evolution import BalanceSnapshot, MonthlyRecord
from loanfx.utils.dates import parse_date

log = logging.getLogger(__name__)

DAILY_SHEET = "Daily Evolution"
MONTHLY_SHEET = "Monthly Summary"
CONTRACT_SHEET = "Contract"
SUMMARY_SHEET = "Loans Summary"


def _formats(wb) -> dict:
    base_font = "Calibri"
    f = {
        "meta_label": wb.add_format({"bold": True, "font_name": base_font, "font_size": 11, "font_color": "#334155"}),
        "meta_value": wb.add_format({"font_name": base_font, "font_size": 11, "font_color": "#0f172a"}),
        "subtle": wb.add_format({"font_name": base_font, "font_size": 10, "font_color": "#64748b"}),
        "title": wb.add_format({"bold": True, "font_name": base_font, "font_size": 14, "font_color": "#0f172a"}),
        "header": wb.add_format(
            {
                "bold": True,
                "font_name": base_font,
                "font_size": 11,
                "bg_color": "#F1F5F9",
                "border": 1,
                "align": "center",
                "valign": "vcenter",
            }
        ),
        "date": wb.add_format({"font_name": base_font, "font_size": 11, "num_format": "dd/mm/yyyy", "border": 1}),
        "money2": wb.add_format(
            {"font_name": base_font, "font_size": 11, "num_format": "#,##0.00", "border": 1, "align": "right"}
        ),
        "money6": wb.add_format(
            {"font_name": base_font, "font_size": 11, "num_format": "#,##0.000000", "border": 1, "align": "right"}
        ),
        "rate4": wb.add_format(
            {"font_name": base_font, "font_size": 11, "num_format": "0.0000", "border": 1, "align": "right"}
        ),
        "text": wb.add_format({"font_name": base_font, "font_size": 11, "border": 1, "align": "left"}),
        "total_label": wb.add_format(
            {"bold": True, "font_name": base_font, "font_size": 11, "bg_color": "#F8FAFC", "border": 1}
        ),
        "total_money6": wb.add_format(
            {
                "bold": True,
                "font_name": base_font,
                "font_size": 11,
                "bg_color": "#F8FAFC",
                "border": 1,
                "num_format": "#,##0.000000",
                "align": "right",
            }
        ),
    }
    return f


def _col(c: int) -> str:
    return xl_col_to_name(c)


def _contract_header(ws, f, contract: Contract) -> None:
    ws.write(0, 0, "Contract", f["meta_label"])
    ws.write(0, 1, contract.contract_number or "n/a", f["meta_value"])
    ws.write(1, 0, "Institution", f["meta_label"])
    ws.write(1, 1, contract.institution or "n/a", f["meta_value"])
    ws.write(2, 0, "Currency", f["meta_label"])
    ws.write(2, 1, contract.currency, f["meta_value"])
    ws.write(2, 3, "Generated", f["meta_label"])
    ws.write(2, 4, datetime.now().strftime("%Y-%m-%d %H:%M"), f["subtle"])


def _write_daily(wb, f, contract: Contract, records: list[MonthlyRecord]) -> int:
    ws = wb.add_worksheet(DAILY_SHEET)
    ws.set_column(0, 0, 12)
    ws.set_column(1, 1, 10)
    ws.set_column(2, 14, 18)
    _contract_header(ws, f, contract)

    cur = contract.currency
    headers = [
        "Date",
        "Rate",
        f"Interest ({cur})",
        "Interest (domestic)",
        f"Principal Flow ({cur})",
        "Active Var. Principal",
        "Passive Var. Principal",
        "Active Var. Interest",
        "Passive Var. Interest",
        f"Paid ({cur})",
        f"Principal ({cur})",
        f"Accrued Interest ({cur})",
        "Principal (domestic)",
        "Accrued Interest (domestic)",
        "Total (domestic)",
    ]
    ws.set_row(3, 18)
    for c, h in enumerate(headers):
        ws.write(3, c, h, f["header"])
    ws.freeze_panes(4, 1)

    r = 4
    for rec in records:
        for e in rec.daily_logs:
            ws.write_datetime(r, 0, datetime.combine(e.date, time.min), f["date"])
            ws.write_number(r, 1, float(e.rate), f["rate4"])
            # Unrounded values; the number format only affects display
            values = [
                e.interest,
                e.interest_domestic,
                e.principal_flow,
                e.active_variation_principal,
                e.passive_variation_principal,
                e.active_variation_interest,
                e.passive_variation_interest,
                e.paid,
                e.principal,
                e.interest_balance,
                e.principal_domestic,
                e.interest_domestic_balance,
                e.total_domestic,
            ]
            for c, v in enumerate(values, start=2):
                ws.write_number(r, c, float(v), f["money6"])
            r += 1

    last_data_row = r - 1
    if last_data_row >= 4:
        ws.autofilter(3, 0, last_data_row, len(headers) - 1)

        last_excel = last_data_row + 1
        ws.write(r, 0, "Totals", f["total_label"])
        ws.write_blank(r, 1, None, f["total_label"])
        for c in range(2, 9):
            ws.write_formula(r, c, f"=SUM({_col(c)}5:{_col(c)}{last_excel})", f["total_money6"])
        for c in range(9, len(headers)):
            ws.write_blank(r, c, None, f["total_label"])

        ws.set_landscape()
        ws.fit_to_pages(1, 0)

    return last_data_row - 3


def _write_monthly(wb, f, contract: Contract, records: list[MonthlyRecord]) -> None:
    ws = wb.add_worksheet(MONTHLY_SHEET)
    ws.set_column(0, 0, 10)
    ws.set_column(1, 14, 18)
    _contract_header(ws, f, contract)

    headers = [
        "Month",
        "Rate",
        "Opening Principal",
        "Opening Interest",
        "Interest",
        "Interest (domestic)",
        "Paid",
        "Active Var. Principal",
        "Passive Var. Principal",
        "Active Var. Interest",
        "Passive Var. Interest",
        "Closing Principal",
        "Closing Interest",
        "Closing Total (domestic)",
        "Days Logged",
    ]
    ws.set_row(3, 18)
    for c, h in enumerate(headers):
        ws.write(3, c, h, f["header"])
    ws.freeze_panes(4, 1)

    r = 4
    for rec in records:
        ws.write(r, 0, rec.label, f["text"])
        ws.write_number(r, 1, float(rec.rate), f["rate4"])
        values = [
            rec.opening_principal,
            rec.opening_interest,
            rec.interest,
            rec.interest_domestic,
            rec.paid,
            rec.active_variation_principal,
            rec.passive_variation_principal,
            rec.active_variation_interest,
            rec.passive_variation_interest,
            rec.closing_principal,
            rec.closing_interest,
            rec.closing_total_domestic,
        ]
        for c, v in enumerate(values, start=2):
            ws.write_number(r, c, float(v), f["money6"])
        ws.write_number(r, 14, len(rec.daily_logs), f["text"])
        r += 1

    if r > 4:
        ws.autofilter(3, 0, r - 1, len(headers) - 1)
        ws.set_landscape()
        ws.fit_to_pages(1, 0)


def _write_contract(wb, f, contract: Contract, records: list[MonthlyRecord]) -> None:
    ws = wb.add_worksheet(CONTRACT_SHEET)
    ws.set_column(0, 0, 26)
    ws.set_column(1, 1, 40)
    ws.write(0, 0, "Loan Evolution", f["title"])

    items = [
        ("Contract", contract.contract_number or "n/a"),
        ("Institution", contract.institution or "n/a"),
        ("Currency", contract.currency),
        ("Category", contract.category),
        ("Start", str(contract.start)),
        ("Original Value", float(contract.principal)),
        ("Rate", f"{contract.rate_percent}% {contract.rate_period} ({contract.regime})"),
    ]
    if contract.regime == "compound":
        items.append(("Capitalization", contract.capitalization))

    r = 2
    for label, value in items:
        ws.write(r, 0, label, f["meta_label"])
        ws.write(r, 1, value, f["meta_value"])
        r += 1

    r += 1
    if records:
        last = records[-1]
        ws.write(r, 0, f"Balance at {last.label}", f["meta_label"])
        ws.write_number(r, 1, float(last.closing_principal + last.closing_interest), f["money6"])
        ws.write(r + 1, 0, "Balance (domestic)", f["meta_label"])
        ws.write_number(r + 1, 1, float(last.closing_total_domestic), f["money6"])
    else:
        ws.write(r, 0, "Note", f["meta_label"])
        ws.write(r, 1, "No evolution exists up to the selected cutoff.", f["subtle"])


def build_evolution_report(contract: Contract, records: list[MonthlyRecord], out_file) -> None:
    wb = xlsxwriter.Workbook(out_file, {"in_memory": True})
    f = _formats(wb)

    rows = _write_daily(wb, f, contract, records)
    _write_monthly(wb, f, contract, records)
    _write_contract(wb, f, contract, records)

    wb.close()
    log.info("evolution report written: contract=%s months=%d rows=%d", contract.contract_number, len(records), rows)


def build_summary_report(
    entries: Iterable[tuple[Contract, BalanceSnapshot]],
    reference_month: str,
    out_file,
) -> None:
    wb = xlsxwriter.Workbook(out_file, {"in_memory": True})
    f = _formats(wb)

    ws = wb.add_worksheet(SUMMARY_SHEET)
    ws.set_column(0, 2, 20)
    ws.set_column(3, 8, 18)

    ws.write(0, 0, "Loans Summary", f["title"])
    ws.write(1, 0, "Reference", f["meta_label"])
    ws.write(1, 1, reference_month, f["meta_value"])
    ws.write(2, 0, "Generated", f["meta_label"])
    ws.write(2, 1, date.today().isoformat(), f["subtle"])

    headers = [
        "Contract",
        "Institution",
        "Start",
        "Currency",
        "Original Value",
        "Rate",
        f"Balance {reference_month}",
        f"Balance {reference_month} (domestic)",
        "Status",
    ]
    for c, h in enumerate(headers):
        ws.write(3, c, h, f["header"])
    ws.freeze_panes(4, 0)

    r = 4
    for contract, snap in entries:
        start = parse_date(contract.start, "contract.start")
        ws.write(r, 0, contract.contract_number or "n/a", f["text"])
        ws.write(r, 1, contract.institution or "n/a", f["text"])
        ws.write_datetime(r, 2, datetime.combine(start, time.min), f["date"])
        ws.write(r, 3, contract.currency, f["text"])
        ws.write_number(r, 4, float(contract.principal), f["money2"])
        ws.write(r, 5, f"{contract.rate_percent}% {contract.rate_period}", f["text"])
        ws.write_number(r, 6, float(snap.balance), f["money6"])
        ws.write_number(r, 7, float(snap.balance_domestic), f["money6"])
        ws.write(r, 8, "Liquidated" if snap.is_liquidated else "Active", f["text"])
        r += 1

    if r > 4:
        ws.autofilter(3, 0, r - 1, len(headers) - 1)

    wb.close()
