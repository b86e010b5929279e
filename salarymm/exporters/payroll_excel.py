"""Monthly payroll workbook (one row per employee plus a totals row)."""
from __future__ import annotations

from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Iterable

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side

from salarymm.domain import Employee, PayrollRecord

HEADERS = [
    "No.",
    "Employee code",
    "Full name",
    "Department",
    "Position",
    "Base salary",
    "Allowances",
    "Bonus",
    "Gross salary",
    "Social insurance",
    "Health insurance",
    "Unemployment insurance",
    "Personal income tax",
    "Total deductions",
    "Net salary",
]
MONEY_FIELDS = [
    "base_salary",
    "total_allowances",
    "total_bonus",
    "gross_salary",
    "social_insurance",
    "health_insurance",
    "unemployment_insurance",
    "personal_income_tax",
    "total_deductions",
    "net_salary",
]
COLUMN_WIDTHS = [5, 14, 24, 16, 18, 15, 13, 13, 15, 14, 14, 14, 15, 15, 15]
FIRST_MONEY_COLUMN = 6
MONEY_FORMAT = "#,##0"

_THIN = Side(style="thin")
_MEDIUM = Side(style="medium")
_HEADER_FILL = PatternFill(start_color="4F46E5", end_color="4F46E5", fill_type="solid")
_STRIPE_FILL = PatternFill(start_color="F8F9FA", end_color="F8F9FA", fill_type="solid")
_TOTAL_FILL = PatternFill(start_color="E8F5E9", end_color="E8F5E9", fill_type="solid")


def export_payroll_excel(
    path: Path,
    rows: Iterable[PayrollRecord],
    month: int,
    year: int,
    employees: dict[str, Employee] | None = None,
    exported_on: date | None = None,
) -> Path:
    employees = employees or {}
    records = list(rows)
    last_column = len(HEADERS)

    wb = Workbook()
    ws = wb.active
    ws.title = f"Payroll {month:02d}-{year}"

    ws.merge_cells(start_row=1, start_column=1, end_row=1, end_column=last_column)
    ws.cell(row=1, column=1, value=f"PAYROLL {month:02d}/{year}")
    ws.cell(row=1, column=1).font = Font(size=16, bold=True, color="4F46E5")
    ws.cell(row=1, column=1).alignment = Alignment(horizontal="center")

    ws.merge_cells(start_row=2, start_column=1, end_row=2, end_column=last_column)
    ws.cell(row=2, column=1, value=f"Exported: {(exported_on or date.today()).strftime('%d/%m/%Y')}")
    ws.cell(row=2, column=1).font = Font(size=10, italic=True)
    ws.cell(row=2, column=1).alignment = Alignment(horizontal="center")

    header_row = 3
    for col_idx, header in enumerate(HEADERS, start=1):
        cell = ws.cell(row=header_row, column=col_idx, value=header)
        cell.font = Font(bold=True, color="FFFFFF")
        cell.fill = _HEADER_FILL
        cell.alignment = Alignment(horizontal="center", vertical="center", wrap_text=True)
        cell.border = Border(left=_THIN, right=_THIN, top=_THIN, bottom=_THIN)

    row = header_row + 1
    for index, record in enumerate(records):
        employee = employees.get(record.employee_id)
        values = [
            index + 1,
            record.employee_code,
            record.full_name,
            (employee.department if employee else None) or "",
            (employee.position if employee else None) or "",
            *(float(getattr(record, name)) for name in MONEY_FIELDS),
        ]
        for col_idx, value in enumerate(values, start=1):
            cell = ws.cell(row=row, column=col_idx, value=value)
            cell.border = Border(left=_THIN, right=_THIN, top=_THIN, bottom=_THIN)
            if col_idx >= FIRST_MONEY_COLUMN:
                cell.number_format = MONEY_FORMAT
                cell.alignment = Alignment(horizontal="right")
            if index % 2 == 1:
                cell.fill = _STRIPE_FILL
        row += 1

    if records:
        totals = [sum((getattr(record, name) for record in records), Decimal("0")) for name in MONEY_FIELDS]
        values = ["", "", f"TOTAL ({len(records)} employees)", "", "", *(float(value) for value in totals)]
        for col_idx, value in enumerate(values, start=1):
            cell = ws.cell(row=row, column=col_idx, value=value)
            cell.font = Font(bold=True)
            cell.fill = _TOTAL_FILL
            cell.border = Border(left=_THIN, right=_THIN, top=_MEDIUM, bottom=_MEDIUM)
            if col_idx >= FIRST_MONEY_COLUMN:
                cell.number_format = MONEY_FORMAT
                cell.alignment = Alignment(horizontal="right")

    for col_idx, width in enumerate(COLUMN_WIDTHS, start=1):
        ws.column_dimensions[ws.cell(row=header_row, column=col_idx).column_letter].width = width

    path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(path)
    return path
