from __future__ import annotations

from pathlib import Path
from typing import Iterable

import pandas as pd

from salarymm.domain import Employee, PayrollRecord


def export_bank_payroll(
    path: Path,
    rows: Iterable[PayrollRecord],
    employees: dict[str, Employee] | None = None,
) -> Path:
    employees = employees or {}
    records = []
    for row in rows:
        employee = employees.get(row.employee_id)
        records.append({
            "employee_code": row.employee_code,
            "full_name": row.full_name,
            "bank_name": employee.bank_name if employee else None,
            "bank_account": employee.bank_account if employee else None,
            "amount": str(row.net_salary),
            "period": f"{row.year}-{row.month:02d}",
        })
    df = pd.DataFrame(
        records,
        columns=["employee_code", "full_name", "bank_name", "bank_account", "amount", "period"],
    )
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=False)
    return path
