"""Domain entities for payroll generation."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any

from salarymm.core.calculator import PayrollResult


class DuplicatePayrollError(Exception):
    """Raised when a payroll record already exists for an employee and period."""


@dataclass(slots=True)
class Employee:
    id: str
    employee_code: str
    full_name: str
    department: str | None = None
    position: str | None = None
    status: str = "ACTIVE"
    dependents: int = 0
    bank_name: str | None = None
    bank_account: str | None = None


@dataclass(slots=True)
class SalaryStructure:
    id: str
    employee_id: str
    base_salary: Decimal
    effective_date: date
    has_social_insurance: bool = True
    has_health_insurance: bool = True
    has_unemployment_insurance: bool = True


@dataclass(slots=True)
class Allowance:
    id: str
    employee_id: str
    type: str
    amount: Decimal
    is_active: bool = True


@dataclass(slots=True)
class Bonus:
    id: str
    employee_id: str
    type: str
    amount: Decimal
    month: int
    year: int
    status: str = "PENDING"
    reason: str | None = None


@dataclass(slots=True)
class PayrollRecord:
    """Persisted outcome of one calculator run, keyed by employee and period."""

    id: str
    employee_id: str
    employee_code: str
    full_name: str
    salary_structure_id: str
    month: int
    year: int
    base_salary: Decimal
    total_allowances: Decimal
    total_bonus: Decimal
    gross_salary: Decimal
    social_insurance: Decimal
    health_insurance: Decimal
    unemployment_insurance: Decimal
    personal_income_tax: Decimal
    total_deductions: Decimal
    net_salary: Decimal
    status: str = "DRAFT"
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def period_key(self) -> tuple[str, int, int]:
        return (self.employee_id, self.month, self.year)

    @classmethod
    def from_result(
        cls,
        record_id: str,
        employee: Employee,
        structure: SalaryStructure,
        month: int,
        year: int,
        result: PayrollResult,
    ) -> "PayrollRecord":
        return cls(
            id=record_id,
            employee_id=employee.id,
            employee_code=employee.employee_code,
            full_name=employee.full_name,
            salary_structure_id=structure.id,
            month=month,
            year=year,
            **result.as_dict(),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
