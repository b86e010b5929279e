"""Application service layer for payroll generation."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any

from salarymm.application.errors import ConflictError, NotFoundError
from salarymm.core.calculator import PayrollInput, PayrollResult, calculate_payroll
from salarymm.core.regulation import RegulationParams, get_regulation
from salarymm.core.validation import ValidationError, validate_period
from salarymm.domain import (
    Allowance,
    Bonus,
    DuplicatePayrollError,
    Employee,
    PayrollRecord,
    SalaryStructure,
)
from salarymm.infrastructure import InMemoryPayrollRepository, PayrollRepository

# salary structures effective on or before this day count for the month
STRUCTURE_CUTOFF_DAY = 28

TOTAL_FIELDS = (
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
)

logger = logging.getLogger(__name__)


@dataclass
class GenerationReport:
    month: int
    year: int
    created: list[PayrollRecord] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def message(self) -> str:
        return f"Created {len(self.created)} payroll records for {self.month:02d}/{self.year}"


class PayrollService:
    """Coordinates payroll-related use cases."""

    def __init__(self, repository: PayrollRepository, regulation: RegulationParams | None = None) -> None:
        self._repository = repository
        self._regulation = regulation

    @property
    def regulation(self) -> RegulationParams:
        return self._regulation or get_regulation()

    # ------------------------------------------------------------------
    # employees and pay components
    # ------------------------------------------------------------------
    def add_employee(self, **data: Any) -> Employee:
        code = data["employee_code"]
        if any(item.employee_code == code for item in self._repository.list_employees()):
            raise ConflictError(f"employee code {code} already exists")
        employee = Employee(id=self._repository.next_id("emp"), **data)
        return self._repository.add_employee(employee)

    def get_employee(self, employee_id: str) -> Employee:
        employee = self._repository.get_employee(employee_id)
        if employee is None:
            raise NotFoundError(f"employee {employee_id} not found")
        return employee

    def list_employees(self, status: str | None = None) -> list[Employee]:
        employees = self._repository.list_employees(status)
        return sorted(employees, key=lambda item: item.employee_code)

    def add_salary_structure(self, employee_id: str, **data: Any) -> SalaryStructure:
        self.get_employee(employee_id)
        structure = SalaryStructure(id=self._repository.next_id("sal"), employee_id=employee_id, **data)
        return self._repository.add_salary_structure(structure)

    def add_allowance(self, employee_id: str, **data: Any) -> Allowance:
        self.get_employee(employee_id)
        allowance = Allowance(id=self._repository.next_id("alw"), employee_id=employee_id, **data)
        return self._repository.add_allowance(allowance)

    def add_bonus(self, employee_id: str, **data: Any) -> Bonus:
        self.get_employee(employee_id)
        bonus = Bonus(id=self._repository.next_id("bon"), employee_id=employee_id, **data)
        return self._repository.add_bonus(bonus)

    # ------------------------------------------------------------------
    # payroll input assembly
    # ------------------------------------------------------------------
    def current_salary_structure(self, employee_id: str, month: int, year: int) -> SalaryStructure | None:
        cutoff = date(year, month, STRUCTURE_CUTOFF_DAY)
        candidates = [
            item for item in self._repository.list_salary_structures(employee_id) if item.effective_date <= cutoff
        ]
        if not candidates:
            return None
        return max(candidates, key=lambda item: item.effective_date)

    def total_allowances(self, employee_id: str) -> Decimal:
        return sum(
            (item.amount for item in self._repository.list_allowances(employee_id) if item.is_active),
            Decimal("0"),
        )

    def total_bonus(self, employee_id: str, month: int, year: int) -> Decimal:
        return sum(
            (
                item.amount
                for item in self._repository.list_bonuses(employee_id)
                if item.month == month and item.year == year and item.status == "APPROVED"
            ),
            Decimal("0"),
        )

    def build_input(self, employee: Employee, structure: SalaryStructure, month: int, year: int) -> PayrollInput:
        return PayrollInput(
            base_salary=structure.base_salary,
            total_allowances=self.total_allowances(employee.id),
            total_bonus=self.total_bonus(employee.id, month, year),
            has_social_insurance=structure.has_social_insurance,
            has_health_insurance=structure.has_health_insurance,
            has_unemployment_insurance=structure.has_unemployment_insurance,
            dependents=employee.dependents,
        )

    # ------------------------------------------------------------------
    # calculation
    # ------------------------------------------------------------------
    def preview(self, employee_id: str, month: int, year: int) -> PayrollResult:
        """Compute an employee's payroll for a period without persisting it."""

        validate_period(month, year)
        employee = self.get_employee(employee_id)
        structure = self.current_salary_structure(employee.id, month, year)
        if structure is None:
            raise NotFoundError(f"employee {employee.employee_code} has no salary structure for {month:02d}/{year}")
        return calculate_payroll(self.build_input(employee, structure, month, year), self.regulation)

    def generate_period(self, month: int, year: int) -> GenerationReport:
        """Create DRAFT payroll records for every active employee in the period.

        Employees that already have a record for the period, or that have no
        effective salary structure, are skipped and reported in ``errors``.
        """

        validate_period(month, year)
        employees = self.list_employees(status="ACTIVE")
        if not employees:
            raise ValidationError("no active employees to calculate payroll for")

        regulation = self.regulation
        report = GenerationReport(month=month, year=year)
        logger.info("Generating payroll for %02d/%d (%d employees, regulation %s)", month, year, len(employees), regulation.version)

        for employee in employees:
            if self._repository.find_payroll(employee.id, month, year) is not None:
                report.errors.append(f"{employee.full_name}: payroll for {month:02d}/{year} already exists")
                continue

            structure = self.current_salary_structure(employee.id, month, year)
            if structure is None:
                report.errors.append(f"{employee.full_name}: no salary structure")
                continue

            result = calculate_payroll(self.build_input(employee, structure, month, year), regulation)
            record = PayrollRecord.from_result(
                self._repository.next_id("pay"), employee, structure, month, year, result
            )
            try:
                self._repository.add_payroll(record)
            except DuplicatePayrollError:
                report.errors.append(f"{employee.full_name}: payroll for {month:02d}/{year} already exists")
                continue
            report.created.append(record)

        for message in report.errors:
            logger.warning("Skipped during %02d/%d generation: %s", month, year, message)
        return report

    # ------------------------------------------------------------------
    # payroll records
    # ------------------------------------------------------------------
    def get_payroll(self, payroll_id: str) -> PayrollRecord:
        record = self._repository.get_payroll(payroll_id)
        if record is None:
            raise NotFoundError(f"payroll {payroll_id} not found")
        return record

    def list_payrolls(
        self,
        *,
        month: int | None = None,
        year: int | None = None,
        status: str | None = None,
        employee_id: str | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> dict[str, Any]:
        records = self.payrolls_for(month=month, year=year, status=status, employee_id=employee_id)
        records.sort(key=lambda item: (item.year, item.month, item.created_at), reverse=True)

        page = max(page, 1)
        limit = max(limit, 1)
        start = (page - 1) * limit
        total = len(records)
        return {
            "data": records[start : start + limit],
            "meta": {
                "total": total,
                "page": page,
                "limit": limit,
                "total_pages": math.ceil(total / limit),
            },
        }

    def payrolls_for(
        self,
        *,
        month: int | None = None,
        year: int | None = None,
        status: str | None = None,
        employee_id: str | None = None,
    ) -> list[PayrollRecord]:
        records = self._repository.list_payrolls()
        if month is not None:
            records = [item for item in records if item.month == month]
        if year is not None:
            records = [item for item in records if item.year == year]
        if status:
            records = [item for item in records if item.status == status]
        if employee_id:
            records = [item for item in records if item.employee_id == employee_id]
        return records

    def period_records(self, month: int, year: int) -> list[PayrollRecord]:
        """Records of one period ordered by employee code, as used by reports."""

        validate_period(month, year)
        records = self.payrolls_for(month=month, year=year)
        return sorted(records, key=lambda item: item.employee_code)

    def period_summary(self, month: int, year: int) -> dict[str, Any]:
        records = self.period_records(month, year)
        totals = {name: sum((getattr(item, name) for item in records), Decimal("0")) for name in TOTAL_FIELDS}
        active = self._repository.list_employees("ACTIVE")
        return {
            "month": month,
            "year": year,
            "employees": {"total": len(self._repository.list_employees()), "active": len(active)},
            "payrolls": len(records),
            "totals": totals,
            "regulation": self.regulation.version,
        }

    # ------------------------------------------------------------------
    # testing helpers
    # ------------------------------------------------------------------
    def reset(self) -> None:
        self._repository.reset()


_repository = InMemoryPayrollRepository()
_service = PayrollService(_repository)


def get_payroll_service() -> PayrollService:
    """Return the singleton payroll service for the process."""

    return _service


def reset_payroll_state() -> None:
    """Reset the in-memory store (used in tests)."""

    _service.reset()
