"""Infrastructure layer for payroll persistence."""
from __future__ import annotations

import threading
from typing import Protocol

from salarymm.domain import (
    Allowance,
    Bonus,
    DuplicatePayrollError,
    Employee,
    PayrollRecord,
    SalaryStructure,
)


class PayrollRepository(Protocol):
    """Persistence contract for employees, pay components and payroll records."""

    def next_id(self, prefix: str) -> str: ...

    def add_employee(self, employee: Employee) -> Employee: ...

    def get_employee(self, employee_id: str) -> Employee | None: ...

    def list_employees(self, status: str | None = None) -> list[Employee]: ...

    def add_salary_structure(self, structure: SalaryStructure) -> SalaryStructure: ...

    def list_salary_structures(self, employee_id: str) -> list[SalaryStructure]: ...

    def add_allowance(self, allowance: Allowance) -> Allowance: ...

    def list_allowances(self, employee_id: str) -> list[Allowance]: ...

    def add_bonus(self, bonus: Bonus) -> Bonus: ...

    def list_bonuses(self, employee_id: str) -> list[Bonus]: ...

    def add_payroll(self, record: PayrollRecord) -> PayrollRecord: ...

    def get_payroll(self, payroll_id: str) -> PayrollRecord | None: ...

    def find_payroll(self, employee_id: str, month: int, year: int) -> PayrollRecord | None: ...

    def list_payrolls(self) -> list[PayrollRecord]: ...

    def reset(self) -> None: ...


class InMemoryPayrollRepository:
    """Simple in-memory repository for fast iteration and tests."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counters: dict[str, int] = {}
        self._employees: dict[str, Employee] = {}
        self._structures: dict[str, list[SalaryStructure]] = {}
        self._allowances: dict[str, list[Allowance]] = {}
        self._bonuses: dict[str, list[Bonus]] = {}
        self._payrolls: dict[str, PayrollRecord] = {}
        self._payroll_keys: dict[tuple[str, int, int], str] = {}

    # ------------------------------------------------------------------
    # identifiers
    # ------------------------------------------------------------------
    def next_id(self, prefix: str) -> str:
        with self._lock:
            self._counters[prefix] = self._counters.get(prefix, 0) + 1
            return f"{prefix}-{self._counters[prefix]:05d}"

    # ------------------------------------------------------------------
    # employees and pay components
    # ------------------------------------------------------------------
    def add_employee(self, employee: Employee) -> Employee:
        self._employees[employee.id] = employee
        return employee

    def get_employee(self, employee_id: str) -> Employee | None:
        return self._employees.get(employee_id)

    def list_employees(self, status: str | None = None) -> list[Employee]:
        employees = list(self._employees.values())
        if status is not None:
            employees = [employee for employee in employees if employee.status == status]
        return employees

    def add_salary_structure(self, structure: SalaryStructure) -> SalaryStructure:
        self._structures.setdefault(structure.employee_id, []).append(structure)
        return structure

    def list_salary_structures(self, employee_id: str) -> list[SalaryStructure]:
        return list(self._structures.get(employee_id, []))

    def add_allowance(self, allowance: Allowance) -> Allowance:
        self._allowances.setdefault(allowance.employee_id, []).append(allowance)
        return allowance

    def list_allowances(self, employee_id: str) -> list[Allowance]:
        return list(self._allowances.get(employee_id, []))

    def add_bonus(self, bonus: Bonus) -> Bonus:
        self._bonuses.setdefault(bonus.employee_id, []).append(bonus)
        return bonus

    def list_bonuses(self, employee_id: str) -> list[Bonus]:
        return list(self._bonuses.get(employee_id, []))

    # ------------------------------------------------------------------
    # payroll records
    # ------------------------------------------------------------------
    def add_payroll(self, record: PayrollRecord) -> PayrollRecord:
        with self._lock:
            if record.period_key in self._payroll_keys:
                employee_id, month, year = record.period_key
                raise DuplicatePayrollError(f"payroll already exists for {employee_id} in {month}/{year}")
            self._payroll_keys[record.period_key] = record.id
            self._payrolls[record.id] = record
        return record

    def get_payroll(self, payroll_id: str) -> PayrollRecord | None:
        return self._payrolls.get(payroll_id)

    def find_payroll(self, employee_id: str, month: int, year: int) -> PayrollRecord | None:
        payroll_id = self._payroll_keys.get((employee_id, month, year))
        return self._payrolls.get(payroll_id) if payroll_id else None

    def list_payrolls(self) -> list[PayrollRecord]:
        return list(self._payrolls.values())

    def reset(self) -> None:
        with self._lock:
            self._counters.clear()
            self._employees.clear()
            self._structures.clear()
            self._allowances.clear()
            self._bonuses.clear()
            self._payrolls.clear()
            self._payroll_keys.clear()
