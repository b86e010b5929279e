"""Domain layer definitions."""

from .payroll import (
    Allowance,
    Bonus,
    DuplicatePayrollError,
    Employee,
    PayrollRecord,
    SalaryStructure,
)

__all__ = [
    "Allowance",
    "Bonus",
    "DuplicatePayrollError",
    "Employee",
    "PayrollRecord",
    "SalaryStructure",
]
