"""Application services."""

from .errors import ConflictError, NotFoundError
from .payroll import (
    GenerationReport,
    PayrollService,
    get_payroll_service,
    reset_payroll_state,
)

__all__ = [
    "ConflictError",
    "GenerationReport",
    "NotFoundError",
    "PayrollService",
    "get_payroll_service",
    "reset_payroll_state",
]
