from __future__ import annotations


class NotFoundError(LookupError):
    """Raised when a requested employee or payroll record does not exist."""


class ConflictError(Exception):
    """Raised when an operation would violate a uniqueness rule."""
