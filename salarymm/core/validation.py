from __future__ import annotations

from decimal import Decimal, InvalidOperation

# largest magnitude accepted for any amount (10^18 VND)
MAX_AMOUNT = Decimal("1e18")


class ValidationError(Exception):
    """Raised when domain validation fails."""


class InvalidInput(ValidationError):
    """Raised when payroll input falls outside the calculator domain."""


class RegulationError(ValidationError):
    """Raised when a regulation parameter set is malformed."""


def to_decimal(value: object, field: str) -> Decimal:
    if isinstance(value, bool) or value is None:
        raise InvalidInput(f"{field} must be a number")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError) as exc:
        raise InvalidInput(f"{field} must be a number") from exc
    if not amount.is_finite():
        raise InvalidInput(f"{field} must be finite")
    if abs(amount) > MAX_AMOUNT:
        raise InvalidInput(f"{field} is out of range")
    return amount


def to_money(value: object, field: str) -> Decimal:
    amount = to_decimal(value, field)
    if amount < 0:
        raise InvalidInput(f"{field} cannot be negative")
    return amount


def to_flag(value: object, field: str) -> bool:
    if not isinstance(value, bool):
        raise InvalidInput(f"{field} must be a boolean")
    return value


def to_dependents(value: object) -> int:
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInput("dependents must be an integer")
    if value < 0:
        raise InvalidInput("dependents cannot be negative")
    return value


def validate_period(month: int, year: int) -> None:
    if not 1 <= month <= 12:
        raise ValidationError("month must be between 1 and 12")
    if not 2000 <= year <= 2100:
        raise ValidationError("year must be between 2000 and 2100")
