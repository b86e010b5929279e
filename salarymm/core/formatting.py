"""Vietnamese currency formatting for reports and the CLI."""
from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

CURRENCY_SYMBOL = "₫"

_BILLION = Decimal("1000000000")
_MILLION = Decimal("1000000")
_NUMBER_PREFIX = re.compile(r"^-?(\d+(\.\d*)?|\.\d+)")


def _as_decimal(value: object) -> Decimal | None:
    if isinstance(value, bool) or value is None:
        return None
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    return result if result.is_finite() else None


def _group(value: Decimal, places: int = 0) -> str:
    quantum = Decimal(1).scaleb(-places)
    rounded = value.quantize(quantum, rounding=ROUND_HALF_UP)
    sign = "-" if rounded < 0 else ""
    integral, _, fraction = f"{abs(rounded):f}".partition(".")
    grouped = f"{int(integral):,}".replace(",", ".")
    fraction = fraction.rstrip("0")
    return f"{sign}{grouped},{fraction}" if fraction else f"{sign}{grouped}"


def format_currency(value: object) -> str:
    """Render ``20160000`` as ``"20.160.000 ₫"``."""

    amount = _as_decimal(value)
    if amount is None:
        return f"0 {CURRENCY_SYMBOL}"
    return f"{_group(amount)} {CURRENCY_SYMBOL}"


def format_compact_currency(value: object) -> str:
    amount = _as_decimal(value)
    if amount is None:
        return "0"
    if amount >= _BILLION:
        return f"{(amount / _BILLION).quantize(Decimal('0.1'), rounding=ROUND_HALF_UP)}B"
    if amount >= _MILLION:
        return f"{(amount / _MILLION).quantize(Decimal('1'), rounding=ROUND_HALF_UP)}M"
    return _group(amount, places=3)


def parse_currency(text: str) -> Decimal:
    """Parse ``"20.160.000 ₫"`` back to ``Decimal("20160000")``.

    Dots are thousands separators and the first comma is the decimal mark.
    Unparseable input yields zero.
    """

    cleaned = re.sub(r"[^\d,-]", "", text or "").replace(",", ".", 1)
    match = _NUMBER_PREFIX.match(cleaned)
    if not match:
        return Decimal("0")
    return Decimal(match.group(0))
