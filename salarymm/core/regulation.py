"""Versioned statutory parameters for the payroll calculator.

Rates, the insurance salary cap, PIT deductions and the bracket table live in a
YAML file so that a regulation change is a new parameter file rather than a
code change.  ``get_regulation`` returns the active set, cached per process.
"""
from __future__ import annotations

import logging
import os
from datetime import date
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError as PydanticValidationError

from salarymm.core.validation import RegulationError

CONFIG_DIR = Path(__file__).resolve().parent.parent / "config"
DEFAULT_REGULATION_FILE = CONFIG_DIR / "regulation.vn-2025-07.yaml"

logger = logging.getLogger(__name__)


class TaxBracket(BaseModel):
    model_config = ConfigDict(frozen=True)

    lower: Decimal
    upper: Decimal | None = None
    rate: Decimal

    @property
    def width(self) -> Decimal | None:
        if self.upper is None:
            return None
        return self.upper - self.lower


class RegulationParams(BaseModel):
    """Immutable parameter set consumed by :mod:`salarymm.core.calculator`."""

    model_config = ConfigDict(frozen=True)

    version: str
    effective_from: date | None = None
    currency: str = "VND"
    social_insurance_rate: Decimal
    health_insurance_rate: Decimal
    unemployment_insurance_rate: Decimal
    max_insurance_salary: Decimal
    personal_deduction: Decimal
    dependent_deduction: Decimal
    brackets: tuple[TaxBracket, ...]

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> "RegulationParams":
        if not isinstance(data, dict):
            raise RegulationError("regulation file must contain a mapping")
        insurance = _section(data, "insurance")
        deductions = _section(data, "deductions")
        raw_brackets = data.get("pit_brackets") or []
        if not isinstance(raw_brackets, list) or not all(isinstance(item, dict) for item in raw_brackets):
            raise RegulationError("pit_brackets must be a list of mappings")
        try:
            params = cls(
                version=str(data.get("version") or "unversioned"),
                effective_from=data.get("effective_from"),
                currency=str(data.get("currency") or "VND"),
                social_insurance_rate=_decimal(insurance.get("social_rate")),
                health_insurance_rate=_decimal(insurance.get("health_rate")),
                unemployment_insurance_rate=_decimal(insurance.get("unemployment_rate")),
                max_insurance_salary=_decimal(insurance.get("max_salary")),
                personal_deduction=_decimal(deductions.get("personal")),
                dependent_deduction=_decimal(deductions.get("dependent")),
                brackets=tuple(
                    TaxBracket(
                        lower=_decimal(item.get("lower")),
                        upper=None if item.get("upper") is None else _decimal(item.get("upper")),
                        rate=_decimal(item.get("rate")),
                    )
                    for item in raw_brackets
                ),
            )
        except PydanticValidationError as exc:
            raise RegulationError(f"invalid regulation parameters: {exc}") from exc
        params.check()
        return params

    def check(self) -> None:
        """Reject parameter sets the calculator cannot apply."""

        for name in ("social_insurance_rate", "health_insurance_rate", "unemployment_insurance_rate"):
            rate = getattr(self, name)
            if not Decimal("0") <= rate <= Decimal("1"):
                raise RegulationError(f"{name} must be between 0 and 1")
        for name in ("max_insurance_salary", "personal_deduction", "dependent_deduction"):
            if getattr(self, name) < 0:
                raise RegulationError(f"{name} cannot be negative")

        if not self.brackets:
            raise RegulationError("at least one PIT bracket is required")
        expected_lower = Decimal("0")
        for index, bracket in enumerate(self.brackets):
            if bracket.lower != expected_lower:
                raise RegulationError(f"bracket {index + 1} must start at {expected_lower}")
            if not Decimal("0") <= bracket.rate <= Decimal("1"):
                raise RegulationError(f"bracket {index + 1} rate must be between 0 and 1")
            is_last = index == len(self.brackets) - 1
            if bracket.upper is None:
                if not is_last:
                    raise RegulationError("only the last bracket may be open-ended")
                continue
            if bracket.upper <= bracket.lower:
                raise RegulationError(f"bracket {index + 1} upper bound must exceed its lower bound")
            expected_lower = bracket.upper
        if self.brackets[-1].upper is not None:
            raise RegulationError("the last bracket must be open-ended")


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise RegulationError(f"{name} must be a mapping")
    return section


def _decimal(value: Any) -> Decimal:
    if value is None or isinstance(value, bool):
        raise RegulationError(f"expected a number, got {value!r}")
    try:
        result = Decimal(str(value))
    except InvalidOperation as exc:
        raise RegulationError(f"expected a number, got {value!r}") from exc
    if not result.is_finite():
        raise RegulationError(f"expected a finite number, got {value!r}")
    return result


def load_regulation(path: Path | str | None = None) -> RegulationParams:
    """Load a parameter set from YAML.

    Without ``path`` the ``SALARYMM_REGULATION_FILE`` environment variable is
    consulted before falling back to the bundled file.
    """

    if path is None:
        env_path = os.getenv("SALARYMM_REGULATION_FILE")
        path = Path(env_path).expanduser() if env_path else DEFAULT_REGULATION_FILE
    path = Path(path)
    if not path.exists():
        raise RegulationError(f"regulation file not found: {path}")
    with path.open("r", encoding="utf-8") as fp:
        try:
            data = yaml.safe_load(fp)
        except yaml.YAMLError as exc:
            raise RegulationError(f"cannot parse regulation file {path}: {exc}") from exc
    params = RegulationParams.from_mapping(data)
    logger.info("Loaded regulation %s from %s", params.version, path)
    return params


_regulation: RegulationParams | None = None


def get_regulation() -> RegulationParams:
    """Return the process-wide regulation, loading it on first use."""

    global _regulation
    if _regulation is None:
        _regulation = load_regulation()
    return _regulation


def reset_regulation_cache() -> None:
    """Forget the cached regulation (used in tests)."""

    global _regulation
    _regulation = None
