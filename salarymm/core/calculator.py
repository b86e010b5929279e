"""Vietnamese payroll calculator.

Pure functions: statutory insurance on the capped base salary, progressive
personal income tax on the remaining taxable income, and the composition of
both into gross and net salary.  All amounts are ``Decimal``; insurance is
rounded per scheme and tax once, half-up to a whole currency unit.
"""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext

from salarymm.core.regulation import RegulationParams, get_regulation
from salarymm.core.validation import InvalidInput, to_decimal, to_dependents, to_flag, to_money

ZERO = Decimal("0")
WHOLE_UNIT = Decimal("1")
# enough digits that sums of bounded amounts stay exact
MONEY_PRECISION = 60

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PayrollInput:
    base_salary: Decimal
    total_allowances: Decimal = ZERO
    total_bonus: Decimal = ZERO
    has_social_insurance: bool = True
    has_health_insurance: bool = True
    has_unemployment_insurance: bool = True
    dependents: int = 0

    def __post_init__(self) -> None:
        try:
            for name in ("base_salary", "total_allowances", "total_bonus"):
                object.__setattr__(self, name, to_money(getattr(self, name), name))
            object.__setattr__(self, "dependents", to_dependents(self.dependents))
            for name in ("has_social_insurance", "has_health_insurance", "has_unemployment_insurance"):
                to_flag(getattr(self, name), name)
        except InvalidInput as exc:
            logger.debug("Rejected payroll input: %s", exc)
            raise


@dataclass(frozen=True, slots=True)
class InsuranceBreakdown:
    social_insurance: Decimal
    health_insurance: Decimal
    unemployment_insurance: Decimal

    @property
    def total_insurance(self) -> Decimal:
        return self.social_insurance + self.health_insurance + self.unemployment_insurance


@dataclass(frozen=True, slots=True)
class PayrollResult:
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

    def as_dict(self) -> dict[str, Decimal]:
        return asdict(self)


def _round(value: Decimal) -> Decimal:
    try:
        return value.quantize(WHOLE_UNIT, rounding=ROUND_HALF_UP)
    except InvalidOperation as exc:
        raise InvalidInput(f"amount {value} cannot be rounded to a whole unit") from exc


def calculate_insurance(
    base_salary: Decimal | int | str,
    *,
    has_social_insurance: bool,
    has_health_insurance: bool,
    has_unemployment_insurance: bool,
    regulation: RegulationParams | None = None,
) -> InsuranceBreakdown:
    """Employee-side BHXH, BHYT and BHTN contributions for one month."""

    regulation = regulation or get_regulation()
    salary = to_money(base_salary, "base_salary")
    flags = {
        "has_social_insurance": to_flag(has_social_insurance, "has_social_insurance"),
        "has_health_insurance": to_flag(has_health_insurance, "has_health_insurance"),
        "has_unemployment_insurance": to_flag(has_unemployment_insurance, "has_unemployment_insurance"),
    }

    with localcontext() as ctx:
        ctx.prec = MONEY_PRECISION
        insurance_salary = min(salary, regulation.max_insurance_salary)

        def contribution(enabled: bool, rate: Decimal) -> Decimal:
            return _round(insurance_salary * rate) if enabled else ZERO

        return InsuranceBreakdown(
            social_insurance=contribution(flags["has_social_insurance"], regulation.social_insurance_rate),
            health_insurance=contribution(flags["has_health_insurance"], regulation.health_insurance_rate),
            unemployment_insurance=contribution(
                flags["has_unemployment_insurance"], regulation.unemployment_insurance_rate
            ),
        )


def calculate_pit(taxable_income: Decimal | int | str, regulation: RegulationParams | None = None) -> Decimal:
    """Progressive personal income tax on monthly taxable income."""

    income = to_decimal(taxable_income, "taxable_income")
    if income <= 0:
        return ZERO

    regulation = regulation or get_regulation()
    with localcontext() as ctx:
        ctx.prec = MONEY_PRECISION
        tax = ZERO
        remaining = income
        for bracket in regulation.brackets:
            if remaining <= 0:
                break
            width = bracket.width
            portion = remaining if width is None else min(remaining, width)
            tax += portion * bracket.rate
            remaining -= portion
        return _round(tax)


def calculate_payroll(payroll_input: PayrollInput, regulation: RegulationParams | None = None) -> PayrollResult:
    """Gross, statutory deductions and net salary for one employee-period."""

    if not isinstance(payroll_input, PayrollInput):
        raise InvalidInput("calculate_payroll expects a PayrollInput")
    regulation = regulation or get_regulation()

    with localcontext() as ctx:
        ctx.prec = MONEY_PRECISION
        gross = payroll_input.base_salary + payroll_input.total_allowances + payroll_input.total_bonus

        # insurance applies to base salary only; PIT applies to full gross
        insurance = calculate_insurance(
            payroll_input.base_salary,
            has_social_insurance=payroll_input.has_social_insurance,
            has_health_insurance=payroll_input.has_health_insurance,
            has_unemployment_insurance=payroll_input.has_unemployment_insurance,
            regulation=regulation,
        )
        tax_deduction = regulation.personal_deduction + payroll_input.dependents * regulation.dependent_deduction
        taxable_income = gross - insurance.total_insurance - tax_deduction
        # very large dependent counts push taxable income far below zero
        personal_income_tax = calculate_pit(max(taxable_income, ZERO), regulation)

        total_deductions = insurance.total_insurance + personal_income_tax
        return PayrollResult(
            base_salary=payroll_input.base_salary,
            total_allowances=payroll_input.total_allowances,
            total_bonus=payroll_input.total_bonus,
            gross_salary=gross,
            social_insurance=insurance.social_insurance,
            health_insurance=insurance.health_insurance,
            unemployment_insurance=insurance.unemployment_insurance,
            personal_income_tax=personal_income_tax,
            total_deductions=total_deductions,
            net_salary=gross - total_deductions,
        )
