#!/usr/bin/env python
from __future__ import annotations

import argparse
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from salarymm.core.calculator import PayrollInput, calculate_payroll
from salarymm.core.formatting import format_currency
from salarymm.core.regulation import load_regulation
from salarymm.core.validation import ValidationError

LABELS = [
    ("base_salary", "Base salary"),
    ("total_allowances", "Allowances"),
    ("total_bonus", "Bonus"),
    ("gross_salary", "Gross salary"),
    ("social_insurance", "Social insurance (BHXH)"),
    ("health_insurance", "Health insurance (BHYT)"),
    ("unemployment_insurance", "Unemployment insurance (BHTN)"),
    ("personal_income_tax", "Personal income tax"),
    ("total_deductions", "Total deductions"),
    ("net_salary", "Net salary"),
]


def main() -> int:
    parser = argparse.ArgumentParser(description="Calculate one month of Vietnamese payroll")
    parser.add_argument("--base", required=True, help="Base salary (VND)")
    parser.add_argument("--allowances", default="0", help="Sum of active allowances")
    parser.add_argument("--bonus", default="0", help="Sum of approved bonuses")
    parser.add_argument("--dependents", type=int, default=0, help="Number of tax dependents")
    parser.add_argument("--no-social", action="store_true", help="Exclude social insurance")
    parser.add_argument("--no-health", action="store_true", help="Exclude health insurance")
    parser.add_argument("--no-unemployment", action="store_true", help="Exclude unemployment insurance")
    parser.add_argument("--regulation", type=Path, default=None, help="Regulation YAML file")
    args = parser.parse_args()

    try:
        regulation = load_regulation(args.regulation)
        result = calculate_payroll(
            PayrollInput(
                base_salary=args.base,
                total_allowances=args.allowances,
                total_bonus=args.bonus,
                has_social_insurance=not args.no_social,
                has_health_insurance=not args.no_health,
                has_unemployment_insurance=not args.no_unemployment,
                dependents=args.dependents,
            ),
            regulation,
        )
    except ValidationError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    print(f"Regulation: {regulation.version}")
    for name, label in LABELS:
        print(f"{label:<32}{format_currency(getattr(result, name)):>20}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
