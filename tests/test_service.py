import sys
from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from salarymm.application import ConflictError, NotFoundError, PayrollService
from salarymm.core.validation import ValidationError
from salarymm.domain import DuplicatePayrollError, PayrollRecord
from salarymm.infrastructure import InMemoryPayrollRepository


@pytest.fixture()
def service():
    return PayrollService(InMemoryPayrollRepository())


def _employee(service, code="NV001", **extra):
    return service.add_employee(employee_code=code, full_name=f"Employee {code}", **extra)


def test_salary_structure_cutoff_is_day_28(service):
    employee = _employee(service)
    service.add_salary_structure(employee.id, base_salary=Decimal("10000000"), effective_date=date(2025, 1, 1))
    service.add_salary_structure(employee.id, base_salary=Decimal("12000000"), effective_date=date(2025, 3, 28))
    service.add_salary_structure(employee.id, base_salary=Decimal("15000000"), effective_date=date(2025, 3, 29))

    assert service.current_salary_structure(employee.id, 2, 2025).base_salary == Decimal("10000000")
    assert service.current_salary_structure(employee.id, 3, 2025).base_salary == Decimal("12000000")
    assert service.current_salary_structure(employee.id, 4, 2025).base_salary == Decimal("15000000")
    assert service.current_salary_structure(employee.id, 12, 2024) is None


def test_only_active_allowances_and_approved_bonuses_count(service):
    employee = _employee(service)
    service.add_allowance(employee.id, type="LUNCH", amount=Decimal("730000"))
    service.add_allowance(employee.id, type="PHONE", amount=Decimal("200000"), is_active=False)
    service.add_bonus(employee.id, type="KPI", amount=Decimal("1000000"), month=5, year=2025, status="APPROVED")
    service.add_bonus(employee.id, type="KPI", amount=Decimal("400000"), month=5, year=2025, status="REJECTED")
    service.add_bonus(employee.id, type="TET", amount=Decimal("5000000"), month=5, year=2024, status="APPROVED")

    assert service.total_allowances(employee.id) == Decimal("730000")
    assert service.total_bonus(employee.id, 5, 2025) == Decimal("1000000")
    assert service.total_bonus(employee.id, 6, 2025) == 0


def test_generate_period_uses_employee_dependents(service):
    single = _employee(service, "NV001")
    parent = _employee(service, "NV002", dependents=2)
    for employee in (single, parent):
        service.add_salary_structure(employee.id, base_salary=Decimal("30000000"), effective_date=date(2025, 1, 1))

    report = service.generate_period(6, 2025)
    taxes = {record.employee_code: record.personal_income_tax for record in report.created}

    assert report.errors == []
    assert report.message == "Created 2 payroll records for 06/2025"
    assert taxes == {"NV001": Decimal("1627500"), "NV002": Decimal("455000")}
    assert all(record.status == "DRAFT" for record in report.created)


def test_generate_period_skips_inactive_and_unstructured(service):
    _employee(service, "NV001")
    inactive = _employee(service, "NV002", status="INACTIVE")
    service.add_salary_structure(inactive.id, base_salary=Decimal("9000000"), effective_date=date(2025, 1, 1))

    report = service.generate_period(1, 2025)

    assert report.created == []
    assert report.errors == ["Employee NV001: no salary structure"]


@pytest.mark.parametrize(("month", "year"), [(0, 2025), (13, 2025), (1, 1999), (1, 2101)])
def test_generate_period_rejects_bad_period(service, month, year):
    _employee(service)
    with pytest.raises(ValidationError):
        service.generate_period(month, year)


def test_generate_period_requires_active_employees(service):
    _employee(service, status="TERMINATED")
    with pytest.raises(ValidationError):
        service.generate_period(1, 2025)


def test_repository_keeps_one_record_per_period(service):
    employee = _employee(service)
    structure = service.add_salary_structure(
        employee.id, base_salary=Decimal("8000000"), effective_date=date(2025, 1, 1)
    )
    created = service.generate_period(2, 2025).created[0]
    result = service.preview(employee.id, 2, 2025)
    duplicate = PayrollRecord.from_result("pay-x", employee, structure, 2, 2025, result)

    repository = service._repository
    with pytest.raises(DuplicatePayrollError):
        repository.add_payroll(duplicate)
    assert repository.find_payroll(employee.id, 2, 2025).id == created.id


def test_employee_lookups(service):
    _employee(service, "NV002")
    _employee(service, "NV001")

    assert [item.employee_code for item in service.list_employees()] == ["NV001", "NV002"]
    with pytest.raises(ConflictError):
        _employee(service, "NV001")
    with pytest.raises(NotFoundError):
        service.get_employee("emp-404")
    with pytest.raises(NotFoundError):
        service.add_bonus("emp-404", type="KPI", amount=Decimal("1"), month=1, year=2025)
    with pytest.raises(NotFoundError):
        service.get_payroll("pay-404")


def test_period_summary_totals(service):
    for code, salary in (("NV001", "20000000"), ("NV002", "5000000")):
        employee = _employee(service, code)
        service.add_salary_structure(employee.id, base_salary=Decimal(salary), effective_date=date(2025, 1, 1))
    records = service.generate_period(7, 2025).created

    summary = service.period_summary(7, 2025)

    assert summary["payrolls"] == 2
    assert summary["employees"] == {"total": 2, "active": 2}
    assert summary["totals"]["gross_salary"] == Decimal("25000000")
    assert summary["totals"]["net_salary"] == sum(record.net_salary for record in records)
    assert summary["regulation"] == "vn-2025-07"
    assert service.period_summary(8, 2025)["payrolls"] == 0
