from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from salarymm.core.calculator import PayrollInput, PayrollResult

EmployeeStatus = Literal["ACTIVE", "INACTIVE", "TERMINATED"]
BonusStatus = Literal["PENDING", "APPROVED", "REJECTED"]
PayrollStatus = Literal["DRAFT", "CONFIRMED", "PAID"]


class PayrollInputModel(BaseModel):
    base_salary: Decimal = Field(ge=0)
    total_allowances: Decimal = Field(default=Decimal("0"), ge=0)
    total_bonus: Decimal = Field(default=Decimal("0"), ge=0)
    has_social_insurance: bool = True
    has_health_insurance: bool = True
    has_unemployment_insurance: bool = True
    dependents: int = Field(default=0, ge=0)

    def to_input(self) -> PayrollInput:
        return PayrollInput(**self.model_dump())


class PayrollResultModel(BaseModel):
    model_config = ConfigDict(frozen=True)

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

    @classmethod
    def from_result(cls, result: PayrollResult) -> "PayrollResultModel":
        return cls(**result.as_dict())


class EmployeeCreate(BaseModel):
    employee_code: str = Field(min_length=1)
    full_name: str = Field(min_length=1)
    department: str | None = None
    position: str | None = None
    status: EmployeeStatus = "ACTIVE"
    dependents: int = Field(default=0, ge=0)
    bank_name: str | None = None
    bank_account: str | None = None


class SalaryStructureCreate(BaseModel):
    base_salary: Decimal = Field(ge=0)
    effective_date: date
    has_social_insurance: bool = True
    has_health_insurance: bool = True
    has_unemployment_insurance: bool = True


class AllowanceCreate(BaseModel):
    type: str = Field(min_length=1)
    amount: Decimal = Field(ge=0)
    is_active: bool = True


class BonusCreate(BaseModel):
    type: str = Field(min_length=1)
    amount: Decimal = Field(ge=0)
    month: int = Field(ge=1, le=12)
    year: int = Field(ge=2000, le=2100)
    status: BonusStatus = "PENDING"
    reason: str | None = None


class GeneratePayrollRequest(BaseModel):
    month: int = Field(ge=1, le=12)
    year: int = Field(ge=2000, le=2100)


class PayrollRecordModel(PayrollResultModel):
    id: str
    employee_id: str
    employee_code: str
    full_name: str
    salary_structure_id: str
    month: int
    year: int
    status: PayrollStatus = "DRAFT"
    created_at: datetime
