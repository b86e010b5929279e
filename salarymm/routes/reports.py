from __future__ import annotations

from fastapi import APIRouter, Query
from fastapi.encoders import jsonable_encoder
from fastapi.responses import FileResponse

from salarymm.application import get_payroll_service
from salarymm.core.exports import ensure_period_dir
from salarymm.exporters.bank_payroll_csv import export_bank_payroll
from salarymm.exporters.payroll_excel import export_payroll_excel

router = APIRouter(tags=["reports"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _employee_index() -> dict:
    service = get_payroll_service()
    return {employee.id: employee for employee in service.list_employees()}


@router.get("/reports/payroll-excel")
async def payroll_excel(
    month: int = Query(..., ge=1, le=12),
    year: int = Query(..., ge=2000, le=2100),
) -> FileResponse:
    service = get_payroll_service()
    records = service.period_records(month, year)
    filename = f"payroll_{year}_{month:02d}.xlsx"
    path = export_payroll_excel(ensure_period_dir(month, year) / filename, records, month, year, _employee_index())
    return FileResponse(path, media_type=XLSX_MEDIA_TYPE, filename=filename)


@router.get("/reports/bank-csv")
async def bank_csv(
    month: int = Query(..., ge=1, le=12),
    year: int = Query(..., ge=2000, le=2100),
) -> FileResponse:
    service = get_payroll_service()
    records = service.period_records(month, year)
    filename = f"bank_payroll_{year}_{month:02d}.csv"
    path = export_bank_payroll(ensure_period_dir(month, year) / filename, records, _employee_index())
    return FileResponse(path, media_type="text/csv", filename=filename)


@router.get("/dashboard")
async def dashboard(
    month: int = Query(..., ge=1, le=12),
    year: int = Query(..., ge=2000, le=2100),
) -> dict:
    return jsonable_encoder(get_payroll_service().period_summary(month, year))
