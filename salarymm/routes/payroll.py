from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from salarymm.application import NotFoundError, get_payroll_service
from salarymm.core.schema import GeneratePayrollRequest, PayrollRecordModel, PayrollResultModel
from salarymm.core.validation import ValidationError
from salarymm.domain import PayrollRecord

router = APIRouter(prefix="/payroll", tags=["payroll"])


def _serialise(record: PayrollRecord) -> dict:
    return jsonable_encoder(PayrollRecordModel(**record.to_dict()).model_dump())


@router.post("")
async def generate_payroll(payload: GeneratePayrollRequest) -> JSONResponse:
    service = get_payroll_service()
    try:
        report = service.generate_period(payload.month, payload.year)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    body = {
        "message": report.message,
        "items": [_serialise(record) for record in report.created],
        "errors": report.errors or None,
    }
    return JSONResponse(status_code=201, content=jsonable_encoder(body))


@router.get("")
async def list_payrolls(
    month: int | None = Query(default=None, ge=1, le=12),
    year: int | None = Query(default=None),
    status: str | None = Query(default=None),
    employee_id: str | None = Query(default=None),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
) -> dict:
    service = get_payroll_service()
    listing = service.list_payrolls(
        month=month,
        year=year,
        status=status,
        employee_id=employee_id,
        page=page,
        limit=limit,
    )
    return {"items": [_serialise(record) for record in listing["data"]], "meta": listing["meta"]}


@router.get("/preview/{employee_id}")
async def preview_payroll(
    employee_id: str,
    month: int = Query(..., ge=1, le=12),
    year: int = Query(..., ge=2000, le=2100),
) -> dict:
    service = get_payroll_service()
    try:
        result = service.preview(employee_id, month, year)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return jsonable_encoder(PayrollResultModel.from_result(result).model_dump())


@router.get("/{payroll_id}")
async def get_payroll(payroll_id: str) -> dict:
    service = get_payroll_service()
    try:
        record = service.get_payroll(payroll_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return _serialise(record)
