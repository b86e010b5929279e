from __future__ import annotations

from fastapi import APIRouter, HTTPException
from fastapi.encoders import jsonable_encoder

from salarymm.application import get_payroll_service
from salarymm.core.calculator import calculate_payroll
from salarymm.core.schema import PayrollInputModel, PayrollResultModel
from salarymm.core.validation import InvalidInput

router = APIRouter(tags=["calculation"])


@router.post("/payroll/calculate")
async def calculate(payload: PayrollInputModel) -> dict:
    """Run the calculator on ad-hoc figures without touching stored records."""
    service = get_payroll_service()
    try:
        result = calculate_payroll(payload.to_input(), service.regulation)
    except InvalidInput as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return jsonable_encoder(PayrollResultModel.from_result(result).model_dump())


@router.get("/regulation")
async def get_active_regulation() -> dict:
    return jsonable_encoder(get_payroll_service().regulation.model_dump())
