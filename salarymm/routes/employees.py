from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, HTTPException, Query
from fastapi.encoders import jsonable_encoder

from salarymm.application import ConflictError, NotFoundError, get_payroll_service
from salarymm.core.schema import AllowanceCreate, BonusCreate, EmployeeCreate, SalaryStructureCreate

router = APIRouter(prefix="/employees", tags=["employees"])


@router.get("")
async def list_employees(status: str | None = Query(default=None)) -> dict:
    service = get_payroll_service()
    return {"items": [jsonable_encoder(asdict(item)) for item in service.list_employees(status)]}


@router.post("")
async def create_employee(payload: EmployeeCreate) -> dict:
    service = get_payroll_service()
    try:
        employee = service.add_employee(**payload.model_dump())
    except ConflictError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return jsonable_encoder(asdict(employee))


@router.get("/{employee_id}")
async def get_employee(employee_id: str) -> dict:
    service = get_payroll_service()
    try:
        employee = service.get_employee(employee_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return jsonable_encoder(asdict(employee))


@router.post("/{employee_id}/salary-structures")
async def add_salary_structure(employee_id: str, payload: SalaryStructureCreate) -> dict:
    service = get_payroll_service()
    try:
        structure = service.add_salary_structure(employee_id, **payload.model_dump())
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return jsonable_encoder(asdict(structure))


@router.post("/{employee_id}/allowances")
async def add_allowance(employee_id: str, payload: AllowanceCreate) -> dict:
    service = get_payroll_service()
    try:
        allowance = service.add_allowance(employee_id, **payload.model_dump())
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return jsonable_encoder(asdict(allowance))


@router.post("/{employee_id}/bonuses")
async def add_bonus(employee_id: str, payload: BonusCreate) -> dict:
    service = get_payroll_service()
    try:
        bonus = service.add_bonus(employee_id, **payload.model_dump())
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return jsonable_encoder(asdict(bonus))
