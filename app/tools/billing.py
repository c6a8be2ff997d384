from datetime import date
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query

from app.dependencies.services import get_billing_service
from app.schemas.billing import Bill, BillCreateRequest, BillListResponse, BillStats
from app.services import BillingService
from app.services.exceptions import ServiceError

router = APIRouter()


def _listing(bills: List[Bill]) -> BillListResponse:
    return BillListResponse(total=len(bills), items=bills)


@router.get("/list", response_model=BillListResponse)
async def list_bills(
    limit: int = Query(default=100, ge=1, le=1000),
    service: BillingService = Depends(get_billing_service),
):
    try:
        return _listing(await service.fetch_all(limit))
    except ServiceError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc


@router.get("/today", response_model=BillListResponse)
async def todays_bills(
    service: BillingService = Depends(get_billing_service),
):
    try:
        return _listing(await service.fetch_today())
    except ServiceError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc


@router.get("/range", response_model=BillListResponse)
async def bills_in_range(
    start: date,
    end: date,
    service: BillingService = Depends(get_billing_service),
):
    if start > end:
        raise HTTPException(status_code=422, detail="start must not be after end")
    try:
        return _listing(await service.fetch_by_date_range(start, end))
    except ServiceError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc


@router.get("/stats", response_model=BillStats)
async def billing_stats(
    service: BillingService = Depends(get_billing_service),
):
    try:
        return await service.stats()
    except ServiceError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc


@router.post("/create", response_model=Bill)
async def create_bill(
    req: BillCreateRequest,
    service: BillingService = Depends(get_billing_service),
):
    try:
        return await service.create(req)
    except ServiceError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
