from typing import Dict, List

from fastapi import APIRouter, Depends, HTTPException

from app.dependencies.services import get_menu_service
from app.schemas.menu import MenuItem, MenuItemCreate, MenuItemUpdate, StockAdjustment
from app.services import MenuService
from app.services.exceptions import RecordNotFoundError, ServiceError

router = APIRouter()


def _to_http(exc: ServiceError) -> HTTPException:
    if isinstance(exc, RecordNotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    return HTTPException(status_code=502, detail=str(exc))


@router.get("/items", response_model=List[MenuItem])
async def list_items(service: MenuService = Depends(get_menu_service)):
    try:
        return await service.list_all()
    except ServiceError as exc:
        raise _to_http(exc) from exc


@router.get("/items/bar", response_model=List[MenuItem])
async def list_bar_items(service: MenuService = Depends(get_menu_service)):
    try:
        return await service.list_bar()
    except ServiceError as exc:
        raise _to_http(exc) from exc


@router.get("/items/kitchen", response_model=List[MenuItem])
async def list_kitchen_items(service: MenuService = Depends(get_menu_service)):
    try:
        return await service.list_kitchen()
    except ServiceError as exc:
        raise _to_http(exc) from exc


@router.get("/items/low-stock", response_model=List[MenuItem])
async def list_low_stock_items(service: MenuService = Depends(get_menu_service)):
    try:
        return await service.list_low_stock()
    except ServiceError as exc:
        raise _to_http(exc) from exc


@router.post("/items", response_model=MenuItem)
async def create_item(
    req: MenuItemCreate,
    service: MenuService = Depends(get_menu_service),
):
    try:
        return await service.create(req)
    except ServiceError as exc:
        raise _to_http(exc) from exc


@router.put("/items/{item_id}", response_model=MenuItem)
async def update_item(
    item_id: str,
    req: MenuItemUpdate,
    service: MenuService = Depends(get_menu_service),
):
    try:
        return await service.update(item_id, req)
    except ServiceError as exc:
        raise _to_http(exc) from exc


@router.patch("/items/{item_id}/stock", response_model=MenuItem)
async def update_item_stock(
    item_id: str,
    req: StockAdjustment,
    service: MenuService = Depends(get_menu_service),
):
    try:
        return await service.update_stock(item_id, req)
    except ServiceError as exc:
        raise _to_http(exc) from exc


@router.delete("/items/{item_id}")
async def delete_item(
    item_id: str,
    service: MenuService = Depends(get_menu_service),
) -> Dict[str, str]:
    try:
        await service.delete(item_id)
    except ServiceError as exc:
        raise _to_http(exc) from exc
    return {"status": "deleted", "item_id": item_id}
