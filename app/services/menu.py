from __future__ import annotations

import logging
from typing import Any, List

from app.clients.pos import PosApiClient
from app.schemas.menu import MenuItem, MenuItemCreate, MenuItemUpdate, StockAdjustment
from app.services.exceptions import RecordNotFoundError, ServiceError
from app.services.mock_store import MenuRepository, get_mock_store

logger = logging.getLogger(__name__)


class MenuService:
    """Menu catalog operations backed by the POS API."""

    def __init__(
        self,
        client: PosApiClient,
        *,
        repository: MenuRepository | None = None,
    ) -> None:
        self._client = client
        self._repository = repository
        if self._client.use_mock_data:
            self._repository = repository or get_mock_store().menu

    def _require_repository(self) -> MenuRepository:
        if not self._repository:
            raise RuntimeError("Mock menu repository not configured")
        return self._repository

    async def _list_remote(self, path: str) -> List[MenuItem]:
        try:
            data = await self._client.get(path)
            return [MenuItem.model_validate(entry) for entry in data or []]
        except ServiceError:
            raise
        except Exception as exc:  # pragma: no cover - defensive
            logger.exception("Unexpected error while listing menu items from %s", path)
            raise ServiceError("Failed to list menu items", cause=exc)

    async def list_all(self) -> List[MenuItem]:
        if self._client.use_mock_data:
            await self._client.simulate_latency()
            return await self._require_repository().list()
        return await self._list_remote("/menu-items")

    async def list_bar(self) -> List[MenuItem]:
        if self._client.use_mock_data:
            await self._client.simulate_latency()
            return await self._require_repository().list(is_kitchen=False)
        return await self._list_remote("/menu-items/bar")

    async def list_kitchen(self) -> List[MenuItem]:
        if self._client.use_mock_data:
            await self._client.simulate_latency()
            return await self._require_repository().list(is_kitchen=True)
        return await self._list_remote("/menu-items/kitchen")

    async def list_low_stock(self) -> List[MenuItem]:
        if self._client.use_mock_data:
            await self._client.simulate_latency()
            return await self._require_repository().low_stock()
        return await self._list_remote("/menu-items/low-stock")

    async def create(self, request: MenuItemCreate) -> MenuItem:
        logger.info("Creating menu item %s", request.name)
        if self._client.use_mock_data:
            await self._client.simulate_latency()
            try:
                return await self._require_repository().create(request)
            except ValueError as exc:
                raise ServiceError(str(exc), cause=exc) from exc

        payload = request.model_dump(by_alias=True, exclude_none=True)
        return await self._write_remote("post", "/menu-items", payload)

    async def update(self, item_id: str, request: MenuItemUpdate) -> MenuItem:
        logger.info("Updating menu item %s", item_id)
        if self._client.use_mock_data:
            await self._client.simulate_latency()
            try:
                return await self._require_repository().update(item_id, request)
            except KeyError as exc:
                raise RecordNotFoundError(f"Menu item {item_id} not found", cause=exc) from exc

        payload = request.model_dump(by_alias=True, exclude_unset=True, exclude_none=True)
        return await self._write_remote("put", f"/menu-items/{item_id}", payload)

    async def update_stock(self, item_id: str, adjustment: StockAdjustment) -> MenuItem:
        logger.info("Adjusting stock for %s by %s", item_id, adjustment.quantity)
        if self._client.use_mock_data:
            await self._client.simulate_latency()
            try:
                return await self._require_repository().adjust_stock(item_id, adjustment.quantity)
            except KeyError as exc:
                raise RecordNotFoundError(f"Menu item {item_id} not found", cause=exc) from exc

        payload = adjustment.model_dump(by_alias=True)
        return await self._write_remote("patch", f"/menu-items/{item_id}/stock", payload)

    async def delete(self, item_id: str) -> None:
        logger.info("Deleting menu item %s", item_id)
        if self._client.use_mock_data:
            await self._client.simulate_latency()
            if not await self._require_repository().delete(item_id):
                raise RecordNotFoundError(f"Menu item {item_id} not found")
            return

        await self._client.delete(f"/menu-items/{item_id}")

    async def _write_remote(self, method: str, path: str, payload: dict[str, Any]) -> MenuItem:
        send = getattr(self._client, method)
        try:
            data = await send(path, payload)
            return MenuItem.model_validate(data)
        except ServiceError:
            raise
        except Exception as exc:  # pragma: no cover - defensive
            logger.exception("Unexpected error during %s %s", method.upper(), path)
            raise ServiceError("Failed to update menu item", cause=exc)
