from __future__ import annotations

import logging
from datetime import date
from typing import Any, List, Optional

from pydantic import ValidationError

from app.clients.pos import PosApiClient
from app.schemas.billing import Bill, BillCreateRequest, BillStats
from app.services.date_range import monthly_range, weekly_range, yearly_range
from app.services.exceptions import DownstreamServiceError, ServiceError
from app.services.mock_store import BillRepository, get_mock_store

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 100


def _parse_bills(data: Any) -> List[Bill]:
    if data is None:
        return []
    if not isinstance(data, list):
        raise DownstreamServiceError("Expected a list of bills from the POS API")
    bills: List[Bill] = []
    for position, entry in enumerate(data):
        try:
            bills.append(Bill.model_validate(entry))
        except ValidationError as exc:
            bill_id = entry.get("billId") if isinstance(entry, dict) else None
            logger.warning(
                "Skipping unreadable bill %s at position %d: %s",
                bill_id or "<no id>",
                position,
                exc,
            )
    return bills


class BillingService:
    """Fetches bills from the POS API, or from the in-memory store in mock mode."""

    def __init__(
        self,
        client: PosApiClient,
        *,
        repository: BillRepository | None = None,
    ) -> None:
        self._client = client
        self._repository = repository
        if self._client.use_mock_data:
            self._repository = repository or get_mock_store().bills

    def _require_repository(self) -> BillRepository:
        if not self._repository:
            raise RuntimeError("Mock bill repository not configured")
        return self._repository

    async def fetch_all(self, limit: int = DEFAULT_LIMIT) -> List[Bill]:
        logger.debug("Fetching up to %s bills", limit)
        if self._client.use_mock_data:
            await self._client.simulate_latency()
            return await self._require_repository().list(limit)

        try:
            data = await self._client.get("/billing", params={"limit": limit})
            return _parse_bills(data)
        except ServiceError:
            raise
        except Exception as exc:  # pragma: no cover - defensive
            logger.exception("Unexpected error while fetching bills")
            raise ServiceError("Failed to fetch bills", cause=exc)

    async def fetch_today(self) -> List[Bill]:
        logger.debug("Fetching today's bills")
        if self._client.use_mock_data:
            await self._client.simulate_latency()
            today = date.today()
            return await self._require_repository().between(today, today)

        try:
            data = await self._client.get("/billing/today")
            return _parse_bills(data)
        except ServiceError:
            raise
        except Exception as exc:  # pragma: no cover - defensive
            logger.exception("Unexpected error while fetching today's bills")
            raise ServiceError("Failed to fetch today's bills", cause=exc)

    async def fetch_by_date_range(self, start: date, end: date) -> List[Bill]:
        """Bills created on any local calendar day from ``start`` to ``end``."""

        logger.debug("Fetching bills from %s to %s", start, end)
        if self._client.use_mock_data:
            await self._client.simulate_latency()
            return await self._require_repository().between(start, end)

        try:
            params = {"startDate": start.isoformat(), "endDate": end.isoformat()}
            data = await self._client.get("/billing/range", params=params)
            return _parse_bills(data)
        except ServiceError:
            raise
        except Exception as exc:  # pragma: no cover - defensive
            logger.exception("Unexpected error while fetching bills by date range")
            raise ServiceError("Failed to fetch bills by date range", cause=exc)

    async def fetch_weekly(self, today: Optional[date] = None) -> List[Bill]:
        window = weekly_range(today or date.today())
        return await self.fetch_by_date_range(window.start_date, window.end_date)

    async def fetch_monthly(self, today: Optional[date] = None) -> List[Bill]:
        window = monthly_range(today or date.today())
        return await self.fetch_by_date_range(window.start_date, window.end_date)

    async def fetch_yearly(self, today: Optional[date] = None) -> List[Bill]:
        window = yearly_range(today or date.today())
        return await self.fetch_by_date_range(window.start_date, window.end_date)

    async def stats(self) -> BillStats:
        if self._client.use_mock_data:
            await self._client.simulate_latency()
            return await self._require_repository().stats()

        try:
            data = await self._client.get("/billing/stats")
            return BillStats.model_validate(data or {})
        except ServiceError:
            raise
        except Exception as exc:  # pragma: no cover - defensive
            logger.exception("Unexpected error while fetching billing stats")
            raise ServiceError("Failed to fetch billing stats", cause=exc)

    async def create(self, request: BillCreateRequest) -> Bill:
        logger.info("Creating bill with %d items", len(request.items))
        if self._client.use_mock_data:
            await self._client.simulate_latency()
            return await self._require_repository().create(request)

        try:
            payload = request.model_dump(by_alias=True, exclude_none=True)
            data = await self._client.post("/billing", payload)
            return Bill.model_validate(data)
        except ServiceError:
            raise
        except Exception as exc:  # pragma: no cover - defensive
            logger.exception("Unexpected error while creating bill")
            raise ServiceError("Failed to create bill", cause=exc)
