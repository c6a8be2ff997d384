import asyncio
import json
from datetime import date

import httpx
import pytest

from app.clients.pos import PosApiClient
from app.schemas.menu import StockAdjustment
from app.schemas.report import BillingReportRequest, BusinessInfo, DateFilter
from app.services.bills import BillingService
from app.services.exceptions import DownstreamServiceError
from app.services.menu import MenuService
from app.services.report import BillingReportService

BASE_URL = "https://pos.example.test/api"

REMOTE_BILLS = [
    {
        "billId": "JJ-1001",
        "createdAt": "2024-02-14T19:45:00+05:30",
        "items": [
            {"itemId": "BAR-BEE-001", "name": "Kingfisher", "price": 180, "quantity": 2, "isKitchen": False},
            {"name": "Masala Papad", "price": 80, "isKitchen": True},
        ],
        "customer": {"name": "Arun", "phone": "9840000000", "tableNumber": 4},
        "total": 460,
        "status": "paid",
    }
]


def _client(handler) -> PosApiClient:
    return PosApiClient(
        BASE_URL,
        use_mock_data=False,
        token="secret-token",
        transport=httpx.MockTransport(handler),
    )


async def _call(client: PosApiClient, coro_factory):
    try:
        return await coro_factory()
    finally:
        await client.close()


def test_client_unwraps_success_envelope_and_sends_auth() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(200, json={"success": True, "data": REMOTE_BILLS})

    client = _client(handler)
    service = BillingService(client)

    bills = asyncio.run(_call(client, lambda: service.fetch_all(25)))

    assert seen == {"path": "/api/billing", "params": {"limit": "25"}, "auth": "Bearer secret-token"}
    assert len(bills) == 1
    bill = bills[0]
    assert bill.bill_id == "JJ-1001"
    assert bill.customer.table_number == "4"
    assert bill.items[1].item_id is None
    assert bill.items[1].is_kitchen is True


def test_date_range_is_sent_as_query_parameters() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json={"success": True, "data": []})

    client = _client(handler)
    service = BillingService(client)

    bills = asyncio.run(
        _call(client, lambda: service.fetch_by_date_range(date(2024, 2, 1), date(2024, 2, 29)))
    )

    assert bills == []
    assert seen["path"] == "/api/billing/range"
    assert seen["params"] == {"startDate": "2024-02-01", "endDate": "2024-02-29"}


def test_weekly_wrapper_computes_range() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json={"success": True, "data": None})

    client = _client(handler)
    service = BillingService(client)

    bills = asyncio.run(_call(client, lambda: service.fetch_weekly(date(2024, 3, 2))))

    assert bills == []
    assert seen["params"] == {"startDate": "2024-02-25", "endDate": "2024-03-02"}


def test_failed_envelope_raises_downstream_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"success": False, "error": "Database unavailable"})

    client = _client(handler)
    service = BillingService(client)

    with pytest.raises(DownstreamServiceError, match="Database unavailable"):
        asyncio.run(_call(client, service.fetch_today))


def test_http_error_status_is_preserved() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, json={"success": False, "error": "maintenance"})

    client = _client(handler)
    service = BillingService(client)

    with pytest.raises(DownstreamServiceError) as exc_info:
        asyncio.run(_call(client, service.fetch_today))

    assert exc_info.value.status_code == 503


def test_transport_and_decoding_failures_raise_downstream_error() -> None:
    def unreachable(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    def garbage(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"<html>oops</html>")

    for handler in (unreachable, garbage):
        client = _client(handler)
        service = BillingService(client)
        with pytest.raises(DownstreamServiceError):
            asyncio.run(_call(client, service.fetch_today))


def test_unreadable_bill_is_skipped_and_the_rest_still_aggregate() -> None:
    payload = [
        {"billId": "JJ-1", "items": [{"itemId": "B1", "name": "Beer", "price": 150, "quantity": 2}]},
        {"billId": "JJ-2", "items": [{"itemId": "B1", "name": "Beer", "price": "", "quantity": 1}]},
        {"billId": "JJ-3", "items": "not-a-list"},
    ]

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"success": True, "data": payload})

    client = _client(handler)
    service = BillingReportService(BillingService(client), business=BusinessInfo(name="JumJum"))

    report = asyncio.run(_call(client, lambda: service.generate(BillingReportRequest(period=DateFilter.TODAY))))

    assert report.summary.bill_count == 2
    [beer] = report.rows
    assert beer.quantity == 3
    assert beer.total_amount == pytest.approx(300)
    assert report.totals.grand_total == pytest.approx(315)


def test_non_list_bill_payload_raises_downstream_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"success": True, "data": {"items": []}})

    client = _client(handler)
    service = BillingService(client)

    with pytest.raises(DownstreamServiceError):
        asyncio.run(_call(client, service.fetch_today))


def test_report_over_unreachable_api_is_empty() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    client = _client(handler)
    service = BillingReportService(BillingService(client), business=BusinessInfo(name="JumJum"))

    report = asyncio.run(_call(client, lambda: service.generate(BillingReportRequest(period=DateFilter.MONTHLY))))

    assert report.rows == []
    assert report.summary.bill_count == 0
    assert report.totals.grand_total == 0


def test_menu_stock_update_is_forwarded() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        item = {
            "itemId": "BAR-BEE-001",
            "name": "Kingfisher",
            "price": 180,
            "category": "beer",
            "stock": 55,
            "lowStockThreshold": 20,
            "isKitchen": False,
        }
        return httpx.Response(200, json={"success": True, "data": item})

    client = _client(handler)
    service = MenuService(client)

    item = asyncio.run(
        _call(client, lambda: service.update_stock("BAR-BEE-001", StockAdjustment(quantity=-5)))
    )

    assert seen == {"method": "PATCH", "path": "/api/menu-items/BAR-BEE-001/stock", "body": {"quantity": -5}}
    assert item.stock == 55
    assert item.low_stock_threshold == 20
