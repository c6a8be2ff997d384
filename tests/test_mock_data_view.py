from __future__ import annotations

import asyncio

from fastapi.testclient import TestClient

from app.main import app
from app.schemas.billing import BillCreateRequest, BillLineItem, Customer
from app.services.mock_store import get_mock_store, reset_mock_store
from app.services.report_renderer import format_currency


def test_mock_data_view_renders_seed_data() -> None:
    reset_mock_store()
    client = TestClient(app)

    response = client.get("/mock-data")
    assert response.status_code == 200
    body = response.text

    assert "Mock POS Data" in body
    assert "6 bills" in body
    assert "Item Sales (all)" in body
    assert "Tandoori Chicken" in body
    assert "BILL-00001" in body  # seeded bill


def test_mock_data_view_aggregates_items_across_bills() -> None:
    reset_mock_store()
    client = TestClient(app)

    body = client.get("/mock-data").text

    # Kingfisher is sold on two seeded bills: 3 + 4 bottles at 180.
    assert "<td>Kingfisher</td><td>Bar</td><td>7</td>" in body
    assert f"<td>{format_currency(1260)}</td>" in body
    assert "GST (5%)" in body


def test_mock_data_view_filters_item_sales_by_category() -> None:
    reset_mock_store()
    client = TestClient(app)

    body = client.get("/mock-data", params={"category": "kitchen"}).text

    assert "Item Sales (kitchen)" in body
    assert f"<td>{format_currency(1260)}</td>" not in body
    assert "<td>Fish Fry</td><td>Kitchen</td><td>2</td>" in body


def test_mock_data_view_displays_created_bills() -> None:
    reset_mock_store()
    store = get_mock_store()

    bill = asyncio.run(
        store.bills.create(
            BillCreateRequest(
                items=[BillLineItem(item_id="BAR-COC-002", name="Margarita", price=380, quantity=2)],
                customer=Customer(name="Jane Guest", table_number="9"),
            )
        )
    )

    client = TestClient(app)
    response = client.get("/mock-data")
    assert response.status_code == 200

    body = response.text
    assert bill.bill_id in body
    assert "Jane Guest" in body
    assert "Margarita x2" in body
    assert format_currency(bill.total) in body


def test_mock_data_view_reports_empty_bill_store() -> None:
    reset_mock_store()
    store = get_mock_store()
    for bill in asyncio.run(store.bills.list()):
        asyncio.run(store.bills.delete(bill.bill_id))

    client = TestClient(app)
    body = client.get("/mock-data").text

    assert "No items sold." in body
    assert "No bills recorded." in body
    assert "0 bills" in body


def test_mock_data_view_marks_low_stock_items() -> None:
    reset_mock_store()
    store = get_mock_store()
    item = asyncio.run(store.menu.get("KIT-SNA-006"))
    asyncio.run(store.menu.adjust_stock("KIT-SNA-006", -item.stock))

    body = TestClient(app).get("/mock-data").text

    assert '<tr class="low"><td>KIT-SNA-006</td>' in body


def test_delete_mock_menu_item_removes_entry() -> None:
    reset_mock_store()
    store = get_mock_store()

    client = TestClient(app)
    delete_response = client.delete("/mock-data/menu/KIT-SNA-006")

    assert delete_response.status_code == 200
    assert delete_response.json() == {"deleted": "KIT-SNA-006"}

    remaining = asyncio.run(store.menu.get("KIT-SNA-006"))
    assert remaining is None


def test_delete_mock_bill_drops_it_from_item_sales() -> None:
    reset_mock_store()
    client = TestClient(app)

    bills = asyncio.run(get_mock_store().bills.list())
    for bill in bills:
        if any(item.name == "Fish Fry" for item in bill.items):
            assert client.delete(f"/mock-data/bills/{bill.bill_id}").status_code == 200

    body = client.get("/mock-data").text

    assert "Fish Fry x" not in body
    assert "<td>Fish Fry</td><td>Kitchen</td><td>2</td>" not in body


def test_delete_mock_data_unknown_collection_returns_404() -> None:
    reset_mock_store()
    client = TestClient(app)

    response = client.delete("/mock-data/unknown/123")

    assert response.status_code == 404


def test_delete_mock_data_missing_record_returns_404() -> None:
    reset_mock_store()
    client = TestClient(app)

    response = client.delete("/mock-data/bills/BILL-99999")

    assert response.status_code == 404
    assert response.json()["detail"] == "Bill BILL-99999 not found"
