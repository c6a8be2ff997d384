"""Browse the in-memory POS data together with the item report it aggregates into."""
from __future__ import annotations

import html
from typing import Dict, Iterable, List, Optional, Sequence

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import HTMLResponse

from app.schemas.billing import Bill
from app.schemas.menu import MenuItem
from app.schemas.report import CategoryFilter
from app.services.aggregation import aggregate_items, calculate_totals
from app.services.date_range import format_date
from app.services.mock_store import get_mock_store
from app.services.report_renderer import format_currency

router = APIRouter()

_PAGE_STYLE = """
    body { font-family: Arial, sans-serif; margin: 2rem; color: #222; }
    h1 { margin-bottom: 0.25rem; }
    .meta { color: #666; margin-bottom: 2rem; }
    table { border-collapse: collapse; width: 100%; margin-bottom: 2rem; }
    th, td { border: 1px solid #ccc; padding: 0.4rem 0.6rem; text-align: left; }
    th { background: #f0f0f0; }
    tr.low td { background: #fdecea; }
    tfoot td { font-weight: bold; }
"""


def _cells(values: Sequence[str], tag: str = "td") -> str:
    return "".join(f"<{tag}>{html.escape(value)}</{tag}>" for value in values)


def _section(
    title: str,
    headers: Sequence[str],
    rows: Sequence[Sequence[str]],
    *,
    empty: str,
    footer: Iterable[Sequence[str]] = (),
    row_classes: Optional[Sequence[str]] = None,
) -> str:
    heading = f"<h2>{html.escape(title)}</h2>"
    if not rows:
        return f"{heading}<p>{html.escape(empty)}</p>"
    body = []
    for index, row in enumerate(rows):
        css = row_classes[index] if row_classes else ""
        class_attr = f' class="{css}"' if css else ""
        body.append(f"<tr{class_attr}>{_cells(row)}</tr>")
    foot = "".join(f"<tr>{_cells(row)}</tr>" for row in footer)
    return (
        f"{heading}<table><thead><tr>{_cells(headers, 'th')}</tr></thead>"
        f"<tbody>{''.join(body)}</tbody><tfoot>{foot}</tfoot></table>"
    )


def _item_sales_section(bills: Sequence[Bill], category: CategoryFilter) -> str:
    rows = aggregate_items(bills, category)
    totals = calculate_totals(rows)
    table_rows = [
        [
            str(index),
            row.item_id or "-",
            row.name,
            row.category,
            str(row.quantity),
            format_currency(row.price),
            format_currency(row.total_amount),
        ]
        for index, row in enumerate(rows, start=1)
    ]
    footer = [
        ["", "", "Subtotal", "", str(totals.total_quantity), "", format_currency(totals.subtotal)],
        ["", "", "GST (5%)", "", "", "", format_currency(totals.gst)],
        ["", "", "Grand Total", "", "", "", format_currency(totals.grand_total)],
    ]
    return _section(
        f"Item Sales ({category.value})",
        ["#", "Item ID", "Item", "Category", "Qty", "Rate", "Amount"],
        table_rows,
        empty="No items sold.",
        footer=footer,
    )


def _bills_section(bills: Sequence[Bill]) -> str:
    table_rows: List[List[str]] = []
    for bill in bills:
        customer = bill.customer
        table_rows.append(
            [
                bill.bill_id or "",
                format_date(bill.created_at) if bill.created_at else "",
                (customer.name or "") if customer else "",
                (customer.table_number or "") if customer else "",
                ", ".join(f"{item.name or '-'} x{item.quantity or 1}" for item in bill.items),
                format_currency(bill.total),
                bill.status,
            ]
        )
    return _section(
        "Bills",
        ["Bill", "Date", "Customer", "Table", "Items", "Total", "Status"],
        table_rows,
        empty="No bills recorded.",
    )


def _stock_section(items: Sequence[MenuItem]) -> str:
    low = [item.stock <= item.low_stock_threshold for item in items]
    table_rows = [
        [
            item.item_id,
            item.name,
            "Kitchen" if item.is_kitchen else "Bar",
            str(item.stock),
            str(item.low_stock_threshold),
        ]
        for item in items
    ]
    return _section(
        "Stock",
        ["Item ID", "Name", "Section", "Stock", "Low at"],
        table_rows,
        empty="Menu is empty.",
        row_classes=["low" if flag else "" for flag in low],
    )


@router.get("/mock-data", response_class=HTMLResponse)
async def view_mock_data(category: CategoryFilter = Query(CategoryFilter.ALL)) -> HTMLResponse:
    """Item sales across every stored bill, then the bills and the stock levels."""
    store = get_mock_store()
    bills = await store.bills.list()
    items = await store.menu.list()

    sections = "".join(
        [
            _item_sales_section(bills, category),
            _bills_section(bills),
            _stock_section(items),
        ]
    )
    page = (
        "<!DOCTYPE html><html><head><meta charset=\"utf-8\">"
        f"<title>Mock POS Data</title><style>{_PAGE_STYLE}</style></head><body>"
        "<h1>Mock POS Data</h1>"
        f"<p class=\"meta\">{len(bills)} bills, {len(items)} menu items</p>"
        f"{sections}</body></html>"
    )
    return HTMLResponse(content=page)


@router.delete("/mock-data/bills/{bill_id}")
async def delete_mock_bill(bill_id: str) -> Dict[str, str]:
    if not await get_mock_store().bills.delete(bill_id):
        raise HTTPException(status_code=404, detail=f"Bill {bill_id} not found")
    return {"deleted": bill_id}


@router.delete("/mock-data/menu/{item_id}")
async def delete_mock_menu_item(item_id: str) -> Dict[str, str]:
    if not await get_mock_store().menu.delete(item_id):
        raise HTTPException(status_code=404, detail=f"Menu item {item_id} not found")
    return {"deleted": item_id}
