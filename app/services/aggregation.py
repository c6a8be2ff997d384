from __future__ import annotations

import logging
from typing import Dict, Iterable, List

from app.schemas.billing import Bill, BillLineItem
from app.schemas.report import AggregatedRow, CategoryFilter, ReportTotals

logger = logging.getLogger(__name__)

GST_RATE = 0.05
UNKNOWN_ITEM = "Unknown Item"


def item_category_for(is_kitchen: bool) -> str:
    return "Kitchen" if is_kitchen else "Bar"


def item_key(item: BillLineItem) -> str:
    """Identity of a line item across bills: catalog id, else display name."""

    return item.item_id or item.name or UNKNOWN_ITEM


def _line_values(item: BillLineItem) -> tuple[float, int]:
    # Zero and missing quantities both count as a single unit.
    price = item.price or 0.0
    quantity = item.quantity or 1
    return price, quantity


def aggregate_items(
    bills: Iterable[Bill], category: CategoryFilter = CategoryFilter.ALL
) -> List[AggregatedRow]:
    """Merge line items sharing an identity key into report rows.

    The first line item seen for a key supplies the row's descriptive fields
    and its price; later ones only add to ``quantity`` and ``total_amount``.
    Rows come back ordered by ``total_amount`` descending, ties keeping the
    order in which their keys were first encountered.
    """

    rows: Dict[str, AggregatedRow] = {}
    for bill in bills:
        for item in bill.items:
            if not category.includes(item.is_kitchen):
                continue
            price, quantity = _line_values(item)
            key = item_key(item)
            existing = rows.get(key)
            if existing is not None:
                existing.quantity += quantity
                existing.total_amount += price * quantity
                continue
            rows[key] = AggregatedRow(
                item_id=item.item_id or "",
                name=item.name or UNKNOWN_ITEM,
                pack_size=item.pack_size or "-",
                category=item.category or item_category_for(item.is_kitchen),
                price=price,
                quantity=quantity,
                total_amount=price * quantity,
            )

    logger.debug("Aggregated %d distinct items for category %s", len(rows), category.value)
    return sorted(rows.values(), key=lambda row: row.total_amount, reverse=True)


def calculate_totals(rows: Iterable[AggregatedRow]) -> ReportTotals:
    subtotal = 0.0
    total_quantity = 0
    item_count = 0
    for row in rows:
        subtotal += row.total_amount
        total_quantity += row.quantity
        item_count += 1
    gst = round(subtotal * GST_RATE, 2)
    return ReportTotals(
        subtotal=subtotal,
        total_quantity=total_quantity,
        gst=gst,
        grand_total=subtotal + gst,
        item_count=item_count,
    )
