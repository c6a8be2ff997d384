"""CSV and printable HTML rendering for billing reports."""

from __future__ import annotations

import html
import random
from datetime import datetime
from typing import List, Optional, Sequence

from app.schemas.report import AggregatedRow, BusinessInfo, ReportTotals
from app.services.date_range import format_date

CURRENCY_SYMBOL = "₹"
INVOICE_PREFIX = "JJ"
CSV_HEADERS = [
    "S.No",
    "Item ID",
    "Item Name",
    "Pack Size",
    "Category",
    "Quantity",
    f"Rate ({CURRENCY_SYMBOL})",
    f"Amount ({CURRENCY_SYMBOL})",
]
GSTIN_PLACEHOLDER = "XXXXXXXXXXXXXXXXX"


def _group_indian(digits: str) -> str:
    """Insert en-IN separators: last three digits, then pairs (12,34,567)."""

    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    pairs: List[str] = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return ",".join(pairs + [tail])


def format_currency(amount: Optional[float]) -> str:
    value = round(amount or 0.0, 2)
    sign = "-" if value < 0 else ""
    whole, fraction = f"{abs(value):.2f}".split(".")
    return f"{sign}{CURRENCY_SYMBOL}{_group_indian(whole)}.{fraction}"


def generate_invoice_number(
    now: Optional[datetime] = None, rng: Optional[random.Random] = None
) -> str:
    """Display-only invoice number, e.g. ``JJ2610190042``. Not unique."""

    now = now or datetime.now()
    suffix = (rng or random).randrange(10000)
    return f"{INVOICE_PREFIX}{now:%y%m%d}{suffix:04d}"


def report_filename(brand: str, period: str, category: str, now: Optional[datetime] = None) -> str:
    now = now or datetime.now()
    timestamp = int(now.timestamp() * 1000)
    return f"{brand}-report-{period}-{category}-{timestamp}.csv"


def render_csv(
    rows: Sequence[AggregatedRow],
    totals: ReportTotals,
    date_range: str,
    category: str,
    business: BusinessInfo,
    *,
    generated_at: Optional[datetime] = None,
) -> str:
    """Render the report as CSV text.

    Item names are wrapped in double quotes so embedded commas survive.
    Nothing else is escaped: quotes or newlines inside a name are written
    as-is.
    """

    generated_at = generated_at or datetime.now()
    lines = [
        f"{business.name.upper()} - BILLING REPORT",
        f"Date Range: {date_range}",
        f"Category: {category}",
        f"Generated: {format_date(generated_at)}",
        "",
        ",".join(CSV_HEADERS),
    ]
    for index, row in enumerate(rows, start=1):
        lines.append(
            ",".join(
                [
                    str(index),
                    row.item_id,
                    f'"{row.name}"',
                    row.pack_size,
                    row.category,
                    str(row.quantity),
                    f"{row.price:.2f}",
                    f"{row.total_amount:.2f}",
                ]
            )
        )
    lines.append("")
    lines.append(f"TOTAL,,,,{totals.total_quantity},,{totals.subtotal:.2f}")
    lines.append(f"GST (5%),,,,,,{totals.gst:.2f}")
    lines.append(f"GRAND TOTAL,,,,,,{totals.grand_total:.2f}")
    return "\n".join(lines) + "\n"


def _html_row(index: int, row: AggregatedRow) -> str:
    cells = [
        f"<td>{index}</td>",
        f"<td>{html.escape(row.item_id or '-')}</td>",
        f"<td>{html.escape(row.name)}</td>",
        f"<td>{html.escape(row.pack_size)}</td>",
        f"<td>{html.escape(row.category)}</td>",
        f'<td class="text-right">{row.quantity}</td>',
        f'<td class="text-right">{format_currency(row.price)}</td>',
        f'<td class="text-right">{format_currency(row.total_amount)}</td>',
    ]
    return "<tr>" + "".join(cells) + "</tr>"


def render_printable_html(
    rows: Sequence[AggregatedRow],
    totals: ReportTotals,
    date_range: str,
    category: str,
    business: BusinessInfo,
    *,
    generated_at: Optional[datetime] = None,
    invoice_number: Optional[str] = None,
) -> str:
    generated_at = generated_at or datetime.now()
    invoice_number = invoice_number or generate_invoice_number(generated_at)
    title = html.escape(f"{business.name.upper()} - BILLING REPORT")
    item_rows = "".join(_html_row(index, row) for index, row in enumerate(rows, start=1))

    return f"""<!DOCTYPE html>
<html>
    <head>
        <title>{title}</title>
        <style>
            * {{ margin: 0; padding: 0; box-sizing: border-box; }}
            body {{ font-family: Arial, sans-serif; font-size: 12px; padding: 20px; }}
            .header {{ text-align: center; margin-bottom: 20px; border-bottom: 2px solid #333; padding-bottom: 15px; }}
            .header h1 {{ font-size: 18px; margin-bottom: 5px; }}
            .header p {{ margin: 2px 0; color: #555; }}
            .meta {{ display: flex; justify-content: space-between; margin-bottom: 20px; }}
            .meta-right {{ text-align: right; }}
            table {{ width: 100%; border-collapse: collapse; margin-bottom: 20px; }}
            th, td {{ border: 1px solid #333; padding: 8px; text-align: left; }}
            th {{ background: #f5f5f5; font-weight: bold; }}
            .text-right {{ text-align: right; }}
            .totals-row {{ font-weight: bold; background: #f9f9f9; }}
            .grand-total {{ font-size: 14px; background: #e8e8e8; }}
            .footer {{ margin-top: 30px; display: flex; justify-content: space-between; }}
            .signature {{ text-align: center; padding-top: 40px; border-top: 1px solid #333; width: 200px; }}
            @media print {{ body {{ padding: 10px; }} }}
        </style>
    </head>
    <body>
        <div class="header">
            <h1>{title}</h1>
            <p>{html.escape(business.name)}</p>
            <p>GSTIN: {html.escape(business.gstin or GSTIN_PLACEHOLDER)}</p>
        </div>
        <div class="meta">
            <div class="meta-left">
                <p><strong>Report Type:</strong> {html.escape(category.upper())} ITEMS</p>
                <p><strong>Date Range:</strong> {html.escape(date_range)}</p>
                <p><strong>Total Items:</strong> {totals.item_count}</p>
            </div>
            <div class="meta-right">
                <p><strong>Invoice No:</strong> {invoice_number}</p>
                <p><strong>Generated:</strong> {format_date(generated_at)}</p>
            </div>
        </div>
        <table>
            <thead>
                <tr>
                    <th width="5%">S.No</th>
                    <th width="12%">Item ID</th>
                    <th width="30%">Item Name</th>
                    <th width="10%">Pack Size</th>
                    <th width="10%">Category</th>
                    <th width="8%" class="text-right">Qty</th>
                    <th width="12%" class="text-right">Rate</th>
                    <th width="13%" class="text-right">Amount</th>
                </tr>
            </thead>
            <tbody>
                {item_rows}
                <tr class="totals-row">
                    <td colspan="5" class="text-right">SUBTOTAL</td>
                    <td class="text-right">{totals.total_quantity}</td>
                    <td></td>
                    <td class="text-right">{format_currency(totals.subtotal)}</td>
                </tr>
                <tr class="totals-row">
                    <td colspan="7" class="text-right">GST (5%)</td>
                    <td class="text-right">{format_currency(totals.gst)}</td>
                </tr>
                <tr class="totals-row grand-total">
                    <td colspan="7" class="text-right">GRAND TOTAL</td>
                    <td class="text-right">{format_currency(totals.grand_total)}</td>
                </tr>
            </tbody>
        </table>
        <div class="footer">
            <div class="signature">Prepared By</div>
            <div class="signature">Authorized Signatory</div>
        </div>
    </body>
</html>
"""
