"""Billing report pipeline: fetch bills for a period, aggregate and export.

:class:`BillingReportService` is what the HTTP routes and MCP tools call; each
request generates a fresh report. :class:`ReportSession` is a client-side
helper for long-lived consumers that keep one report on screen and refresh it
as filters change (a dashboard view, an interactive shell). The stateless
server surfaces do not use it.
"""
from __future__ import annotations

import itertools
import logging
from datetime import date, datetime
from typing import Callable, List, Optional, Protocol, Sequence

from app.schemas.billing import Bill
from app.schemas.report import (
    BillingReport,
    BillingReportRequest,
    BusinessInfo,
    CategoryFilter,
    DateFilter,
    DateRange,
    ReportSummary,
)
from app.services.aggregation import aggregate_items, calculate_totals
from app.services.date_range import date_range_label, is_unresolved, resolve_date_range
from app.services.exceptions import ServiceError
from app.services.report_renderer import render_csv, render_printable_html, report_filename

logger = logging.getLogger(__name__)


class BillFetcher(Protocol):
    async def fetch_all(self, limit: int = ...) -> List[Bill]:
        """Most recent bills, newest first, at most ``limit``."""

    async def fetch_today(self) -> List[Bill]:
        """Bills created on the current local calendar day."""

    async def fetch_by_date_range(self, start: date, end: date) -> List[Bill]:
        """Bills created between two local calendar days, both inclusive."""


def build_report(
    bills: Sequence[Bill],
    request: BillingReportRequest,
    date_range: Optional[DateRange],
    *,
    generated_at: datetime,
) -> BillingReport:
    """Aggregate already fetched bills into a report. Pure."""

    rows = aggregate_items(bills, request.category)
    totals = calculate_totals(rows)
    summary = ReportSummary(
        bill_count=len(bills),
        total_revenue=totals.grand_total,
        kitchen_revenue=calculate_totals(aggregate_items(bills, CategoryFilter.KITCHEN)).grand_total,
        bar_revenue=calculate_totals(aggregate_items(bills, CategoryFilter.BAR)).grand_total,
    )
    return BillingReport(
        period=request.period,
        category=request.category,
        date_range=date_range,
        date_range_label=date_range_label(request.period, date_range),
        rows=rows,
        totals=totals,
        summary=summary,
        generated_at=generated_at,
    )


class BillingReportService:
    """Resolve the period, fetch its bills and aggregate them into a report.

    Fetch failures never propagate: they are logged and the report is built
    from an empty bill list, so callers always get a renderable result.
    """

    def __init__(
        self,
        fetcher: BillFetcher,
        *,
        business: BusinessInfo,
        brand: str = "jumjum",
        all_bills_limit: int = 500,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._fetcher = fetcher
        self._business = business
        self._brand = brand
        self._all_bills_limit = all_bills_limit
        self._clock = clock

    @property
    def business(self) -> BusinessInfo:
        return self._business

    async def _load_bills(
        self, period: DateFilter, date_range: Optional[DateRange]
    ) -> List[Bill]:
        if is_unresolved(period, date_range):
            logger.info("Custom range is incomplete; skipping bill fetch")
            return []
        try:
            if period is DateFilter.ALL:
                return await self._fetcher.fetch_all(self._all_bills_limit)
            if period is DateFilter.TODAY:
                return await self._fetcher.fetch_today()
            return await self._fetcher.fetch_by_date_range(
                date_range.start_date, date_range.end_date
            )
        except ServiceError:
            logger.exception("Failed to load bills for %s report", period.value)
            return []

    async def generate(self, request: BillingReportRequest) -> BillingReport:
        now = self._clock()
        date_range = resolve_date_range(
            request.period,
            today=now.date(),
            start=request.start_date,
            end=request.end_date,
        )
        logger.info(
            "Generating %s billing report for %s items",
            request.period.value,
            request.category.value,
        )
        bills = await self._load_bills(request.period, date_range)
        return build_report(bills, request, date_range, generated_at=now)

    def to_csv(self, report: BillingReport) -> str:
        return render_csv(
            report.rows,
            report.totals,
            report.date_range_label,
            report.category.value,
            self._business,
            generated_at=report.generated_at,
        )

    def to_html(self, report: BillingReport) -> str:
        return render_printable_html(
            report.rows,
            report.totals,
            report.date_range_label,
            report.category.value,
            self._business,
            generated_at=report.generated_at,
        )

    def csv_filename(self, report: BillingReport) -> str:
        return report_filename(
            self._brand,
            report.period.value,
            report.category.value,
            report.generated_at,
        )


class ReportSession:
    """Holds the report currently on screen for one client-side dashboard view.

    Every refresh is tagged with a sequence number. A refresh that completes
    after a newer one was issued is dropped, so a slow response can never
    replace the result of a later request.
    """

    def __init__(self, service: BillingReportService) -> None:
        self._service = service
        self._sequence = itertools.count(1)
        self._latest = 0
        self.current: Optional[BillingReport] = None

    async def refresh(self, request: BillingReportRequest) -> Optional[BillingReport]:
        """Regenerate the report; ``None`` if a newer refresh superseded this one."""

        ticket = next(self._sequence)
        self._latest = ticket
        report = await self._service.generate(request)
        if ticket != self._latest:
            logger.debug("Discarding stale report #%d (latest is #%d)", ticket, self._latest)
            return None
        self.current = report
        return report
