from __future__ import annotations

import logging
from typing import List, Optional

from mcp.server.fastmcp import Context, FastMCP
from pydantic import BaseModel, Field

from app.config import get_settings
from app.dependencies.services import build_report_service, get_pos_client_cached
from app.schemas.report import (
    AggregatedRow,
    BillingReportRequest,
    CategoryFilter,
    DateFilter,
    ReportSummary,
    ReportTotals,
)
from app.services.bills import BillingService
from app.services.report import BillingReportService

log = logging.getLogger("jumjum.mcp")

# Mounted at /mcp by app.main, so the endpoint itself sits at the mount root.
mcp = FastMCP("jumjum_reports", streamable_http_path="/")


class ReportInput(BaseModel):
    period: DateFilter = Field(
        DateFilter.TODAY, description="today, weekly, monthly, yearly, custom or all"
    )
    category: CategoryFilter = Field(CategoryFilter.ALL, description="all, kitchen or bar")
    start_date: Optional[str] = Field(None, description="Custom range start, YYYY-MM-DD")
    end_date: Optional[str] = Field(None, description="Custom range end, YYYY-MM-DD")


class ReportOutput(BaseModel):
    date_range: str
    rows: List[AggregatedRow]
    totals: ReportTotals
    summary: ReportSummary


class CsvOutput(BaseModel):
    filename: str
    content: str


def _report_service() -> BillingReportService:
    return build_report_service(get_settings(), BillingService(get_pos_client_cached()))


def _request(input: ReportInput) -> BillingReportRequest:
    return BillingReportRequest(
        period=input.period,
        category=input.category,
        start_date=input.start_date,
        end_date=input.end_date,
    )


@mcp.tool(name="billing_report", description="Aggregate bills into a GST inclusive item report")
async def billing_report(input: ReportInput, ctx: Context) -> ReportOutput:
    log.debug("billing_report input=%s", input.model_dump())
    report = await _report_service().generate(_request(input))
    out = ReportOutput(
        date_range=report.date_range_label,
        rows=report.rows,
        totals=report.totals,
        summary=report.summary,
    )
    log.debug("billing_report returned %d rows", len(out.rows))
    return out


@mcp.tool(name="billing_report_csv", description="Billing report as downloadable CSV text")
async def billing_report_csv(input: ReportInput, ctx: Context) -> CsvOutput:
    log.debug("billing_report_csv input=%s", input.model_dump())
    service = _report_service()
    report = await service.generate(_request(input))
    return CsvOutput(filename=service.csv_filename(report), content=service.to_csv(report))


@mcp.tool(name="ping", description="Health check")
async def ping(message: str) -> str:
    log.debug("ping %s", message)
    return f"pong: {message}"
