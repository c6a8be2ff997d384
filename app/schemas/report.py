from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from pydantic import Field, model_validator

from app.schemas.base import CamelModel


class CategoryFilter(str, Enum):
    """Which line items feed a report."""

    ALL = "all"
    KITCHEN = "kitchen"
    BAR = "bar"

    def includes(self, is_kitchen: bool) -> bool:
        if self is CategoryFilter.KITCHEN:
            return is_kitchen
        if self is CategoryFilter.BAR:
            return not is_kitchen
        return True


class DateFilter(str, Enum):
    TODAY = "today"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    CUSTOM = "custom"
    ALL = "all"


class DateRange(CamelModel):
    """Inclusive local-time interval, start at 00:00 and end at 23:59:59.999."""

    start: datetime
    end: datetime

    @model_validator(mode="after")
    def _ordered(self) -> "DateRange":
        if self.start > self.end:
            raise ValueError("start must not be after end")
        return self

    @property
    def start_date(self) -> date:
        return self.start.date()

    @property
    def end_date(self) -> date:
        return self.end.date()


class AggregatedRow(CamelModel):
    item_id: str = ""
    name: str
    pack_size: str = "-"
    category: str
    price: float
    quantity: int
    total_amount: float


class ReportTotals(CamelModel):
    subtotal: float = 0.0
    total_quantity: int = 0
    gst: float = 0.0
    grand_total: float = 0.0
    item_count: int = 0


class BusinessInfo(CamelModel):
    name: str
    gstin: Optional[str] = None


class ReportSummary(CamelModel):
    bill_count: int = 0
    total_revenue: float = 0.0
    kitchen_revenue: float = 0.0
    bar_revenue: float = 0.0


class BillingReportRequest(CamelModel):
    period: DateFilter = Field(default=DateFilter.TODAY)
    category: CategoryFilter = Field(default=CategoryFilter.ALL)
    start_date: Optional[date] = Field(
        default=None, description="First day of a custom range (YYYY-MM-DD)"
    )
    end_date: Optional[date] = Field(
        default=None, description="Last day of a custom range (YYYY-MM-DD)"
    )


class BillingReport(CamelModel):
    """Aggregated report plus the context needed to render it."""

    period: DateFilter
    category: CategoryFilter
    date_range: Optional[DateRange] = None
    date_range_label: str
    rows: List[AggregatedRow] = Field(default_factory=list)
    totals: ReportTotals = Field(default_factory=ReportTotals)
    summary: ReportSummary = Field(default_factory=ReportSummary)
    generated_at: datetime
