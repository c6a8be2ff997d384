from datetime import datetime
from typing import Any, List, Optional

from pydantic import Field, ValidationError, ValidatorFunctionWrapHandler, field_validator

from app.schemas.base import CamelModel


class BillLineItem(CamelModel):
    """One product entry within a bill.

    Every field is optional on the wire. A value that cannot be read as the
    declared type is treated as missing, and aggregation applies the usual
    defaults to it, so one bad line never rejects the bill.
    """

    item_id: Optional[str] = None
    name: Optional[str] = None
    pack_size: Optional[str] = None
    category: Optional[str] = None
    is_kitchen: bool = False
    price: Optional[float] = None
    quantity: Optional[int] = None

    @field_validator("item_id", "name", "pack_size", "category", "price", "quantity", mode="wrap")
    @classmethod
    def _unreadable_as_missing(cls, value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
        try:
            return handler(value)
        except ValidationError:
            return None

    @field_validator("is_kitchen", mode="wrap")
    @classmethod
    def _unreadable_is_bar(cls, value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
        if value is None:
            return False
        try:
            return handler(value)
        except ValidationError:
            return False


class Customer(CamelModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    table_number: Optional[str] = None


class Bill(CamelModel):
    bill_id: Optional[str] = None
    created_at: Optional[datetime] = None
    items: List[BillLineItem] = Field(default_factory=list)
    customer: Optional[Customer] = None
    total: float = 0.0
    status: str = "open"

    @field_validator("items", mode="before")
    @classmethod
    def _null_items(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("created_at", mode="wrap")
    @classmethod
    def _unreadable_timestamp(cls, value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
        try:
            return handler(value)
        except ValidationError:
            return None

    @field_validator("total", mode="wrap")
    @classmethod
    def _unreadable_total(cls, value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
        if value is None:
            return 0.0
        try:
            return handler(value)
        except ValidationError:
            return 0.0

    @field_validator("status", mode="before")
    @classmethod
    def _null_status(cls, value: Any) -> Any:
        return value or "open"


class BillCreateRequest(CamelModel):
    items: List[BillLineItem]
    customer: Optional[Customer] = None
    total: Optional[float] = None


class BillListResponse(CamelModel):
    total: int
    items: List[Bill]


class BillStats(CamelModel):
    """Billing statistics as reported by the POS API."""

    total_bills: int = 0
    total_revenue: float = 0.0
    today_bills: int = 0
    today_revenue: float = 0.0
