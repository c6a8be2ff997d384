from typing import Optional

from pydantic import Field

from app.schemas.base import CamelModel


class MenuItem(CamelModel):
    item_id: str
    name: str
    price: float = 0.0
    category: str
    pack_size: Optional[str] = None
    stock: int = 0
    low_stock_threshold: int = 0
    is_kitchen: bool = False


class MenuItemCreate(CamelModel):
    item_id: Optional[str] = Field(
        default=None,
        description="Catalog identifier, e.g. 'BAR-BEE-0412'. Assigned when omitted.",
    )
    name: str
    price: float = Field(..., ge=0)
    category: str
    pack_size: Optional[str] = None
    stock: int = Field(default=0, ge=0)
    low_stock_threshold: int = Field(default=0, ge=0)
    is_kitchen: bool = False


class MenuItemUpdate(CamelModel):
    name: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    category: Optional[str] = None
    pack_size: Optional[str] = None
    stock: Optional[int] = Field(default=None, ge=0)
    low_stock_threshold: Optional[int] = Field(default=None, ge=0)
    is_kitchen: Optional[bool] = None


class StockAdjustment(CamelModel):
    quantity: int = Field(..., description="Signed change applied to the current stock")
