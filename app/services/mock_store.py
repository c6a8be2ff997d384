from __future__ import annotations

import itertools
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional

from app.schemas.billing import Bill, BillCreateRequest, BillLineItem, BillStats, Customer
from app.schemas.menu import MenuItem, MenuItemCreate, MenuItemUpdate


def _local_now() -> datetime:
    return datetime.now().replace(microsecond=0)


def _as_local(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


class _BaseRepository:
    def __init__(self, prefix: str) -> None:
        self._prefix = prefix
        self._counter = itertools.count(1)

    def _next_id(self) -> str:
        return f"{self._prefix}-{next(self._counter):05d}"


# (name, price, category, stock, low stock threshold, is_kitchen)
_DEFAULT_MENU = [
    ("Mineral Water", 30, "drinks", 100, 20, False),
    ("Soda", 40, "drinks", 80, 15, False),
    ("Fresh Lime", 60, "drinks", 50, 10, False),
    ("Cold Coffee", 80, "drinks", 40, 10, False),
    ("Mango Juice", 70, "drinks", 35, 10, False),
    ("Kingfisher", 180, "beer", 60, 20, False),
    ("Budweiser", 220, "beer", 45, 15, False),
    ("Corona", 280, "beer", 30, 10, False),
    ("Heineken", 250, "beer", 25, 10, False),
    ("Carlsberg", 200, "beer", 40, 15, False),
    ("Mojito", 350, "cocktails", 20, 5, False),
    ("Margarita", 380, "cocktails", 15, 5, False),
    ("Long Island", 450, "cocktails", 12, 5, False),
    ("Cosmopolitan", 400, "cocktails", 10, 5, False),
    ("Pina Colada", 380, "cocktails", 8, 5, False),
    ("Chicken 65", 280, "food", 25, 8, True),
    ("Gobi Manchurian", 220, "food", 20, 8, True),
    ("Paneer Tikka", 260, "food", 18, 5, True),
    ("Tandoori Chicken", 350, "food", 15, 5, True),
    ("Fish Fry", 320, "food", 12, 5, True),
    ("Mutton Seekh", 380, "food", 10, 5, True),
    ("Chilli Chicken", 290, "food", 20, 8, True),
    ("Mushroom Fry", 240, "food", 15, 5, True),
    ("French Fries", 150, "snacks", 40, 15, True),
    ("Onion Rings", 160, "snacks", 35, 10, True),
    ("Masala Papad", 80, "snacks", 50, 20, True),
    ("Peanut Masala", 120, "snacks", 45, 15, True),
    ("Cheese Balls", 180, "snacks", 30, 10, True),
    ("Spring Roll", 200, "snacks", 25, 8, True),
    ("Veg Pakora", 140, "snacks", 35, 10, True),
]


class MenuRepository:
    def __init__(self) -> None:
        self._items: Dict[str, MenuItem] = {}
        self._counters: Dict[str, itertools.count] = {}
        self._seed_defaults()

    def _seed_defaults(self) -> None:
        for name, price, category, stock, threshold, is_kitchen in _DEFAULT_MENU:
            item_id = self._next_item_id(category, is_kitchen)
            self._items[item_id] = MenuItem(
                item_id=item_id,
                name=name,
                price=float(price),
                category=category,
                stock=stock,
                low_stock_threshold=threshold,
                is_kitchen=is_kitchen,
            )

    def _next_item_id(self, category: str, is_kitchen: bool) -> str:
        station = "KIT" if is_kitchen else "BAR"
        prefix = f"{station}-{category.upper()[:3]}"
        counter = self._counters.setdefault(prefix, itertools.count(1))
        return f"{prefix}-{next(counter):03d}"

    async def list(self, *, is_kitchen: Optional[bool] = None) -> List[MenuItem]:
        items = list(self._items.values())
        if is_kitchen is None:
            return [item.model_copy() for item in items]
        return [item.model_copy() for item in items if item.is_kitchen == is_kitchen]

    async def low_stock(self) -> List[MenuItem]:
        return [
            item.model_copy()
            for item in self._items.values()
            if item.stock <= item.low_stock_threshold
        ]

    async def get(self, item_id: str) -> Optional[MenuItem]:
        item = self._items.get(item_id)
        return item.model_copy() if item is not None else None

    async def create(self, request: MenuItemCreate) -> MenuItem:
        item_id = request.item_id or self._next_item_id(request.category, request.is_kitchen)
        if item_id in self._items:
            raise ValueError(f"Menu item {item_id} already exists")
        item = MenuItem(item_id=item_id, **request.model_dump(exclude={"item_id"}))
        self._items[item_id] = item
        return item.model_copy()

    async def update(self, item_id: str, request: MenuItemUpdate) -> MenuItem:
        item = self._items.get(item_id)
        if item is None:
            raise KeyError(f"Menu item {item_id} not found")
        updated = item.model_copy(update=request.model_dump(exclude_unset=True, exclude_none=True))
        self._items[item_id] = updated
        return updated.model_copy()

    async def adjust_stock(self, item_id: str, quantity: int) -> MenuItem:
        item = self._items.get(item_id)
        if item is None:
            raise KeyError(f"Menu item {item_id} not found")
        item.stock = max(0, item.stock + quantity)
        return item.model_copy()

    async def delete(self, item_id: str) -> bool:
        return self._items.pop(item_id, None) is not None


class BillRepository(_BaseRepository):
    def __init__(self, *, seed: bool = True) -> None:
        super().__init__("BILL")
        self._bills: Dict[str, Bill] = {}
        if seed:
            self._seed_defaults()

    def _seed_defaults(self) -> None:
        now = _local_now()
        seeds = [
            (0, "Arun", "4", [("BAR-BEE-001", "Kingfisher", 180, 3, False), ("KIT-FOO-001", "Chicken 65", 280, 1, True)]),
            (0, "Meena", "7", [("BAR-COC-001", "Mojito", 350, 2, False), ("KIT-SNA-001", "French Fries", 150, 2, True)]),
            (2, "Karthik", "2", [("BAR-BEE-001", "Kingfisher", 180, 4, False), ("KIT-FOO-003", "Paneer Tikka", 260, 1, True)]),
            (5, None, None, [("BAR-BEE-002", "Budweiser", 220, 2, False), ("KIT-SNA-003", "Masala Papad", 80, 3, True)]),
            (12, "Divya", "1", [("BAR-COC-003", "Long Island", 450, 1, False), ("KIT-FOO-004", "Tandoori Chicken", 350, 1, True)]),
            (45, "Ravi", "5", [("BAR-DRI-001", "Mineral Water", 30, 4, False), ("KIT-FOO-005", "Fish Fry", 320, 2, True)]),
        ]
        for days_ago, customer, table, items in seeds:
            self.add(
                Bill(
                    created_at=now - timedelta(days=days_ago),
                    customer=Customer(name=customer, table_number=table) if customer else None,
                    items=[
                        BillLineItem(
                            item_id=item_id,
                            name=name,
                            price=float(price),
                            quantity=quantity,
                            is_kitchen=is_kitchen,
                        )
                        for item_id, name, price, quantity, is_kitchen in items
                    ],
                    status="paid",
                )
            )

    @staticmethod
    def _bill_total(items: Iterable[BillLineItem]) -> float:
        return round(sum((item.price or 0.0) * (item.quantity or 1) for item in items), 2)

    def add(self, bill: Bill) -> Bill:
        bill_id = bill.bill_id or self._next_id()
        stored = bill.model_copy(
            update={
                "bill_id": bill_id,
                "created_at": bill.created_at or _local_now(),
                "total": bill.total or self._bill_total(bill.items),
            }
        )
        self._bills[bill_id] = stored
        return stored.model_copy()

    async def create(self, request: BillCreateRequest) -> Bill:
        return self.add(
            Bill(items=request.items, customer=request.customer, total=request.total or 0.0)
        )

    def _newest_first(self, bills: Iterable[Bill]) -> List[Bill]:
        return sorted(bills, key=lambda bill: _as_local(bill.created_at), reverse=True)

    async def list(self, limit: Optional[int] = None) -> List[Bill]:
        bills = self._newest_first(self._bills.values())
        if limit is not None:
            bills = bills[:limit]
        return [bill.model_copy() for bill in bills]

    async def between(self, start: date, end: date) -> List[Bill]:
        matches = [
            bill
            for bill in self._bills.values()
            if start <= _as_local(bill.created_at).date() <= end
        ]
        return [bill.model_copy() for bill in self._newest_first(matches)]

    async def get(self, bill_id: str) -> Optional[Bill]:
        bill = self._bills.get(bill_id)
        return bill.model_copy() if bill is not None else None

    async def delete(self, bill_id: str) -> bool:
        return self._bills.pop(bill_id, None) is not None

    async def stats(self, today: Optional[date] = None) -> BillStats:
        today = today or date.today()
        todays = [b for b in self._bills.values() if _as_local(b.created_at).date() == today]
        return BillStats(
            total_bills=len(self._bills),
            total_revenue=round(sum(b.total for b in self._bills.values()), 2),
            today_bills=len(todays),
            today_revenue=round(sum(b.total for b in todays), 2),
        )


@dataclass
class MockDataStore:
    menu: MenuRepository
    bills: BillRepository


_mock_store: Optional[MockDataStore] = None


def get_mock_store() -> MockDataStore:
    global _mock_store
    if _mock_store is None:
        _mock_store = MockDataStore(menu=MenuRepository(), bills=BillRepository())
    return _mock_store


def reset_mock_store() -> None:
    global _mock_store
    _mock_store = None
