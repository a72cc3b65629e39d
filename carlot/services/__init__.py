from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Tuple

ZERO = Decimal("0")


@dataclass(frozen=True)
class Expense:
    id: str
    description: str
    amount: Decimal
    date: date
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class Vehicle:
    """
    Strongly typed car record used by the pure services.

    Built from DB rows by services.mapping; book_value is already resolved
    (falls back to purchase_price there).
    """

    id: str
    make: str
    model: str
    year: int
    miles: int
    purchase_price: Decimal
    book_value: Decimal
    created_at: datetime

    sold: bool = False
    sale_price: Optional[Decimal] = None
    sale_date: Optional[datetime] = None

    color: Optional[str] = None
    notes: Optional[str] = None
    image_url: Optional[str] = None
    invoice_url: Optional[str] = None

    expenses: Tuple[Expense, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        has_sale = self.sale_price is not None and self.sale_date is not None
        if self.sold != has_sale:
            raise ValueError(
                f"Vehicle {self.id}: sold={self.sold} requires sale_price and sale_date "
                "to be both set (sold) or both empty (in inventory)"
            )

    @property
    def total_expenses(self) -> Decimal:
        return sum((e.amount for e in self.expenses), ZERO)

    @property
    def total_cost(self) -> Decimal:
        return self.purchase_price + self.total_expenses

    @property
    def profit(self) -> Optional[Decimal]:
        """sale_price - purchase_price - expenses; None while in inventory."""
        if not self.sold or self.sale_price is None:
            return None
        return self.sale_price - self.total_cost


@dataclass(frozen=True)
class InventoryStats:
    total_cars: int = 0
    sold_cars: int = 0
    inventory_cars: int = 0
    total_investment: Decimal = ZERO
    total_revenue: Decimal = ZERO
    total_profit: Decimal = ZERO
    average_profit: Decimal = ZERO
    total_book_value: Decimal = ZERO
