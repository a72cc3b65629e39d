from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from carlot.services import ZERO, InventoryStats, Vehicle

CENT = Decimal("0.01")


def _quantize(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def compute_inventory_stats(vehicles: Iterable[Vehicle]) -> InventoryStats:
    """
    Summary figures over a user's whole inventory.

    Expenses must already be loaded on every vehicle; nothing is fetched here.
    Recomputed from scratch on every call.
    """
    cars = list(vehicles)
    sold = [c for c in cars if c.sold]
    in_stock = [c for c in cars if not c.sold]

    total_investment = sum((c.total_cost for c in cars), ZERO)
    total_revenue = sum((c.sale_price or ZERO for c in sold), ZERO)
    total_profit = sum(
        ((c.sale_price or ZERO) - c.purchase_price - c.total_expenses for c in sold),
        ZERO,
    )
    total_book_value = sum((c.book_value for c in in_stock), ZERO)

    # no sales yet -> 0, not a division error
    average_profit = _quantize(total_profit / len(sold)) if sold else ZERO

    return InventoryStats(
        total_cars=len(cars),
        sold_cars=len(sold),
        inventory_cars=len(in_stock),
        total_investment=total_investment,
        total_revenue=total_revenue,
        total_profit=total_profit,
        average_profit=average_profit,
        total_book_value=total_book_value,
    )
