from __future__ import annotations

from datetime import date
from typing import Iterable, List, Optional, Tuple

from carlot.services import Expense, Vehicle


def _matches(vehicle: Vehicle, needle: str) -> bool:
    return (
        needle in vehicle.make.lower()
        or needle in vehicle.model.lower()
        or needle in str(vehicle.year)
    )


def sort_newest_first(vehicles: Iterable[Vehicle]) -> List[Vehicle]:
    # sorted() is stable: equal created_at keeps the incoming order
    return sorted(vehicles, key=lambda v: v.created_at, reverse=True)


def filter_vehicles(vehicles: Iterable[Vehicle], query: Optional[str]) -> List[Vehicle]:
    """
    Case-insensitive substring search over make / model / year.

    A blank query keeps every vehicle. The result is always ordered by
    created_at, newest first, whether or not anything was filtered.
    """
    needle = (query or "").strip().lower()
    if needle:
        vehicles = [v for v in vehicles if _matches(v, needle)]
    return sort_newest_first(vehicles)


def _expense_key(expense: Expense) -> Tuple[date, float]:
    entered = expense.created_at.timestamp() if expense.created_at else 0.0
    return (expense.date or date.min, entered)


def sort_expenses_newest_first(expenses: Iterable[Expense]) -> List[Expense]:
    """By expense date, then entry time; newest first."""
    return sorted(expenses, key=_expense_key, reverse=True)
