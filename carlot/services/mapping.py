"""
Row -> domain translation.

Rows come either as ORM objects (Car / ExpenseORM) or as plain mappings
(e.g. JSON from an import or a raw SQL result). Column names follow the
database ("mileage", "sale_price", "expense_date"); the domain records use
the app names ("miles", "date"). book_value falls back to purchase_price here
and nowhere else.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Mapping, Optional

from carlot.services import ZERO, Expense, Vehicle
from carlot.services.search import sort_expenses_newest_first


def _get(row: Any, key: str, default: Any = None) -> Any:
    if isinstance(row, Mapping):
        return row.get(key, default)
    return getattr(row, key, default)


def _to_decimal(value: Any, *, default: Optional[Decimal] = None) -> Optional[Decimal]:
    """Exact Decimal from int/float/str/Decimal (floats go through str)."""
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, Decimal):
        return value
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return default
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return default


def _to_int(value: Any, *, default: int = 0) -> int:
    if value is None or isinstance(value, bool):
        return default
    try:
        if isinstance(value, str):
            value = value.strip()
            if not value:
                return default
            return int(float(value))
        return int(value)
    except (TypeError, ValueError):
        return default


def _as_utc(value: datetime) -> datetime:
    # every timestamp is stamped in UTC; SQLite hands them back without the offset
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _to_datetime(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return _as_utc(value)
    if isinstance(value, str) and value.strip():
        # tolerate the trailing "Z" most JSON producers emit
        return _as_utc(datetime.fromisoformat(value.strip().replace("Z", "+00:00")))
    return None


def _to_date(value: Any) -> Optional[date]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        return date.fromisoformat(value.strip()[:10])
    return None


def expense_from_row(row: Any) -> Expense:
    return Expense(
        id=str(_get(row, "id")),
        description=str(_get(row, "description") or ""),
        amount=_to_decimal(_get(row, "amount"), default=ZERO),
        date=_to_date(_get(row, "expense_date", _get(row, "date"))),
        created_at=_to_datetime(_get(row, "created_at")),
    )


def vehicle_from_row(row: Any, expenses: Optional[Iterable[Any]] = None) -> Vehicle:
    """
    Build a Vehicle from a car row.

    expenses: rows to attach; when omitted the row's own "expenses"
    attribute/key is used (ORM relationship), else none.
    """
    if expenses is None:
        expenses = _get(row, "expenses") or ()

    purchase_price = _to_decimal(_get(row, "purchase_price"), default=ZERO)
    book_value = _to_decimal(_get(row, "book_value"))
    if book_value is None:
        book_value = purchase_price

    sold = bool(_get(row, "sold", False))
    miles = _get(row, "mileage", _get(row, "miles"))

    return Vehicle(
        id=str(_get(row, "id")),
        make=str(_get(row, "make") or ""),
        model=str(_get(row, "model") or ""),
        year=_to_int(_get(row, "year")),
        miles=_to_int(miles),
        purchase_price=purchase_price,
        book_value=book_value,
        created_at=_to_datetime(_get(row, "created_at")),
        sold=sold,
        sale_price=_to_decimal(_get(row, "sale_price")) if sold else None,
        sale_date=_to_datetime(_get(row, "sale_date")) if sold else None,
        color=_get(row, "color"),
        notes=_get(row, "notes"),
        image_url=_get(row, "image_url"),
        invoice_url=_get(row, "invoice_url"),
        expenses=tuple(sort_expenses_newest_first(expense_from_row(e) for e in expenses)),
    )


def vehicles_from_rows(rows: Iterable[Any]) -> list[Vehicle]:
    return [vehicle_from_row(r) for r in rows]
