"""CSV export of the inventory (one row per car)."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Iterable

from carlot.services import Vehicle

CSV_HEADER = (
    "ID",
    "Make",
    "Model",
    "Year",
    "Miles",
    "Purchase Price",
    "Selling Price",
    "Sold",
    "Sold Date",
    "Notes",
    "Created At",
)

CSV_FILENAME = "car_inventory.csv"
CSV_MEDIA_TYPE = "text/csv; charset=utf-8"


def _quote(text: str) -> str:
    return '"' + text.replace('"', '""') + '"'


def _cell(value: Any) -> str:
    """Plain cell; quoted only when it would otherwise break the row."""
    if value is None:
        return ""
    if isinstance(value, datetime):
        text = value.isoformat()
    elif isinstance(value, Decimal):
        text = f"{value:f}"
    else:
        text = str(value)
    if any(ch in text for ch in (",", '"', "\n", "\r")):
        return _quote(text)
    return text


# Rows are joined by hand: csv.writer quotes either every cell or only the
# ones that need it, and Notes must always be quoted.
def csv_row(vehicle: Vehicle) -> str:
    return ",".join(
        [
            _cell(vehicle.id),
            _cell(vehicle.make),
            _cell(vehicle.model),
            _cell(vehicle.year),
            _cell(vehicle.miles),
            _cell(vehicle.purchase_price),
            _cell(vehicle.sale_price if vehicle.sold else None),
            "Yes" if vehicle.sold else "No",
            _cell(vehicle.sale_date if vehicle.sold else None),
            # notes are always quoted, even when empty
            _quote(vehicle.notes or ""),
            _cell(vehicle.created_at),
        ]
    )


def render_inventory_csv(vehicles: Iterable[Vehicle]) -> str:
    lines = [",".join(CSV_HEADER)]
    lines.extend(csv_row(v) for v in vehicles)
    return "\n".join(lines) + "\n"
