"""
Sell transition.

A car is either in inventory or sold. The only transition is
in-inventory -> sold, and it is the only code path that writes the sale
fields. There is no way back; deleting a car is allowed in either state.
"""

from __future__ import annotations

import dataclasses
import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional

from carlot.services import Vehicle
from carlot.services.errors import InvalidSalePrice, VehicleAlreadySold

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _check_price(sale_price: Decimal) -> Decimal:
    if not isinstance(sale_price, Decimal):
        try:
            sale_price = Decimal(str(sale_price))
        except ArithmeticError:
            raise InvalidSalePrice("Please enter a valid selling price") from None
    if not sale_price.is_finite() or sale_price <= 0:
        raise InvalidSalePrice("Please enter a valid selling price")
    return sale_price


def sell_vehicle(vehicle: Vehicle, sale_price: Decimal, now: Optional[datetime] = None) -> Vehicle:
    """Return a sold copy of `vehicle` (the input is left untouched)."""
    if vehicle.sold:
        raise VehicleAlreadySold(vehicle.id)
    price = _check_price(sale_price)
    return dataclasses.replace(
        vehicle,
        sold=True,
        sale_price=price,
        sale_date=now or _utcnow(),
    )


def apply_sale(car: Any, sale_price: Decimal, now: Optional[datetime] = None) -> Any:
    """
    Same transition on a stored Car row. The caller commits.
    """
    if car.sold:
        raise VehicleAlreadySold(str(car.id))
    price = _check_price(sale_price)

    car.sold = True
    car.sale_price = price
    car.sale_date = now or _utcnow()

    logger.info("car %s marked sold for %s", car.id, price)
    return car
