# carlot/routes/cars.py
from __future__ import annotations

import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy import desc, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from carlot.db.session import get_db
from carlot.dependencies.auth import get_current_user
from carlot.dependencies.storage import get_storage
from carlot.models.car import Car
from carlot.models.user import User
from carlot.schemas.car import (
    CarCreate,
    CarRead,
    CarsListResponse,
    CarUpdate,
    InventoryStatsRead,
    SellIn,
)
from carlot.services import Vehicle
from carlot.services.errors import InvalidSalePrice, VehicleAlreadySold
from carlot.services.export import CSV_FILENAME, CSV_MEDIA_TYPE, render_inventory_csv
from carlot.services.inventory import apply_sale
from carlot.services.mapping import vehicle_from_row, vehicles_from_rows
from carlot.services.search import filter_vehicles
from carlot.services.stats import compute_inventory_stats
from carlot.services.storage import LocalBlobStorage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cars", tags=["cars"])

# API field name -> column name (everything else maps 1:1)
_COLUMN_FOR_FIELD = {"miles": "mileage"}


# =========================================================
# Internal helpers
# =========================================================
def get_car_owned(db: Session, car_id: UUID, current_user: User) -> Car:
    """Fetch a car of the current user; other users' cars are "not found"."""
    car: Optional[Car] = db.get(Car, car_id)
    if car is None or car.user_id != current_user.id:
        raise HTTPException(status_code=404, detail="Car not found")
    return car


def to_read(car: Car) -> CarRead:
    return CarRead.model_validate(vehicle_from_row(car))


def _load_vehicles(db: Session, current_user: User) -> List[Vehicle]:
    """All cars of the user (newest first) with expenses hydrated."""
    try:
        rows = db.execute(
            select(Car)
            .where(Car.user_id == current_user.id)
            .order_by(desc(Car.created_at))
        ).scalars().all()
    except SQLAlchemyError:
        logger.exception("loading inventory failed")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Failed to load inventory data. Please try again.",
        ) from None
    return vehicles_from_rows(rows)


def commit_car(db: Session, car: Car, action: str) -> Car:
    try:
        db.commit()
        db.refresh(car)
        return car
    except IntegrityError as e:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Integrity error: {str(getattr(e, 'orig', e))}",
        ) from None
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("%s failed", action)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to {action}: {type(e).__name__}",
        ) from None


# =========================================================
# LIST / SEARCH: GET /cars
# =========================================================
@router.get("", response_model=CarsListResponse)
def list_cars(
    q: str = Query("", max_length=200, description="make / model / year contains"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Inventory list of the current user.
    - q filters on make / model / year (case-insensitive substring)
    - always ordered newest first (created_at DESC)
    """
    vehicles = filter_vehicles(_load_vehicles(db, current_user), q)
    return CarsListResponse(
        items=[CarRead.model_validate(v) for v in vehicles],
        total=len(vehicles),
        query=q.strip(),
    )


# =========================================================
# STATS: GET /cars/stats
# =========================================================
@router.get("/stats", response_model=InventoryStatsRead)
def inventory_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    stats = compute_inventory_stats(_load_vehicles(db, current_user))
    return InventoryStatsRead.model_validate(stats)


# =========================================================
# CSV EXPORT: GET /cars/export
# =========================================================
@router.get("/export")
def export_cars_csv(
    q: str = Query("", max_length=200),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    vehicles = filter_vehicles(_load_vehicles(db, current_user), q)
    if not vehicles:
        raise HTTPException(status_code=404, detail="You don't have any cars in your inventory to export.")

    return Response(
        content=render_inventory_csv(vehicles).encode("utf-8"),
        media_type=CSV_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{CSV_FILENAME}"'},
    )


# =========================================================
# CRUD
# =========================================================
@router.post("", response_model=CarRead, status_code=status.HTTP_201_CREATED)
def create_car(
    data: CarCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    car = Car(
        user_id=current_user.id,
        make=data.make,
        model=data.model,
        year=data.year,
        mileage=data.miles,
        purchase_price=data.purchase_price,
        book_value=data.book_value if data.book_value is not None else data.purchase_price,
        color=data.color,
        notes=data.notes,
        sold=False,
    )
    db.add(car)
    car = commit_car(db, car, "create car")
    logger.info("car %s created by %s", car.id, current_user.id)
    return to_read(car)


@router.get("/{car_id}", response_model=CarRead)
def get_car(
    car_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return to_read(get_car_owned(db, car_id, current_user))


@router.patch("/{car_id}", response_model=CarRead)
def update_car(
    car_id: UUID,
    data: CarUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    car = get_car_owned(db, car_id, current_user)

    # CarUpdate forbids unknown keys, so sale state / owner / created_at can't get here
    updates = data.model_dump(exclude_unset=True)
    for key, value in updates.items():
        setattr(car, _COLUMN_FOR_FIELD.get(key, key), value)

    return to_read(commit_car(db, car, "update car"))


@router.delete("/{car_id}")
def delete_car(
    car_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    storage: LocalBlobStorage = Depends(get_storage),
):
    car = get_car_owned(db, car_id, current_user)

    try:
        db.delete(car)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("delete_car failed")
        raise HTTPException(
            status_code=500,
            detail=f"Failed to delete car: {type(e).__name__}",
        ) from None

    # row is gone; orphaned files are harmless, so this is best effort
    storage.delete_car_files(str(current_user.id), str(car_id))
    return {"ok": True}


# =========================================================
# SELL: POST /cars/{car_id}/sell
# =========================================================
@router.post("/{car_id}/sell", response_model=CarRead)
def sell_car(
    car_id: UUID,
    data: SellIn,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """In inventory -> sold. sale_date is stamped with the current time."""
    car = get_car_owned(db, car_id, current_user)

    try:
        apply_sale(car, data.sale_price)
    except VehicleAlreadySold as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from None
    except InvalidSalePrice as e:
        raise HTTPException(status_code=422, detail=str(e)) from None

    return to_read(commit_car(db, car, "mark car as sold"))
