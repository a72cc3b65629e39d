from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from carlot.db.session import get_db
from carlot.dependencies.auth import get_current_user
from carlot.models.expense import ExpenseORM
from carlot.models.user import User
from carlot.routes.cars import get_car_owned
from carlot.schemas.expense import ExpenseCreateIn, ExpenseListOut, ExpenseRead, ExpenseUpdateIn
from carlot.services.mapping import expense_from_row, vehicle_from_row

logger = logging.getLogger(__name__)

router = APIRouter(tags=["expenses"])


# ============================================================
# utils
# ============================================================

def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _get_expense_owned(db: Session, expense_id: UUID, user: User) -> ExpenseORM:
    exp = db.get(ExpenseORM, expense_id)
    if exp is None or exp.user_id != user.id:
        raise HTTPException(status_code=404, detail="Expense not found")
    return exp


def _commit(db: Session, exp: ExpenseORM, action: str) -> ExpenseORM:
    try:
        db.commit()
        db.refresh(exp)
        return exp
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("%s failed", action)
        raise HTTPException(
            status_code=500,
            detail=f"Failed to {action}. Please try again.",
        ) from e


# ============================================================
# endpoints
# ============================================================

@router.get("/cars/{car_id}/expenses", response_model=ExpenseListOut)
def list_expenses(
    car_id: UUID,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ExpenseListOut:
    """Expenses of one car, newest first (expense date, then entry time)."""
    vehicle = vehicle_from_row(get_car_owned(db, car_id, user))
    return ExpenseListOut(
        items=[ExpenseRead.model_validate(e) for e in vehicle.expenses],
        total=len(vehicle.expenses),
        total_amount=vehicle.total_expenses,
    )


@router.post("/cars/{car_id}/expenses", response_model=ExpenseRead, status_code=201)
def create_expense(
    car_id: UUID,
    body: ExpenseCreateIn,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ExpenseRead:
    car = get_car_owned(db, car_id, user)
    now = _utcnow()

    exp = ExpenseORM(
        car_id=car.id,
        user_id=user.id,
        description=body.description,
        amount=body.amount,
        expense_date=body.date or date.today(),
        created_at=now,
        updated_at=now,
    )
    db.add(exp)
    exp = _commit(db, exp, "add expense")
    return ExpenseRead.model_validate(expense_from_row(exp))


@router.patch("/expenses/{expense_id}", response_model=ExpenseRead)
def update_expense(
    expense_id: UUID,
    body: ExpenseUpdateIn,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ExpenseRead:
    exp = _get_expense_owned(db, expense_id, user)

    updates = body.model_dump(exclude_unset=True)
    if "description" in updates:
        exp.description = updates["description"]
    if "amount" in updates:
        exp.amount = updates["amount"]
    if "date" in updates:
        exp.expense_date = updates["date"]
    exp.updated_at = _utcnow()

    exp = _commit(db, exp, "update expense")
    return ExpenseRead.model_validate(expense_from_row(exp))


@router.delete("/expenses/{expense_id}", status_code=204)
def delete_expense(
    expense_id: UUID,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Response:
    exp = _get_expense_owned(db, expense_id, user)

    try:
        db.delete(exp)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("delete_expense failed")
        raise HTTPException(status_code=500, detail="Failed to delete expense. Please try again.") from e

    return Response(status_code=204)
