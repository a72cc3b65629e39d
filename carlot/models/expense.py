# carlot/models/expense.py
from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from decimal import Decimal

from sqlalchemy import Column, Date, DateTime, ForeignKey, Index, Numeric, String, Uuid
from sqlalchemy.orm import relationship

from carlot.models.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ExpenseORM(Base):
    """Cost line item (repairs, fees, transport ...) attached to one car.

    - user_id is denormalised from the car so every expense query can be
      scoped to the owner without a join.
    - expense_date: when the cost was incurred (ordering axis, newest first)
    """

    __tablename__ = "expenses"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, nullable=False)

    car_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("cars.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    user_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    description = Column(String(255), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    expense_date = Column(Date, nullable=False, default=date.today, index=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    car = relationship("Car", back_populates="expenses")

    __table_args__ = (
        Index("ix_expenses_car_date", "car_id", "expense_date"),
        Index("ix_expenses_user_car", "user_id", "car_id"),
    )
