import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import relationship

from carlot.models.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Car(Base):
    __tablename__ = "cars"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    # owner; every query filters on this
    user_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # basic info
    make = Column(String(100), nullable=False)
    model = Column(String(100), nullable=False)
    year = Column(Integer, nullable=False)
    mileage = Column(Integer, nullable=False, default=0)
    color = Column(String(50), nullable=True)
    notes = Column(Text, nullable=True)

    # money (2 decimal places)
    purchase_price = Column(Numeric(12, 2), nullable=False)
    book_value = Column(Numeric(12, 2), nullable=True)  # NULL -> purchase_price

    # attachments (public URLs from blob storage)
    image_url = Column(String(1024), nullable=True)
    invoice_url = Column(String(1024), nullable=True)

    # sale state: sold iff sale_price and sale_date are both set
    sold = Column(Boolean, nullable=False, default=False)
    sale_price = Column(Numeric(12, 2), nullable=True)
    sale_date = Column(DateTime(timezone=True), nullable=True)

    # timestamps (created_at is never updated)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    expenses = relationship(
        "ExpenseORM",
        back_populates="car",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    __table_args__ = (
        CheckConstraint(
            "(sold AND sale_price IS NOT NULL AND sale_date IS NOT NULL)"
            " OR (NOT sold AND sale_price IS NULL AND sale_date IS NULL)",
            name="ck_cars_sale_state",
        ),
        Index("ix_cars_user_created", "user_id", "created_at"),
    )
