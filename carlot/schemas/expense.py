# carlot/schemas/expense.py

import datetime as dt
from decimal import Decimal
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


def _description(v: Optional[str]) -> str:
    if v is None or not v.strip():
        raise ValueError("Description is required")
    return v.strip()


def _amount(v: Optional[Decimal]) -> Decimal:
    if v is None or not v.is_finite() or v <= 0:
        raise ValueError("Please enter a valid amount")
    return v


class ExpenseCreateIn(BaseModel):
    description: str = Field(..., max_length=255)
    amount: Decimal = Field(..., max_digits=12, decimal_places=2)

    # omitted -> today
    date: Optional[dt.date] = Field(
        default=None,
        validation_alias=AliasChoices("date", "expense_date"),
        description="YYYY-MM-DD",
    )

    @field_validator("description")
    @classmethod
    def _check_description(cls, v: str) -> str:
        return _description(v)

    @field_validator("amount")
    @classmethod
    def _check_amount(cls, v: Decimal) -> Decimal:
        return _amount(v)


class ExpenseUpdateIn(BaseModel):
    model_config = ConfigDict(extra="forbid")

    description: Optional[str] = Field(default=None, max_length=255)
    amount: Optional[Decimal] = Field(default=None, max_digits=12, decimal_places=2)
    date: Optional[dt.date] = Field(
        default=None,
        validation_alias=AliasChoices("date", "expense_date"),
    )

    @field_validator("description")
    @classmethod
    def _check_description(cls, v: Optional[str]) -> str:
        return _description(v)

    @field_validator("amount")
    @classmethod
    def _check_amount(cls, v: Optional[Decimal]) -> Decimal:
        return _amount(v)

    @field_validator("date")
    @classmethod
    def _check_date(cls, v: Optional[dt.date]) -> dt.date:
        if v is None:
            raise ValueError("Date is required")
        return v


class ExpenseRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    description: str
    amount: Decimal
    date: dt.date
    created_at: Optional[dt.datetime] = None


class ExpenseListOut(BaseModel):
    items: List[ExpenseRead]
    total: int
    total_amount: Decimal
