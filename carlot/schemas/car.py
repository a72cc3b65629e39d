# carlot/schemas/car.py

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from carlot.schemas.expense import ExpenseRead

MIN_YEAR = 1900


def _max_year() -> int:
    # next year's models are on the lot before New Year
    return date.today().year + 1


def _required_text(value: Optional[str], label: str) -> str:
    if value is None or not value.strip():
        raise ValueError(f"{label} is required")
    return value.strip()


def _check_year(value: Optional[int]) -> int:
    if value is None:
        raise ValueError("Year is required")
    if value < MIN_YEAR or value > _max_year():
        raise ValueError("Please enter a valid year")
    return value


def _optional_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class CarCreate(BaseModel):
    make: str
    model: str
    year: int

    # input accepts miles / mileage
    miles: int = Field(validation_alias=AliasChoices("miles", "mileage"))

    purchase_price: Decimal = Field(max_digits=12, decimal_places=2)
    # omitted -> purchase_price
    book_value: Optional[Decimal] = Field(default=None, max_digits=12, decimal_places=2)

    color: Optional[str] = Field(default=None, max_length=50)
    notes: Optional[str] = None
    # image_url / invoice_url are only set by the upload endpoints

    @field_validator("make")
    @classmethod
    def _make(cls, v: str) -> str:
        return _required_text(v, "Make")

    @field_validator("model")
    @classmethod
    def _model(cls, v: str) -> str:
        return _required_text(v, "Model")

    @field_validator("year")
    @classmethod
    def _year(cls, v: int) -> int:
        return _check_year(v)

    @field_validator("miles")
    @classmethod
    def _miles(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Please enter a valid mileage")
        return v

    @field_validator("purchase_price")
    @classmethod
    def _purchase_price(cls, v: Decimal) -> Decimal:
        if not v.is_finite() or v <= 0:
            raise ValueError("Please enter a valid purchase price")
        return v

    @field_validator("book_value")
    @classmethod
    def _book_value(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        if v is not None and (not v.is_finite() or v < 0):
            raise ValueError("Please enter a valid inventory value")
        return v

    @field_validator("color", "notes")
    @classmethod
    def _strip(cls, v: Optional[str]) -> Optional[str]:
        return _optional_text(v)


class CarUpdate(BaseModel):
    """Partial update. Sale fields, attachments and timestamps are not writable here."""

    model_config = ConfigDict(extra="forbid")

    make: Optional[str] = None
    model: Optional[str] = None
    year: Optional[int] = None
    miles: Optional[int] = Field(default=None, validation_alias=AliasChoices("miles", "mileage"))
    purchase_price: Optional[Decimal] = Field(default=None, max_digits=12, decimal_places=2)
    book_value: Optional[Decimal] = Field(default=None, max_digits=12, decimal_places=2)
    color: Optional[str] = Field(default=None, max_length=50)
    notes: Optional[str] = None

    # explicit nulls on required columns are rejected
    @field_validator("make")
    @classmethod
    def _make(cls, v: Optional[str]) -> str:
        return _required_text(v, "Make")

    @field_validator("model")
    @classmethod
    def _model(cls, v: Optional[str]) -> str:
        return _required_text(v, "Model")

    @field_validator("year")
    @classmethod
    def _year(cls, v: Optional[int]) -> int:
        return _check_year(v)

    @field_validator("miles")
    @classmethod
    def _miles(cls, v: Optional[int]) -> int:
        if v is None or v < 0:
            raise ValueError("Please enter a valid mileage")
        return v

    @field_validator("purchase_price")
    @classmethod
    def _purchase_price(cls, v: Optional[Decimal]) -> Decimal:
        if v is None or not v.is_finite() or v <= 0:
            raise ValueError("Please enter a valid purchase price")
        return v

    @field_validator("book_value")
    @classmethod
    def _book_value(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        if v is not None and (not v.is_finite() or v < 0):
            raise ValueError("Please enter a valid inventory value")
        return v

    @field_validator("color", "notes")
    @classmethod
    def _strip(cls, v: Optional[str]) -> Optional[str]:
        return _optional_text(v)


class SellIn(BaseModel):
    sale_price: Decimal = Field(
        max_digits=12,
        decimal_places=2,
        validation_alias=AliasChoices("sale_price", "selling_price"),
    )

    @field_validator("sale_price")
    @classmethod
    def _sale_price(cls, v: Decimal) -> Decimal:
        if not v.is_finite() or v <= 0:
            raise ValueError("Please enter a valid selling price")
        return v


class CarRead(BaseModel):
    """Built from a services.Vehicle (attribute access)."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    make: str
    model: str
    year: int
    miles: int
    purchase_price: Decimal
    book_value: Decimal

    sold: bool
    sale_price: Optional[Decimal] = None
    sale_date: Optional[datetime] = None

    color: Optional[str] = None
    notes: Optional[str] = None
    image_url: Optional[str] = None
    invoice_url: Optional[str] = None

    created_at: datetime

    expenses: List[ExpenseRead] = []

    # derived per car
    total_expenses: Decimal
    total_cost: Decimal
    profit: Optional[Decimal] = None


class CarsListResponse(BaseModel):
    items: List[CarRead]
    total: int
    query: str = ""


class InventoryStatsRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_cars: int = Field(ge=0)
    sold_cars: int = Field(ge=0)
    inventory_cars: int = Field(ge=0)
    total_investment: Decimal
    total_revenue: Decimal
    total_profit: Decimal
    average_profit: Decimal
    total_book_value: Decimal
