# restaurant/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from typing import List
from decimal import Decimal
from datetime import datetime

from restaurant.domain.enums import OrderStatus, TableStatus, UserRole


class OrderItemIn(BaseModel):
    """Pozycja zamowienia podana po nazwie dania."""

    food_name: str = Field(..., min_length=1, description="Nazwa dania z katalogu")
    quantity: int = Field(..., gt=0, description="Ilosc (musi byc > 0)")
    note: str | None = Field(None, max_length=255)


class PlaceOrderIn(BaseModel):
    """Schema dla skladania zamowienia. Stolik albo adres."""

    customer_id: int = Field(..., gt=0)
    table_number: str | None = None
    address_id: int | None = Field(None, gt=0)
    items: List[OrderItemIn] = Field(..., min_length=1)
    notes: str | None = None


class StatusIn(BaseModel):
    status: str = Field(..., min_length=1)


class TableNumberIn(BaseModel):
    table_number: str = Field(..., min_length=1)


class OrderItemOut(BaseModel):
    id: int
    food_name: str | None
    quantity: int
    unit_price: Decimal
    total_price: Decimal
    note: str | None = None

    model_config = ConfigDict(from_attributes=True)


class OrderOut(BaseModel):
    """Schema dla zamowienia (response)."""

    id: int
    customer_id: int | None
    status: OrderStatus
    total: Decimal
    notes: str | None = None
    placed_at: datetime
    table_number: str | None = None
    address_id: int | None = None
    items: List[OrderItemOut]

    model_config = ConfigDict(from_attributes=True)


class PlaceOrderOut(BaseModel):
    """Sukces z lista pozycji ktorych nie udalo sie dopasowac do katalogu."""

    order: OrderOut
    warnings: List[str]


class TableOut(BaseModel):
    table_number: str
    capacity: int
    status: TableStatus

    model_config = ConfigDict(from_attributes=True)


class UserCreate(BaseModel):
    """Schema dla tworzenia uzytkownika."""

    email: str = Field(..., min_length=3, max_length=255)
    name: str = Field(..., min_length=1, max_length=100)
    role: UserRole = UserRole.CUSTOMER


class UserRead(BaseModel):
    id: int
    email: str
    name: str
    role: UserRole

    model_config = ConfigDict(from_attributes=True)
