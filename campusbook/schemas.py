"""Pydantic schemas for the HTTP and event surfaces.

Field names are snake_case in Python and camelCase on the wire.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from .models import RoleEnum


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class UserBase(CamelModel):
    username: str = Field(..., min_length=3, max_length=50)
    role: RoleEnum = RoleEnum.FACULTY
    name: Optional[str] = Field(None, max_length=100)
    email: Optional[EmailStr] = None
    department: Optional[str] = Field(None, max_length=100)


class UserCreate(UserBase):
    password: str = Field(..., min_length=6)


class UserRead(UserBase):
    id: str
    created_at: datetime


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserRead


class HallCreate(CamelModel):
    model_config = ConfigDict(coerce_numbers_to_str=True, str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=100)
    capacity: str = Field(..., min_length=1, max_length=50)
    location: Optional[str] = Field(None, max_length=255)
    amenities: Optional[str] = None


class HallRead(CamelModel):
    id: str
    name: str
    capacity: str
    location: Optional[str] = None
    amenities: Optional[str] = None
    created_at: datetime


class BookingCreate(CamelModel):
    # presence and range are checked by the arbiter so every rule yields one message style
    hall_id: Optional[str] = None
    booking_reason: Optional[str] = None
    booking_date: Optional[str] = None
    period: Optional[int] = None

    @field_validator("period", mode="before")
    @classmethod
    def reject_boolean_period(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("period must be an integer between 1 and 8")
        return value


class BookingStatusUpdate(CamelModel):
    status: Optional[str] = None
    rejection_reason: Optional[str] = None


class BookingRead(CamelModel):
    id: str
    hall_id: str
    user_id: str
    faculty_name: Optional[str] = None
    booking_reason: str
    booking_date: str
    period: int
    status: str
    rejection_reason: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class PeriodRead(CamelModel):
    period: int
    time_range: str


class SlotAvailability(CamelModel):
    period: int
    time_range: str
    available: bool
    status: Optional[str] = None
    mine: bool = False
    booking_id: Optional[str] = None


class HallAvailability(CamelModel):
    hall_id: str
    booking_date: str
    slots: list[SlotAvailability]


class ChangeEvent(BaseModel):
    event: str
    data: Dict[str, Any]
