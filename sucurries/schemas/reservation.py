"""Reservation schemas"""

import re
from datetime import date as Date, datetime
from typing import Optional, List
from uuid import UUID
from pydantic import BaseModel, EmailStr, Field, field_validator


TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


class ReservationCreate(BaseModel):
    """Create reservation request"""
    customer_name: str = Field(min_length=1, max_length=255)
    customer_email: EmailStr
    customer_phone: Optional[str] = Field(default=None, max_length=20)
    date: Date
    time: str
    party_size: int = Field(ge=1)
    special_requests: Optional[str] = None

    @field_validator("customer_name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("customer_name must not be blank")
        return value.strip()

    @field_validator("time")
    @classmethod
    def time_format(cls, value: str) -> str:
        if not TIME_PATTERN.match(value):
            raise ValueError("time must be in HH:MM 24-hour format")
        return value


class ReservationStatusUpdate(BaseModel):
    """Update reservation status (staff)"""
    status: str
    notes: Optional[str] = None


class ReservationResponse(BaseModel):
    """Reservation response"""
    id: UUID
    booking_number: str
    user_id: Optional[UUID] = None
    customer_name: str
    customer_email: str
    customer_phone: Optional[str] = None
    date: Date = Field(validation_alias="reservation_date")
    time: str = Field(validation_alias="reservation_time")
    party_size: int
    special_requests: Optional[str] = None
    status: str
    cancelled_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
        populate_by_name = True


class ReservationListResponse(BaseModel):
    """Paginated reservation list"""
    items: List[ReservationResponse]
    total: int
    page: int
    page_size: int


class AvailabilityResponse(BaseModel):
    """Available time slots for a date"""
    date: Date
    slots: List[str] = []
