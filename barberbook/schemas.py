# barberbook/schemas.py

from pydantic import BaseModel, Field, field_validator
from enum import Enum
from datetime import datetime, date, time
from typing import List, Optional

from barberbook.core import as_utc


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class UserRole(str, Enum):
    owner = "owner"
    barber = "barber"


class AppointmentStatus(str, Enum):
    pending = "pending"
    confirmed = "confirmed"
    canceled = "canceled"


class NoticeKind(str, Enum):
    confirmation = "confirmation"
    cancellation = "cancellation"


class AppointmentCreate(BaseModel):
    salon_id: int
    barber_id: int
    barber_service_id: int
    customer_name: str
    customer_phone: Optional[str] = None
    customer_email: Optional[str] = None
    start_at: datetime
    notes: Optional[str] = None


class AppointmentPublic(BaseModel):
    id: int
    salon_id: int
    barber_id: int
    barber_service_id: int
    customer_name: str
    customer_phone: Optional[str] = None
    customer_email: Optional[str] = None
    price: float
    duration_min: int
    start_at: datetime
    end_at: datetime
    status: AppointmentStatus
    notes: Optional[str] = None
    created_at: datetime

    @field_validator("start_at", "end_at", "created_at")
    @classmethod
    def _stored_as_utc(cls, v: datetime) -> datetime:
        return as_utc(v)


class SlotPublic(BaseModel):
    start: datetime
    end: datetime


class AvailabilityResponse(BaseModel):
    barber_id: int
    service_id: int
    date: date
    timezone: str
    duration_min: int
    slots: List[SlotPublic]
    is_day_off: bool
    day_off_reason: Optional[str] = None


class WeeklyRuleCreate(BaseModel):
    day_of_week: int = Field(ge=0, le=6)  # 0=Sun, 1=Mon ... 6=Sat
    start_time: time
    end_time: time


class WeeklyRulePublic(BaseModel):
    id: int
    barber_id: int
    day_of_week: int
    start_time: time
    end_time: time


class TimeOffCreate(BaseModel):
    start_at: datetime
    end_at: datetime
    reason: Optional[str] = None


class TimeOffPublic(BaseModel):
    id: int
    barber_id: int
    start_at: datetime
    end_at: datetime
    reason: Optional[str] = None

    @field_validator("start_at", "end_at")
    @classmethod
    def _stored_as_utc(cls, v: datetime) -> datetime:
        return as_utc(v)
