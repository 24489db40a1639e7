# barberbook/models.py

from typing import Optional
from datetime import datetime, time, timezone

from sqlalchemy import DateTime, Index, text
from sqlmodel import SQLModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Salon(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    timezone: str = "UTC"  # IANA name, e.g. "Europe/Belgrade"


class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(index=True, unique=True)
    password_hash: str
    role: str  # owner or barber


class Barber(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    salon_id: int = Field(foreign_key="salon.id", index=True)
    user_id: Optional[int] = Field(default=None, foreign_key="user.id", unique=True)
    display_name: str
    active: bool = True
    # bumped by every booking; the row update serializes concurrent bookings
    booking_seq: int = 0


class BarberService(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    barber_id: int = Field(foreign_key="barber.id", index=True)
    name: str
    price: float
    duration_min: int
    active: bool = True


class WorkingHour(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    barber_id: int = Field(foreign_key="barber.id", index=True)
    day_of_week: int  # 0=Sun ... 6=Sat
    start_time: time
    end_time: time


class BarberBreak(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    barber_id: int = Field(foreign_key="barber.id", index=True)
    day_of_week: int
    start_time: time
    end_time: time


class TimeOff(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    barber_id: int = Field(foreign_key="barber.id", index=True)
    start_at: datetime = Field(sa_type=DateTime(timezone=True))  # UTC
    end_at: datetime = Field(sa_type=DateTime(timezone=True))
    reason: Optional[str] = None


class Appointment(SQLModel, table=True):
    __table_args__ = (
        # one live booking per barber and start instant; canceled rows free the slot
        Index(
            "uq_barber_start_active",
            "barber_id",
            "start_at",
            unique=True,
            sqlite_where=text("status != 'canceled'"),
            postgresql_where=text("status != 'canceled'"),
        ),
    )

    id: Optional[int] = Field(default=None, primary_key=True)

    salon_id: int = Field(foreign_key="salon.id")
    barber_id: int = Field(foreign_key="barber.id", index=True)
    barber_service_id: int = Field(foreign_key="barberservice.id")
    customer_name: str
    customer_phone: Optional[str] = None
    customer_email: Optional[str] = None
    # copied from the service when booked
    price: float
    duration_min: int
    start_at: datetime = Field(sa_type=DateTime(timezone=True))  # UTC
    end_at: datetime = Field(sa_type=DateTime(timezone=True))
    status: str = "pending"
    notes: Optional[str] = None
    created_at: datetime = Field(default_factory=_utcnow, sa_type=DateTime(timezone=True))
