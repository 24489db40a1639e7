"""Shared test fixtures."""
import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import date, datetime, time, timezone
from types import SimpleNamespace
from zoneinfo import ZoneInfo

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from barberbook.appointments import create_appointment
from barberbook.auth import create_access_token, hash_password
from barberbook.db import get_session, init_db
from barberbook.main import app
from barberbook.models import (
    Barber,
    BarberBreak,
    BarberService,
    Salon,
    TimeOff,
    User,
    WorkingHour,
)
from barberbook.notifications import get_notifier
from barberbook.schemas import AppointmentCreate

TZ = ZoneInfo("Europe/Belgrade")
MONDAY = date(2025, 3, 3)
PASSWORD = "secret-pass"
PASSWORD_HASH = hash_password(PASSWORD)


def local(day: date, hour: int, minute: int = 0) -> datetime:
    return datetime.combine(day, time(hour, minute), tzinfo=TZ)


def hhmm(slots) -> list:
    return [s.start.astimezone(TZ).strftime("%H:%M") for s in slots]


class RecordingNotifier:
    def __init__(self):
        self.sent = []

    def notify(self, contact, kind, details):
        self.sent.append((contact, kind, details))


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


def _save(session, *rows):
    for row in rows:
        session.add(row)
    session.commit()
    for row in rows:
        session.refresh(row)


def make_barber(session, salon, email, name, day_of_week=1, hours=((9, 0), (17, 0))):
    user = User(email=email, password_hash=PASSWORD_HASH, role="barber")
    _save(session, user)
    barber = Barber(salon_id=salon.id, user_id=user.id, display_name=name)
    _save(session, barber)
    service = BarberService(barber_id=barber.id, name="Haircut", price=1500.0, duration_min=30)
    _save(session, service)
    if hours:
        (sh, sm), (eh, em) = hours
        _save(session, WorkingHour(barber_id=barber.id, day_of_week=day_of_week, start_time=time(sh, sm), end_time=time(eh, em)))
    return SimpleNamespace(user=user, barber=barber, service=service, salon=salon)


@pytest.fixture
def shop(session):
    """Salon in Belgrade with one barber working Mondays 09:00-17:00."""
    salon = Salon(name="Fade Factory", timezone="Europe/Belgrade")
    _save(session, salon)
    return make_barber(session, salon, "marko@example.com", "Marko")


@pytest.fixture
def other_shop(session, shop):
    return make_barber(session, shop.salon, "jovan@example.com", "Jovan")


def add_break(session, barber_id, day_of_week, start, end):
    _save(session, BarberBreak(barber_id=barber_id, day_of_week=day_of_week, start_time=start, end_time=end))


def add_hours(session, barber_id, day_of_week, start, end):
    _save(session, WorkingHour(barber_id=barber_id, day_of_week=day_of_week, start_time=start, end_time=end))


def add_time_off(session, barber_id, start_at, end_at, reason=None):
    off = TimeOff(
        barber_id=barber_id,
        start_at=start_at.astimezone(timezone.utc),
        end_at=end_at.astimezone(timezone.utc),
        reason=reason,
    )
    _save(session, off)
    return off


def booking(shop, start_at, **overrides) -> AppointmentCreate:
    data = {
        "salon_id": shop.salon.id,
        "barber_id": shop.barber.id,
        "barber_service_id": shop.service.id,
        "customer_name": "Ana Petrovic",
        "customer_email": "ana@example.com",
        "start_at": start_at,
    }
    data.update(overrides)
    return AppointmentCreate(**data)


def book(session, shop, start_at, **overrides):
    return create_appointment(session, booking(shop, start_at, **overrides))


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def client(engine, notifier):
    def _session():
        with Session(engine) as s:
            yield s

    app.dependency_overrides[get_session] = _session
    app.dependency_overrides[get_notifier] = lambda: notifier
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def barber_headers(shop):
    token = create_access_token(shop.user)
    return {"Authorization": f"Bearer {token}"}
