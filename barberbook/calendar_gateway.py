# barberbook/calendar_gateway.py

"""Reads everything the availability engine needs for one barber and one day.

All rule times are interpreted in the salon's timezone; a salon-local day
runs from local midnight to the next local midnight. Weekdays are numbered
0=Sunday .. 6=Saturday, the same numbering the working-hour and break rows
use.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import List, Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from sqlmodel import Session, select

from barberbook.core import Interval, as_utc
from barberbook.errors import BarberNotFound, ServiceNotFound, translate_db_errors
from barberbook.models import (
    Appointment,
    Barber,
    BarberBreak,
    BarberService,
    Salon,
    TimeOff,
    WorkingHour,
)
from barberbook.schemas import AppointmentStatus

logger = logging.getLogger(__name__)


@dataclass
class DayCalendar:
    tz: tzinfo
    day: date
    day_start: datetime
    day_end: datetime
    weekday: int
    working: List[Interval] = field(default_factory=list)
    breaks: List[Interval] = field(default_factory=list)
    time_off: List[Interval] = field(default_factory=list)
    time_off_reasons: List[Optional[str]] = field(default_factory=list)
    busy: List[Interval] = field(default_factory=list)


def resolve_timezone(name: Optional[str]) -> tzinfo:
    """ZoneInfo for ``name``, or UTC when the name is unknown."""
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, TypeError):
        logger.warning(f"Unknown salon timezone {name!r}, falling back to UTC")
        return timezone.utc


def weekday_number(day: date) -> int:
    # 0=Sun, 1=Mon ... 6=Sat
    return day.isoweekday() % 7


def day_bounds(day: date, tz: tzinfo) -> Tuple[datetime, datetime]:
    day_start = datetime.combine(day, time.min, tzinfo=tz)
    day_end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=tz)
    return day_start, day_end


def local_date(moment: datetime, tz: tzinfo) -> date:
    return as_utc(moment).astimezone(tz).date()


class CalendarGateway:
    def __init__(self, session: Session):
        self.session = session

    def active_service(self, barber_id: int, service_id: int) -> BarberService:
        with translate_db_errors("load the service"):
            service = self.session.exec(
                select(BarberService)
                .where(BarberService.id == service_id)
                .where(BarberService.barber_id == barber_id)
                .where(BarberService.active == True)  # noqa: E712
            ).first()
        if service is None:
            raise ServiceNotFound("Service not found")
        return service

    def barber_and_salon(self, barber_id: int) -> Tuple[Barber, Salon]:
        with translate_db_errors("load the barber"):
            row = self.session.exec(
                select(Barber, Salon)
                .join(Salon, Salon.id == Barber.salon_id)
                .where(Barber.id == barber_id)
                .where(Barber.active == True)  # noqa: E712
            ).first()
        if row is None:
            raise BarberNotFound("Barber not found")
        return row[0], row[1]

    def salon_timezone(self, barber_id: int) -> tzinfo:
        _, salon = self.barber_and_salon(barber_id)
        return resolve_timezone(salon.timezone)

    def day_calendar(self, barber_id: int, day: date, tz: tzinfo) -> DayCalendar:
        day_start, day_end = day_bounds(day, tz)
        weekday = weekday_number(day)
        cal = DayCalendar(tz=tz, day=day, day_start=day_start, day_end=day_end, weekday=weekday)

        with translate_db_errors("load the barber's calendar"):
            hours = self.session.exec(
                select(WorkingHour)
                .where(WorkingHour.barber_id == barber_id)
                .where(WorkingHour.day_of_week == weekday)
                .order_by(WorkingHour.start_time)
            ).all()
            breaks = self.session.exec(
                select(BarberBreak)
                .where(BarberBreak.barber_id == barber_id)
                .where(BarberBreak.day_of_week == weekday)
            ).all()
            offs = self.session.exec(
                select(TimeOff)
                .where(TimeOff.barber_id == barber_id)
                .where(TimeOff.start_at < as_utc(day_end))
                .where(TimeOff.end_at > as_utc(day_start))
                .order_by(TimeOff.start_at)
            ).all()
            appts = self.session.exec(
                select(Appointment)
                .where(Appointment.barber_id == barber_id)
                .where(Appointment.status != AppointmentStatus.canceled.value)
                .where(Appointment.start_at >= as_utc(day_start))
                .where(Appointment.start_at < as_utc(day_end))
            ).all()

        cal.working = self._rule_intervals(hours, day, tz)
        cal.breaks = self._rule_intervals(breaks, day, tz)
        for off in offs:
            cal.time_off.append(Interval(as_utc(off.start_at), as_utc(off.end_at)))
            cal.time_off_reasons.append(off.reason)
        for a in appts:
            cal.busy.append(Interval(as_utc(a.start_at), as_utc(a.end_at)))
        return cal

    def _rule_intervals(self, rules, day: date, tz: tzinfo) -> List[Interval]:
        intervals = []
        for rule in rules:
            start = datetime.combine(day, rule.start_time, tzinfo=tz)
            end = datetime.combine(day, rule.end_time, tzinfo=tz)
            if start >= end:
                logger.warning(f"Skipping {type(rule).__name__} {rule.id}: start_time is not before end_time")
                continue
            # same-zone datetimes subtract and compare on wall-clock time
            intervals.append(Interval(as_utc(start), as_utc(end)))
        return intervals

    def load(self, barber_id: int, service_id: int, day: date) -> Tuple[BarberService, DayCalendar]:
        service = self.active_service(barber_id, service_id)
        tz = self.salon_timezone(barber_id)
        return service, self.day_calendar(barber_id, day, tz)
