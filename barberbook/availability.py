# barberbook/availability.py

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta, tzinfo
from typing import List, Optional

from sqlmodel import Session

from barberbook.calendar_gateway import CalendarGateway, DayCalendar
from barberbook.config import DAY_OFF_FALLBACK_REASON
from barberbook.core import Interval, as_utc, sort_intervals, subtract, tile

logger = logging.getLogger(__name__)


@dataclass
class AvailabilityResult:
    barber_id: int
    service_id: int
    date: date
    timezone: str
    duration_min: int
    slots: List[Interval] = field(default_factory=list)
    is_day_off: bool = False
    day_off_reason: Optional[str] = None


def free_intervals(cal: DayCalendar) -> List[Interval]:
    """Working time minus breaks, time off and live appointments."""
    free = cal.working
    free = subtract(free, cal.breaks)
    free = subtract(free, cal.time_off)
    free = subtract(free, cal.busy)
    return free


def _in_zone(interval: Interval, tz: tzinfo) -> Interval:
    return Interval(interval.start.astimezone(tz), interval.end.astimezone(tz))


def build_slots(free: List[Interval], duration_min: int, tz: tzinfo) -> List[Interval]:
    step = timedelta(minutes=duration_min)
    slots = []
    for interval in free:
        # tile on absolute time so DST shifts cannot stretch a slot
        utc_interval = Interval(as_utc(interval.start), as_utc(interval.end))
        slots.extend(_in_zone(s, tz) for s in tile(utc_interval, step))
    return sort_intervals(slots)


def day_off_reason(cal: DayCalendar) -> Optional[str]:
    if not cal.time_off:
        return None
    for reason in cal.time_off_reasons:
        if reason and reason.strip():
            return reason
    return DAY_OFF_FALLBACK_REASON


def compute_daily_availability(session: Session, barber_id: int, service_id: int, day: date) -> AvailabilityResult:
    gateway = CalendarGateway(session)
    service, cal = gateway.load(barber_id, service_id, day)

    slots = build_slots(free_intervals(cal), service.duration_min, cal.tz)
    is_day_off = len(cal.time_off) > 0

    logger.debug(
        f"Availability barber={barber_id} service={service_id} date={day}: "
        f"{len(slots)} slots, day_off={is_day_off}"
    )
    return AvailabilityResult(
        barber_id=barber_id,
        service_id=service_id,
        date=day,
        timezone=str(cal.tz),
        duration_min=service.duration_min,
        slots=slots,
        is_day_off=is_day_off,
        day_off_reason=day_off_reason(cal),
    )
