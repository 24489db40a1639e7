"""Daily availability scenarios for a Belgrade salon."""
from datetime import date, datetime, time, timedelta

import pytest

from barberbook.availability import build_slots, compute_daily_availability
from barberbook.config import DAY_OFF_FALLBACK_REASON
from barberbook.core import Interval
from barberbook.errors import BarberNotFound, ServiceNotFound
from barberbook.models import BarberService

from conftest import MONDAY, TZ, add_break, add_hours, add_time_off, book, hhmm, local


def availability(session, shop, day=MONDAY, service_id=None):
    return compute_daily_availability(session, shop.barber.id, service_id or shop.service.id, day)


def test_working_day_with_lunch_break(session, shop):
    add_break(session, shop.barber.id, 1, time(13, 0), time(14, 0))

    result = availability(session, shop)

    assert len(result.slots) == 14
    starts = hhmm(result.slots)
    assert starts[0] == "09:00"
    assert starts[-1] == "16:30"
    assert "12:30" in starts
    assert not any("13:00" <= s < "14:00" for s in starts)
    assert result.is_day_off is False
    assert result.day_off_reason is None
    assert result.timezone == "Europe/Belgrade"
    assert result.duration_min == 30


def test_slots_are_service_length_and_inside_working_hours(session, shop):
    result = availability(session, shop)
    for slot in result.slots:
        assert slot.duration == timedelta(minutes=30)
        assert local(MONDAY, 9) <= slot.start and slot.end <= local(MONDAY, 17)
        assert slot.start.tzinfo is TZ


def test_full_day_off_with_reason(session, shop):
    add_time_off(session, shop.barber.id, local(MONDAY, 0), local(MONDAY, 0) + timedelta(days=1), reason="Vacation")

    result = availability(session, shop)

    assert result.slots == []
    assert result.is_day_off is True
    assert result.day_off_reason == "Vacation"


def test_day_off_without_reason_uses_fallback(session, shop):
    add_time_off(session, shop.barber.id, local(MONDAY, 0), local(MONDAY, 0) + timedelta(days=1), reason="  ")

    result = availability(session, shop)

    assert result.is_day_off is True
    assert result.day_off_reason == DAY_OFF_FALLBACK_REASON


def test_partial_time_off_still_marks_day_off(session, shop):
    add_time_off(session, shop.barber.id, local(MONDAY, 9), local(MONDAY, 12), reason="Doctor")

    result = availability(session, shop)

    assert result.is_day_off is True
    assert result.day_off_reason == "Doctor"
    assert hhmm(result.slots)[0] == "12:00"
    assert len(result.slots) == 10


def test_booked_slot_is_removed(session, shop):
    appt = book(session, shop, local(MONDAY, 10))
    appt.status = "confirmed"
    session.add(appt)
    session.commit()

    starts = hhmm(availability(session, shop).slots)

    assert "10:00" not in starts
    assert "09:30" in starts
    assert "10:30" in starts
    assert len(starts) == 15


def test_canceled_appointment_frees_its_slot(session, shop):
    appt = book(session, shop, local(MONDAY, 10))
    appt.status = "canceled"
    session.add(appt)
    session.commit()

    assert "10:00" in hhmm(availability(session, shop).slots)


def test_off_grid_booking_shifts_following_slots(session, shop):
    book(session, shop, local(MONDAY, 9, 15))

    starts = hhmm(availability(session, shop).slots)

    assert starts[0] == "09:45"
    assert "09:00" not in starts


def test_no_working_rules_is_empty_but_not_day_off(session, shop):
    result = availability(session, shop, day=MONDAY + timedelta(days=1))

    assert result.slots == []
    assert result.is_day_off is False
    assert result.day_off_reason is None


def test_service_longer_than_any_free_interval(session, shop):
    long_service = BarberService(barber_id=shop.barber.id, name="Full makeover", price=9000.0, duration_min=600)
    session.add(long_service)
    session.commit()
    session.refresh(long_service)

    result = availability(session, shop, service_id=long_service.id)

    assert result.slots == []
    assert result.duration_min == 600


def test_several_working_rules_are_combined(session, shop):
    add_hours(session, shop.barber.id, 1, time(18, 0), time(19, 0))

    starts = hhmm(availability(session, shop).slots)

    assert starts[-2:] == ["18:00", "18:30"]
    assert "17:00" not in starts
    assert starts == sorted(starts)


def test_other_barbers_bookings_do_not_interfere(session, shop, other_shop):
    book(session, other_shop, local(MONDAY, 10))

    assert "10:00" in hhmm(availability(session, shop).slots)


def test_unknown_service_and_inactive_barber(session, shop, other_shop):
    with pytest.raises(ServiceNotFound):
        availability(session, shop, service_id=other_shop.service.id)
    with pytest.raises(ServiceNotFound):
        compute_daily_availability(session, 9999, shop.service.id, MONDAY)

    shop.barber.active = False
    session.add(shop.barber)
    session.commit()
    with pytest.raises(BarberNotFound):
        availability(session, shop)


def test_build_slots_sorts_across_intervals():
    free = [
        Interval(local(MONDAY, 14), local(MONDAY, 15)),
        Interval(local(MONDAY, 9), local(MONDAY, 10)),
    ]
    assert hhmm(build_slots(free, 30, TZ)) == ["09:00", "09:30", "14:00", "14:30"]


def test_slots_keep_their_length_on_dst_night():
    # Belgrade clocks jump from 02:00 to 03:00
    night = date(2025, 3, 30)
    free = [Interval(datetime.combine(night, time(1, 0), tzinfo=TZ), datetime.combine(night, time(4, 0), tzinfo=TZ))]

    slots = build_slots(free, 60, TZ)

    assert hhmm(slots) == ["01:00", "03:00"]
    assert all(s.duration == timedelta(hours=1) for s in slots)
