# barberbook/appointments.py

"""Appointment lifecycle.

pending --confirm--> confirmed
pending/confirmed --cancel--> canceled (terminal)
delete removes the row whatever its status.

Barber-facing transitions are single conditional statements keyed on
(appointment id, barber id, current status). A statement that matches no row
is reported as not found, whether the appointment is missing, belongs to
someone else, or is in the wrong state.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, update
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from barberbook.availability import free_intervals
from barberbook.calendar_gateway import CalendarGateway, local_date, resolve_timezone
from barberbook.core import Interval, as_utc, covered_by_any, require_aware
from barberbook.errors import (
    AppointmentNotFound,
    IntegrityConflict,
    NotFoundOrForbidden,
    ValidationError,
    translate_db_errors,
)
from barberbook.models import Appointment, Barber, BarberService, Salon
from barberbook.notifications import NotificationDispatcher, preferred_contact
from barberbook.schemas import AppointmentCreate, AppointmentStatus, NoticeKind

logger = logging.getLogger(__name__)


@dataclass
class AppointmentFilters:
    start_from: Optional[datetime] = None
    start_to: Optional[datetime] = None
    status: Optional[str] = None


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def create_appointment(session: Session, data: AppointmentCreate) -> Appointment:
    """Book a pending appointment for a customer.

    Price and duration come from the barber's active service, never from the
    caller. The barber row is bumped first so concurrent bookings for the same
    barber queue behind each other; the free-time check and the insert then
    run in that same transaction.
    """
    customer_name = (data.customer_name or "").strip()
    if not customer_name:
        raise ValidationError("customer_name is required")
    require_aware(data.start_at, "start_at")

    try:
        appt = _insert_checked(session, data, customer_name)
    except IntegrityError as e:
        session.rollback()
        logger.info(f"Booking rejected by storage for barber {data.barber_id} at {data.start_at}: {e.orig}")
        raise IntegrityConflict("Requested time is no longer available") from e
    except Exception:
        session.rollback()
        raise

    session.refresh(appt)
    logger.info(f"Appointment {appt.id} booked for barber {appt.barber_id} at {appt.start_at} UTC")
    return appt


def _insert_checked(session: Session, data: AppointmentCreate, customer_name: str) -> Appointment:
    gateway = CalendarGateway(session)

    with translate_db_errors("book the appointment"):
        locked = session.exec(
            update(Barber)
            .where(Barber.id == data.barber_id)
            .where(Barber.active == True)  # noqa: E712
            .values(booking_seq=Barber.booking_seq + 1)
        )
        if locked.rowcount == 0:
            raise IntegrityConflict("Barber does not exist or is not taking bookings")

        try:
            service = gateway.active_service(data.barber_id, data.barber_service_id)
            barber, salon = gateway.barber_and_salon(data.barber_id)
        except NotFoundOrForbidden as e:
            raise IntegrityConflict(e.detail) from e
        if barber.salon_id != data.salon_id:
            raise IntegrityConflict("Barber does not work at this salon")

        tz = resolve_timezone(salon.timezone)
        start = as_utc(data.start_at)
        requested = Interval(start, start + timedelta(minutes=service.duration_min))

        cal = gateway.day_calendar(data.barber_id, local_date(start, tz), tz)
        if not covered_by_any(free_intervals(cal), requested):
            logger.info(f"Booking conflict for barber {data.barber_id}: {requested.start} - {requested.end} is not free")
            raise IntegrityConflict("Requested time is not available")

        appt = Appointment(
            salon_id=data.salon_id,
            barber_id=data.barber_id,
            barber_service_id=service.id,
            customer_name=customer_name,
            customer_phone=_clean(data.customer_phone),
            customer_email=_clean(data.customer_email),
            price=service.price,
            duration_min=service.duration_min,
            start_at=as_utc(requested.start),
            end_at=as_utc(requested.end),
            status=AppointmentStatus.pending.value,
            notes=_clean(data.notes),
        )
        session.add(appt)
        session.commit()
    return appt


def _owned(session: Session, barber_id: int, appointment_id: int) -> Optional[Appointment]:
    return session.exec(
        select(Appointment)
        .where(Appointment.id == appointment_id)
        .where(Appointment.barber_id == barber_id)
        .execution_options(populate_existing=True)
    ).first()


def confirm_appointment(
    session: Session,
    barber_id: int,
    appointment_id: int,
    dispatcher: Optional[NotificationDispatcher] = None,
) -> Appointment:
    with translate_db_errors("confirm the appointment"):
        result = session.exec(
            update(Appointment)
            .where(Appointment.id == appointment_id)
            .where(Appointment.barber_id == barber_id)
            .where(Appointment.status == AppointmentStatus.pending.value)
            .values(status=AppointmentStatus.confirmed.value)
        )
        session.commit()
        appt = _owned(session, barber_id, appointment_id)

    if result.rowcount == 0:
        # confirming twice is a no-op
        if appt is not None and appt.status == AppointmentStatus.confirmed.value:
            return appt
        raise AppointmentNotFound("Appointment not found, not yours, or not pending")

    logger.info(f"Appointment {appointment_id} confirmed by barber {barber_id}")
    _send_notice(session, appt, NoticeKind.confirmation, dispatcher)
    return appt


def cancel_appointment(
    session: Session,
    barber_id: int,
    appointment_id: int,
    dispatcher: Optional[NotificationDispatcher] = None,
) -> Appointment:
    with translate_db_errors("cancel the appointment"):
        result = session.exec(
            update(Appointment)
            .where(Appointment.id == appointment_id)
            .where(Appointment.barber_id == barber_id)
            .where(Appointment.status != AppointmentStatus.canceled.value)
            .values(status=AppointmentStatus.canceled.value)
        )
        session.commit()
        if result.rowcount == 0:
            raise AppointmentNotFound("Appointment not found or already canceled")
        appt = _owned(session, barber_id, appointment_id)

    logger.info(f"Appointment {appointment_id} canceled by barber {barber_id}")
    _send_notice(session, appt, NoticeKind.cancellation, dispatcher)
    return appt


def delete_appointment(session: Session, barber_id: int, appointment_id: int) -> None:
    with translate_db_errors("delete the appointment"):
        result = session.exec(
            delete(Appointment)
            .where(Appointment.id == appointment_id)
            .where(Appointment.barber_id == barber_id)
        )
        session.commit()
    if result.rowcount == 0:
        raise AppointmentNotFound("Appointment not found")
    logger.info(f"Appointment {appointment_id} deleted by barber {barber_id}")


def list_appointments(session: Session, barber_id: int, filters: Optional[AppointmentFilters] = None) -> List[Appointment]:
    filters = filters or AppointmentFilters()

    stmt = select(Appointment).where(Appointment.barber_id == barber_id)
    if filters.start_from is not None:
        stmt = stmt.where(Appointment.start_at >= as_utc(filters.start_from))
    if filters.start_to is not None:
        stmt = stmt.where(Appointment.start_at <= as_utc(filters.start_to))
    if filters.status is not None:
        try:
            status = AppointmentStatus(filters.status)
        except ValueError:
            raise ValidationError("status must be 'pending', 'confirmed', or 'canceled'")
        stmt = stmt.where(Appointment.status == status.value)
    stmt = stmt.order_by(Appointment.start_at)

    with translate_db_errors("list appointments"):
        return list(session.exec(stmt).all())


def appointment_details(session: Session, appt: Appointment) -> Dict[str, Any]:
    row = session.exec(
        select(Salon, Barber, BarberService)
        .join(Barber, Barber.salon_id == Salon.id)
        .join(BarberService, BarberService.barber_id == Barber.id)
        .where(Barber.id == appt.barber_id)
        .where(BarberService.id == appt.barber_service_id)
    ).first()
    salon, barber, service = row if row is not None else (None, None, None)

    tz = resolve_timezone(salon.timezone if salon else None)
    return {
        "appointment_id": appt.id,
        "customer_name": appt.customer_name,
        "salon_name": salon.name if salon else None,
        "barber_name": barber.display_name if barber else None,
        "service_name": service.name if service else None,
        "start_local": as_utc(appt.start_at).astimezone(tz).strftime("%d.%m.%Y %H:%M"),
        "duration_min": appt.duration_min,
        "price": appt.price,
    }


def _send_notice(
    session: Session,
    appt: Appointment,
    kind: NoticeKind,
    dispatcher: Optional[NotificationDispatcher],
) -> None:
    contact = preferred_contact(appt.customer_email, appt.customer_phone)
    if contact is None:
        logger.info(f"No customer contact on appointment {appt.id}, skipping {kind.value} notice")
        return
    dispatcher = dispatcher or NotificationDispatcher()
    try:
        details = appointment_details(session, appt)
    except Exception as e:
        logger.error(f"Could not load details for the {kind.value} notice of appointment {appt.id}: {e}")
        return
    dispatcher.send(contact, kind, details)
