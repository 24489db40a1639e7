# barberbook/routers/appointments_routes.py

from datetime import datetime
from typing import Optional, List

from fastapi import APIRouter, Depends
from sqlmodel import Session

from barberbook.appointments import (
    AppointmentFilters,
    cancel_appointment,
    confirm_appointment,
    delete_appointment,
    list_appointments,
)
from barberbook.auth import get_current_barber
from barberbook.db import get_session
from barberbook.deps import get_dispatcher
from barberbook.models import Barber
from barberbook.notifications import NotificationDispatcher
from barberbook.schemas import AppointmentPublic

router = APIRouter(
    prefix="/barber/appointments",
    tags=["appointments"],
)


@router.get("", response_model=List[AppointmentPublic])
def list_barber_appointments(
    start_from: Optional[datetime] = None,
    start_to: Optional[datetime] = None,
    status: Optional[str] = None,
    session: Session = Depends(get_session),
    barber: Barber = Depends(get_current_barber),
):
    filters = AppointmentFilters(start_from=start_from, start_to=start_to, status=status)
    return list_appointments(session, barber.id, filters)


@router.post("/{appointment_id}/confirm", response_model=AppointmentPublic)
def confirm_barber_appointment(
    appointment_id: int,
    session: Session = Depends(get_session),
    barber: Barber = Depends(get_current_barber),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    return confirm_appointment(session, barber.id, appointment_id, dispatcher)


@router.post("/{appointment_id}/cancel", response_model=AppointmentPublic)
def cancel_barber_appointment(
    appointment_id: int,
    session: Session = Depends(get_session),
    barber: Barber = Depends(get_current_barber),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    return cancel_appointment(session, barber.id, appointment_id, dispatcher)


@router.delete("/{appointment_id}")
def delete_barber_appointment(
    appointment_id: int,
    session: Session = Depends(get_session),
    barber: Barber = Depends(get_current_barber),
):
    delete_appointment(session, barber.id, appointment_id)
    return {"message": "appointment deleted"}
