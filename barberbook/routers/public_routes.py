# barberbook/routers/public_routes.py

from datetime import date

from fastapi import APIRouter, Depends
from sqlmodel import Session

from barberbook.appointments import create_appointment
from barberbook.availability import compute_daily_availability
from barberbook.db import get_session
from barberbook.schemas import AppointmentCreate, AppointmentPublic, AvailabilityResponse

router = APIRouter(
    prefix="/public",
    tags=["public"],
)


@router.get(
    "/barbers/{barber_id}/services/{service_id}/availability",
    response_model=AvailabilityResponse,
)
def barber_availability(
    barber_id: int,
    service_id: int,
    date: date,
    session: Session = Depends(get_session),
):
    result = compute_daily_availability(session, barber_id, service_id, date)
    return {
        "barber_id": result.barber_id,
        "service_id": result.service_id,
        "date": result.date,
        "timezone": result.timezone,
        "duration_min": result.duration_min,
        "slots": [{"start": s.start, "end": s.end} for s in result.slots],
        "is_day_off": result.is_day_off,
        "day_off_reason": result.day_off_reason,
    }


# customers can only book; everything else is barber-only
@router.post("/appointments", response_model=AppointmentPublic, status_code=201)
def public_create_appointment(
    appt: AppointmentCreate,
    session: Session = Depends(get_session),
):
    return create_appointment(session, appt)
