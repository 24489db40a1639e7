# barberbook/routers/barbers_routes.py

from typing import List

from fastapi import APIRouter, Depends
from sqlmodel import Session

from barberbook import schedule
from barberbook.auth import get_current_barber
from barberbook.db import get_session
from barberbook.models import Barber, BarberBreak, WorkingHour
from barberbook.schemas import TimeOffCreate, TimeOffPublic, WeeklyRuleCreate, WeeklyRulePublic

router = APIRouter(
    prefix="/barber",
    tags=["barbers"],
)


@router.get("/working-hours", response_model=List[WeeklyRulePublic])
def list_working_hours(
    session: Session = Depends(get_session),
    barber: Barber = Depends(get_current_barber),
):
    return schedule.list_weekly_rules(session, WorkingHour, barber.id)


@router.post("/working-hours", response_model=WeeklyRulePublic, status_code=201)
def create_working_hour(
    rule: WeeklyRuleCreate,
    session: Session = Depends(get_session),
    barber: Barber = Depends(get_current_barber),
):
    return schedule.create_weekly_rule(session, WorkingHour, barber.id, rule)


@router.put("/working-hours/{hour_id}", response_model=WeeklyRulePublic)
def update_working_hour(
    hour_id: int,
    rule: WeeklyRuleCreate,
    session: Session = Depends(get_session),
    barber: Barber = Depends(get_current_barber),
):
    return schedule.update_weekly_rule(session, WorkingHour, barber.id, hour_id, rule)


@router.delete("/working-hours/{hour_id}")
def delete_working_hour(
    hour_id: int,
    session: Session = Depends(get_session),
    barber: Barber = Depends(get_current_barber),
):
    schedule.delete_weekly_rule(session, WorkingHour, barber.id, hour_id)
    return {"message": "working hour deleted"}


@router.get("/breaks", response_model=List[WeeklyRulePublic])
def list_breaks(
    session: Session = Depends(get_session),
    barber: Barber = Depends(get_current_barber),
):
    return schedule.list_weekly_rules(session, BarberBreak, barber.id)


@router.post("/breaks", response_model=WeeklyRulePublic, status_code=201)
def create_break(
    rule: WeeklyRuleCreate,
    session: Session = Depends(get_session),
    barber: Barber = Depends(get_current_barber),
):
    return schedule.create_weekly_rule(session, BarberBreak, barber.id, rule)


@router.put("/breaks/{break_id}", response_model=WeeklyRulePublic)
def update_break(
    break_id: int,
    rule: WeeklyRuleCreate,
    session: Session = Depends(get_session),
    barber: Barber = Depends(get_current_barber),
):
    return schedule.update_weekly_rule(session, BarberBreak, barber.id, break_id, rule)


@router.delete("/breaks/{break_id}")
def delete_break(
    break_id: int,
    session: Session = Depends(get_session),
    barber: Barber = Depends(get_current_barber),
):
    schedule.delete_weekly_rule(session, BarberBreak, barber.id, break_id)
    return {"message": "break deleted"}


@router.get("/time-off", response_model=List[TimeOffPublic])
def list_time_off(
    session: Session = Depends(get_session),
    barber: Barber = Depends(get_current_barber),
):
    return schedule.list_time_off(session, barber.id)


@router.post("/time-off", response_model=TimeOffPublic, status_code=201)
def create_time_off(
    off: TimeOffCreate,
    session: Session = Depends(get_session),
    barber: Barber = Depends(get_current_barber),
):
    return schedule.create_time_off(session, barber.id, off)


@router.put("/time-off/{time_off_id}", response_model=TimeOffPublic)
def update_time_off(
    time_off_id: int,
    off: TimeOffCreate,
    session: Session = Depends(get_session),
    barber: Barber = Depends(get_current_barber),
):
    return schedule.update_time_off(session, barber.id, time_off_id, off)


@router.delete("/time-off/{time_off_id}")
def delete_time_off(
    time_off_id: int,
    session: Session = Depends(get_session),
    barber: Barber = Depends(get_current_barber),
):
    schedule.delete_time_off(session, barber.id, time_off_id)
    return {"message": "time off deleted"}
