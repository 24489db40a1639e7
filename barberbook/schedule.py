# barberbook/schedule.py

import logging
from datetime import datetime, time
from typing import List, Type, Union

from sqlmodel import Session, select

from barberbook.core import as_utc, require_aware
from barberbook.errors import NotFoundOrForbidden, ValidationError, translate_db_errors
from barberbook.models import BarberBreak, TimeOff, WorkingHour
from barberbook.schemas import TimeOffCreate, WeeklyRuleCreate

logger = logging.getLogger(__name__)

WeeklyRule = Union[WorkingHour, BarberBreak]


def validate_day_and_times(day_of_week: int, start_time: time, end_time: time) -> None:
    if not (0 <= day_of_week <= 6):
        raise ValidationError("day_of_week must be between 0 and 6")
    if start_time >= end_time:
        raise ValidationError("start_time must be before end_time")


def validate_period(start_at: datetime, end_at: datetime) -> None:
    require_aware(start_at, "start_at")
    require_aware(end_at, "end_at")
    if start_at >= end_at:
        raise ValidationError("start_at must be before end_at")


def _owned_row(session: Session, model, barber_id: int, row_id: int):
    row = session.exec(
        select(model).where(model.id == row_id).where(model.barber_id == barber_id)
    ).first()
    if row is None:
        raise NotFoundOrForbidden(f"{model.__name__} not found")
    return row


# Working hours and breaks share one shape


def list_weekly_rules(session: Session, model: Type[WeeklyRule], barber_id: int) -> List[WeeklyRule]:
    with translate_db_errors(f"list {model.__name__} rows"):
        return list(
            session.exec(
                select(model)
                .where(model.barber_id == barber_id)
                .order_by(model.day_of_week, model.start_time)
            ).all()
        )


def create_weekly_rule(session: Session, model: Type[WeeklyRule], barber_id: int, data: WeeklyRuleCreate) -> WeeklyRule:
    validate_day_and_times(data.day_of_week, data.start_time, data.end_time)
    rule = model(
        barber_id=barber_id,
        day_of_week=data.day_of_week,
        start_time=data.start_time,
        end_time=data.end_time,
    )
    with translate_db_errors(f"save the {model.__name__}"):
        session.add(rule)
        session.commit()
        session.refresh(rule)
    logger.info(f"{model.__name__} {rule.id} added for barber {barber_id}")
    return rule


def update_weekly_rule(
    session: Session, model: Type[WeeklyRule], barber_id: int, rule_id: int, data: WeeklyRuleCreate
) -> WeeklyRule:
    validate_day_and_times(data.day_of_week, data.start_time, data.end_time)
    with translate_db_errors(f"update the {model.__name__}"):
        rule = _owned_row(session, model, barber_id, rule_id)
        rule.day_of_week = data.day_of_week
        rule.start_time = data.start_time
        rule.end_time = data.end_time
        session.add(rule)
        session.commit()
        session.refresh(rule)
    return rule


def delete_weekly_rule(session: Session, model: Type[WeeklyRule], barber_id: int, rule_id: int) -> None:
    with translate_db_errors(f"delete the {model.__name__}"):
        rule = _owned_row(session, model, barber_id, rule_id)
        session.delete(rule)
        session.commit()


# Time off


def list_time_off(session: Session, barber_id: int) -> List[TimeOff]:
    with translate_db_errors("list time off"):
        return list(
            session.exec(
                select(TimeOff).where(TimeOff.barber_id == barber_id).order_by(TimeOff.start_at)
            ).all()
        )


def create_time_off(session: Session, barber_id: int, data: TimeOffCreate) -> TimeOff:
    validate_period(data.start_at, data.end_at)
    off = TimeOff(
        barber_id=barber_id,
        start_at=as_utc(data.start_at),
        end_at=as_utc(data.end_at),
        reason=data.reason,
    )
    with translate_db_errors("save time off"):
        session.add(off)
        session.commit()
        session.refresh(off)
    logger.info(f"Time off {off.id} added for barber {barber_id}: {off.start_at} - {off.end_at} UTC")
    return off


def update_time_off(session: Session, barber_id: int, time_off_id: int, data: TimeOffCreate) -> TimeOff:
    validate_period(data.start_at, data.end_at)
    with translate_db_errors("update time off"):
        off = _owned_row(session, TimeOff, barber_id, time_off_id)
        off.start_at = as_utc(data.start_at)
        off.end_at = as_utc(data.end_at)
        off.reason = data.reason
        session.add(off)
        session.commit()
        session.refresh(off)
    return off


def delete_time_off(session: Session, barber_id: int, time_off_id: int) -> None:
    with translate_db_errors("delete time off"):
        off = _owned_row(session, TimeOff, barber_id, time_off_id)
        session.delete(off)
        session.commit()
