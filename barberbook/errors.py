# barberbook/errors.py

import logging
from contextlib import contextmanager

from sqlalchemy.exc import InterfaceError, OperationalError

logger = logging.getLogger(__name__)


class BookingError(Exception):
    """Base class for errors raised by the booking core."""

    status_code = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationError(BookingError):
    # malformed input; the caller has to fix the request
    status_code = 422


class NotFoundOrForbidden(BookingError):
    # absent, not owned, or in a state that forbids the transition
    status_code = 404


class ServiceNotFound(NotFoundOrForbidden):
    pass


class BarberNotFound(NotFoundOrForbidden):
    pass


class AppointmentNotFound(NotFoundOrForbidden):
    pass


class IntegrityConflict(BookingError):
    status_code = 409


class TransientInfrastructureError(BookingError):
    status_code = 503


@contextmanager
def translate_db_errors(action: str):
    """Surface storage outages as TransientInfrastructureError."""
    try:
        yield
    except (OperationalError, InterfaceError) as e:
        logger.error(f"Storage failure while trying to {action}: {e}")
        raise TransientInfrastructureError(f"Storage unavailable while trying to {action}") from e
