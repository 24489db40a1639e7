# barberbook/notifications.py

"""
Customer notices sent after a barber confirms or cancels a booking.

Delivery is fire-and-forget: the notice is handed to a scheduler and any
failure is logged and dropped. It never reaches the caller and is never
retried.

On the HTTP path the scheduler is FastAPI's background tasks (see
``deps.get_dispatcher``). Core functions called without a dispatcher, from
scripts or workers, fall back to a small module thread pool. The pool is
created on first use and stopped by ``shutdown()``, which the app calls when
it stops.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, Optional, Protocol

from barberbook.schemas import NoticeKind

logger = logging.getLogger(__name__)

_executor: Optional[ThreadPoolExecutor] = None
_executor_lock = threading.Lock()


class Notifier(Protocol):
    def notify(self, contact: str, kind: NoticeKind, details: Dict[str, Any]) -> None:
        ...


class LogNotifier:
    """Writes the notice to the log instead of sending it anywhere."""

    def notify(self, contact: str, kind: NoticeKind, details: Dict[str, Any]) -> None:
        logger.info(
            f"Appointment {kind.value} notice for {contact}: "
            f"{details.get('service_name')} with {details.get('barber_name')} "
            f"at {details.get('salon_name')} on {details.get('start_local')}"
        )


def _run_in_background(fn: Callable, *args, **kwargs) -> None:
    global _executor
    with _executor_lock:
        if _executor is None:
            _executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="notify")
        _executor.submit(fn, *args, **kwargs)


def shutdown(wait: bool = True) -> None:
    """Stop the fallback pool, finishing queued notices when ``wait`` is set."""
    global _executor
    with _executor_lock:
        executor, _executor = _executor, None
    if executor is not None:
        executor.shutdown(wait=wait)
        logger.info("Notification pool stopped")


def preferred_contact(email: Optional[str], phone: Optional[str]) -> Optional[str]:
    for value in (email, phone):
        if value and value.strip():
            return value.strip()
    return None


class NotificationDispatcher:
    def __init__(self, notifier: Optional[Notifier] = None, schedule: Optional[Callable[..., Any]] = None):
        self.notifier = notifier or LogNotifier()
        self.schedule = schedule or _run_in_background

    def send(self, contact: Optional[str], kind: NoticeKind, details: Dict[str, Any]) -> None:
        if not contact:
            logger.info(f"No customer contact on appointment {details.get('appointment_id')}, skipping {kind.value} notice")
            return
        try:
            self.schedule(self._deliver, contact, kind, details)
        except Exception as e:
            logger.error(f"Could not schedule {kind.value} notice for {contact}: {e}")

    def _deliver(self, contact: str, kind: NoticeKind, details: Dict[str, Any]) -> None:
        try:
            self.notifier.notify(contact, kind, details)
            logger.info(f"{kind.value.capitalize()} notice sent to {contact}")
        except Exception as e:
            logger.error(f"{kind.value.capitalize()} notice to {contact} failed: {e}")


_default_notifier: Notifier = LogNotifier()


def get_notifier() -> Notifier:
    # FastAPI dependency; override in tests or deployments
    return _default_notifier
