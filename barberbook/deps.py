# barberbook/deps.py

from fastapi import BackgroundTasks, Depends

from barberbook.notifications import NotificationDispatcher, Notifier, get_notifier


# Notices run after the response has been sent
def get_dispatcher(
    background_tasks: BackgroundTasks,
    notifier: Notifier = Depends(get_notifier),
) -> NotificationDispatcher:
    return NotificationDispatcher(notifier, schedule=background_tasks.add_task)
