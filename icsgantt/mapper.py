"""Mapping between calendar events and timeline tasks, and task edits."""

import logging
from collections.abc import Sequence
from datetime import date, timedelta
from typing import Optional

from .models import (
    DEFAULT_TASK_NAME,
    CalendarEvent,
    EditOutcome,
    TaskUpdate,
    TimelineTask,
)

logger = logging.getLogger(__name__)


def event_to_task(event: CalendarEvent, task_id: str) -> TimelineTask:
    """Build a task for one event.

    Dates are the calendar dates of the event's own instants. A task whose
    start and end fall on the same date is widened to one day so it always
    renders with non-zero width on a day-granularity timeline.
    """
    start = event.start.date()
    end = event.end.date()
    if start == end:
        end = start + timedelta(days=1)

    return TimelineTask(
        id=task_id,
        name=event.summary or DEFAULT_TASK_NAME,
        start=start,
        end=end,
        description=event.description or "",
    )


def to_tasks(events: Sequence[CalendarEvent]) -> list[TimelineTask]:
    """Convert events to a fresh task list with ids "1", "2", ... in order."""
    return [event_to_task(event, str(index)) for index, event in enumerate(events, start=1)]


def find_task(tasks: Sequence[TimelineTask], task_id: str) -> Optional[TimelineTask]:
    """Return the task with ``task_id``, or None."""
    for task in tasks:
        if task.id == task_id:
            return task
    return None


def update_dates(
    tasks: Sequence[TimelineTask], task_id: str, new_start: date, new_end: date
) -> EditOutcome:
    """Overwrite the date range of a task.

    A missing id is reported as NOT_FOUND rather than raised: ids are internal,
    so a miss means a stale reference from the widget.
    """
    task = find_task(tasks, task_id)
    if task is None:
        logger.debug("update_dates: no task with id %s", task_id)
        return EditOutcome.NOT_FOUND

    task.start = new_start
    task.end = new_end
    logger.debug("Task %s dates set to %s..%s", task_id, new_start, new_end)
    return EditOutcome.UPDATED


def update_fields(tasks: Sequence[TimelineTask], task_id: str, update: TaskUpdate) -> EditOutcome:
    """Apply a partial update; fields left as None keep their current value."""
    task = find_task(tasks, task_id)
    if task is None:
        logger.debug("update_fields: no task with id %s", task_id)
        return EditOutcome.NOT_FOUND

    changes = update.model_dump(exclude_none=True)
    for field_name, value in changes.items():
        setattr(task, field_name, value)

    logger.debug("Task %s updated fields: %s", task_id, ", ".join(sorted(changes)) or "none")
    return EditOutcome.UPDATED


def remove(tasks: list[TimelineTask], task_id: str) -> EditOutcome:
    """Delete the task with ``task_id``; the order of the others is kept."""
    for index, task in enumerate(tasks):
        if task.id == task_id:
            del tasks[index]
            logger.debug("Removed task %s", task_id)
            return EditOutcome.REMOVED

    logger.debug("remove: no task with id %s", task_id)
    return EditOutcome.NOT_FOUND
