"""Per-user session state: the loaded events and the editable task list."""

import asyncio
import logging
from datetime import date
from typing import Optional

from . import mapper
from .exceptions import LoadInProgressError
from .loader import CalendarLoader
from .models import CalendarEvent, DayOffset, EditOutcome, TaskUpdate, TimelineTask
from .serializer import serialize

logger = logging.getLogger(__name__)


class TimelineSession:
    """Owns the event and task lists for one session.

    Loads are exclusive: a load started while another is in flight is
    rejected, and a failed load leaves the previous lists untouched.
    """

    def __init__(self, loader: CalendarLoader) -> None:
        self.loader = loader
        self.events: list[CalendarEvent] = []
        self.tasks: list[TimelineTask] = []
        self.offset = DayOffset()
        self.source_url: Optional[str] = None
        self._load_lock = asyncio.Lock()

    @property
    def is_loading(self) -> bool:
        return self._load_lock.locked()

    async def load(self, url: str, offset: Optional[DayOffset] = None) -> list[TimelineTask]:
        """Load ``url`` and replace the current events and tasks.

        Raises:
            LoadInProgressError: another load is running
            FetchError: propagated from the loader
            ParseError: propagated from the loader
        """
        if self._load_lock.locked():
            raise LoadInProgressError("A calendar load is already in progress", 409)

        offset = offset or DayOffset()
        async with self._load_lock:
            events = await self.loader.load(url, offset)
            tasks = mapper.to_tasks(events)

            self.events = events
            self.tasks = tasks
            self.offset = offset
            self.source_url = url

        logger.debug("Session now holds %d tasks from %s", len(tasks), url)
        return tasks

    def update_dates(self, task_id: str, new_start: date, new_end: date) -> EditOutcome:
        return mapper.update_dates(self.tasks, task_id, new_start, new_end)

    def update_fields(self, task_id: str, update: TaskUpdate) -> EditOutcome:
        return mapper.update_fields(self.tasks, task_id, update)

    def remove(self, task_id: str) -> EditOutcome:
        return mapper.remove(self.tasks, task_id)

    def export(self, origin_host: str) -> str:
        """Serialize the current task list; raises EmptyInputError when empty."""
        return serialize(self.tasks, origin_host)
