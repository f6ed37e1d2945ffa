"""Data models for calendar events and timeline tasks."""

from datetime import date, datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer

DEFAULT_TASK_NAME = "No Summary"

# Slider bounds for the day-offset inputs
MIN_OFFSET_DAYS = 0
MAX_OFFSET_DAYS = 30
DEFAULT_OFFSET_START = 5
DEFAULT_OFFSET_END = 0


class CalendarEvent(BaseModel):
    """A VEVENT reduced to the fields the timeline needs."""

    summary: Optional[str] = Field(default=None, description="Event title")
    start: datetime = Field(..., description="Inclusive start instant")
    end: datetime = Field(..., description="End instant, may equal start")
    description: Optional[str] = Field(default=None, description="Event description")
    location: Optional[str] = Field(default=None, description="Event location")

    @field_serializer("start", "end")
    def serialize_datetime(self, dt: datetime) -> str:
        """Serialize datetime fields to ISO format."""
        return dt.isoformat()


class TimelineTask(BaseModel):
    """One bar on the Gantt timeline, derived from a CalendarEvent."""

    id: str = Field(..., description="Ordinal id assigned at load time")
    name: str = Field(default=DEFAULT_TASK_NAME, description="Task title")
    start: date = Field(..., description="First day of the task")
    end: date = Field(..., description="End date as given to the widget")
    description: str = Field(default="", description="Task description")

    # Fields the Gantt widget expects on every task
    progress: int = Field(default=0, ge=0, le=100)
    dependencies: str = Field(default="")

    model_config = ConfigDict(validate_assignment=True)

    def to_widget(self) -> dict[str, Any]:
        """Return the task in the shape the timeline widget consumes."""
        return self.model_dump(mode="json")


class TaskUpdate(BaseModel):
    """Partial edit of a task; None leaves the current value untouched."""

    name: Optional[str] = None
    start: Optional[date] = None
    end: Optional[date] = None
    description: Optional[str] = None


class TaskDates(BaseModel):
    """New date range reported by the timeline widget after a drag."""

    start: date
    end: date


class DayOffset(BaseModel):
    """Uniform skew applied to every loaded event.

    ``start`` days are subtracted from each event start and ``end`` days are
    added to each event end.
    """

    start: int = Field(default=DEFAULT_OFFSET_START, ge=MIN_OFFSET_DAYS, le=MAX_OFFSET_DAYS)
    end: int = Field(default=DEFAULT_OFFSET_END, ge=MIN_OFFSET_DAYS, le=MAX_OFFSET_DAYS)


class LoadRequest(BaseModel):
    """Body of a load request from the page."""

    url: str = Field(..., min_length=1, description="ICS calendar URL")
    offset_start: int = Field(
        default=DEFAULT_OFFSET_START, ge=MIN_OFFSET_DAYS, le=MAX_OFFSET_DAYS
    )
    offset_end: int = Field(default=DEFAULT_OFFSET_END, ge=MIN_OFFSET_DAYS, le=MAX_OFFSET_DAYS)

    @property
    def offset(self) -> DayOffset:
        return DayOffset(start=self.offset_start, end=self.offset_end)


class EditOutcome(str, Enum):
    """Result of an edit against the task list."""

    UPDATED = "updated"
    REMOVED = "removed"
    NOT_FOUND = "not_found"

    @property
    def found(self) -> bool:
        return self is not EditOutcome.NOT_FOUND
