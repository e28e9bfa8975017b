"""
Calendar entries - events and availability slots owned by one user.

Synced peers see each other's shared events and available slots.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field, model_validator

from .base import BaseEntity


class EventType(str, Enum):
    STUDY = "study"
    REVIEW = "review"
    MEETING = "meeting"


class CalendarEntry(BaseEntity):
    """A start/end interval on one user's calendar."""
    user_id: int
    start: datetime
    end: datetime

    @model_validator(mode="after")
    def check_interval(self):
        if self.end <= self.start:
            raise ValueError("end must be after start")
        return self


class CalendarEvent(CalendarEntry):
    """A study session, review session or meeting."""
    title: str = Field(min_length=1)
    description: str = ""
    type: EventType = EventType.STUDY
    is_shared: bool = False
    color: Optional[str] = None


class TimeSlot(CalendarEntry):
    """A block of time marked free or busy."""
    is_available: bool = True
