"""
Domain models - single source of truth for all entities.

Design principles:
- Every entity defined once
- Validation at the boundary
- Backend-agnostic (repository handles persistence)
"""

from .base import BaseEntity, TimestampMixin
from .user import User, level_for
from .assignment import Assignment
from .submission import Submission, SubmissionStatus
from .review import Review, QualityTier
from .sync import SyncRequest, SyncStatus, SyncDecision
from .calendar import CalendarEntry, CalendarEvent, TimeSlot, EventType
from .stats import UserStats

__all__ = [
    # Base
    "BaseEntity",
    "TimestampMixin",
    # Users
    "User",
    "level_for",
    # Assignments
    "Assignment",
    # Submissions
    "Submission",
    "SubmissionStatus",
    # Reviews
    "Review",
    "QualityTier",
    # Sync
    "SyncRequest",
    "SyncStatus",
    "SyncDecision",
    # Calendar
    "CalendarEntry",
    "CalendarEvent",
    "TimeSlot",
    "EventType",
    # Stats
    "UserStats",
]
