"""
Repository base classes - define the interface.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Any, Callable, Generic, TypeVar, Optional

from models import (
    User,
    Assignment,
    Submission,
    Review,
    SyncRequest,
    CalendarEvent,
    TimeSlot,
)

T = TypeVar("T")


class BaseRepository(ABC, Generic[T]):
    """
    Abstract base for entity repositories.

    Implementations hand out copies; mutating a returned entity has no
    effect until it is passed back through save().
    """

    @abstractmethod
    def get(self, id: int) -> Optional[T]:
        """Get entity by ID."""
        pass

    @abstractmethod
    def insert(self, entity: T) -> T:
        """Allocate an ID, store the entity and return the stored copy."""
        pass

    @abstractmethod
    def save(self, entity: T) -> None:
        """Update an existing entity."""
        pass

    @abstractmethod
    def delete(self, id: int) -> bool:
        """Delete entity by ID. Returns True if deleted."""
        pass

    @abstractmethod
    def list(self) -> list[T]:
        """List all entities."""
        pass

    @abstractmethod
    def exists(self, id: int) -> bool:
        """Check if entity exists."""
        pass


class UserRepository(BaseRepository[User]):
    """Repository for users."""

    @abstractmethod
    def by_username(self, username: str) -> Optional[User]:
        """Exact username lookup."""
        pass

    @abstractmethod
    def search(self, query: str) -> list[User]:
        """Case-insensitive substring match on username."""
        pass


class AssignmentRepository(BaseRepository[Assignment]):
    """Repository for assignments."""

    @abstractmethod
    def by_category(self, category: str) -> list[Assignment]:
        pass

    @abstractmethod
    def by_difficulty(self, difficulty: int) -> list[Assignment]:
        pass


class SubmissionRepository(BaseRepository[Submission]):
    """Repository for submissions."""

    @abstractmethod
    def for_assignment(self, assignment_id: int) -> list[Submission]:
        pass

    @abstractmethod
    def for_author(self, author_id: int) -> list[Submission]:
        pass


class ReviewRepository(BaseRepository[Review]):
    """Repository for reviews."""

    @abstractmethod
    def for_submission(self, submission_id: int) -> list[Review]:
        pass

    @abstractmethod
    def for_reviewer(self, reviewer_id: int) -> list[Review]:
        pass


class SyncRepository(BaseRepository[SyncRequest]):
    """Repository for calendar sync requests."""

    @abstractmethod
    def for_user(self, user_id: int) -> list[SyncRequest]:
        """Requests where the user is on either side."""
        pass

    @abstractmethod
    def between(self, a: int, b: int) -> list[SyncRequest]:
        """Requests connecting a and b, in either direction."""
        pass


class EventRepository(BaseRepository[CalendarEvent]):
    """Repository for calendar events."""

    @abstractmethod
    def for_user(self, user_id: int) -> list[CalendarEvent]:
        """Events owned by the user."""
        pass


class SlotRepository(BaseRepository[TimeSlot]):
    """Repository for time slots."""

    @abstractmethod
    def for_user(self, user_id: int) -> list[TimeSlot]:
        pass


class Repository:
    """
    Aggregate repository - provides access to all entity repositories.

    This is what consumers use. Backend implementations provide
    concrete versions of each sub-repository.
    """

    @property
    @abstractmethod
    def users(self) -> UserRepository:
        """Access user repository."""
        pass

    @property
    @abstractmethod
    def assignments(self) -> AssignmentRepository:
        """Access assignment repository."""
        pass

    @property
    @abstractmethod
    def submissions(self) -> SubmissionRepository:
        """Access submission repository."""
        pass

    @property
    @abstractmethod
    def reviews(self) -> ReviewRepository:
        """Access review repository."""
        pass

    @property
    @abstractmethod
    def syncs(self) -> SyncRepository:
        """Access sync request repository."""
        pass

    @property
    @abstractmethod
    def events(self) -> EventRepository:
        """Access calendar event repository."""
        pass

    @property
    @abstractmethod
    def slots(self) -> SlotRepository:
        """Access time slot repository."""
        pass

    @abstractmethod
    def transaction(self) -> AbstractContextManager:
        """
        Unit of work.

        All writes made inside the block are undone if it raises.
        Nested blocks join the outermost one.
        """
        pass

    @abstractmethod
    def on_commit(self, callback: Callable[..., Any], *args: Any) -> None:
        """
        Run callback(*args) once the current unit of work commits.

        Outside a transaction it runs immediately. Dropped on rollback.
        """
        pass
