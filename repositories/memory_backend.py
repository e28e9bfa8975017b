"""
In-memory backend - keyed dicts behind the repository interface.

Each collection owns its records and its own id sequence. Entities
are copied on the way in and on the way out, so nothing outside the
store can mutate a stored record except through save().
"""

import threading
from contextlib import contextmanager
from typing import Any, Callable, Iterator, Optional, TypeVar

from models import (
    BaseEntity,
    User,
    Assignment,
    Submission,
    Review,
    SyncRequest,
    CalendarEvent,
    TimeSlot,
)
from .base import (
    BaseRepository,
    Repository,
    UserRepository,
    AssignmentRepository,
    SubmissionRepository,
    ReviewRepository,
    SyncRepository,
    EventRepository,
    SlotRepository,
)

T = TypeVar("T", bound=BaseEntity)

# (collection, id, previous record or None if it did not exist)
JournalEntry = tuple["MemoryCollection", int, Optional[BaseEntity]]


class IdSequence:
    """Thread-safe increasing id allocator."""

    def __init__(self, start: int = 1):
        self._next = start
        self._lock = threading.Lock()

    def next(self) -> int:
        with self._lock:
            value = self._next
            self._next += 1
            return value

    def observe(self, used: int) -> None:
        """Make sure future ids are above an id loaded from storage."""
        with self._lock:
            if used >= self._next:
                self._next = used + 1

    @property
    def peek(self) -> int:
        return self._next


class _Journal(threading.local):
    """Per-thread undo log for the active transaction."""

    def __init__(self):
        self.depth = 0
        self.entries: list[JournalEntry] = []
        self.callbacks: list[tuple[Callable[..., Any], tuple]] = []


class MemoryCollection(BaseRepository[T]):
    """Dict-backed collection for one entity type."""

    def __init__(
        self,
        name: str,
        model: type[T],
        on_write: Callable[["MemoryCollection", int, Optional[BaseEntity]], None],
        sequence: Optional[IdSequence] = None,
    ):
        self.name = name
        self.model = model
        self.sequence = sequence or IdSequence()
        self._records: dict[int, T] = {}
        self._lock = threading.RLock()
        self._on_write = on_write

    def _copy(self, entity: T) -> T:
        return entity.model_copy(deep=True)

    def get(self, id: int) -> Optional[T]:
        with self._lock:
            entity = self._records.get(id)
            return self._copy(entity) if entity is not None else None

    def insert(self, entity: T) -> T:
        stored = self._copy(entity)
        with self._lock:
            stored.id = self.sequence.next()
            self._records[stored.id] = stored
        self._on_write(self, stored.id, None)
        return self._copy(stored)

    def save(self, entity: T) -> None:
        if entity.id is None:
            raise KeyError(f"{self.name}: cannot save an entity without an id")
        with self._lock:
            previous = self._records.get(entity.id)
            if previous is None:
                raise KeyError(f"{self.name}: no record {entity.id}")
            self._records[entity.id] = self._copy(entity)
        self._on_write(self, entity.id, previous)

    def delete(self, id: int) -> bool:
        with self._lock:
            previous = self._records.pop(id, None)
        if previous is None:
            return False
        self._on_write(self, id, previous)
        return True

    def exists(self, id: int) -> bool:
        with self._lock:
            return id in self._records

    def count(self) -> int:
        with self._lock:
            return len(self._records)

    def _filter(self, predicate: Callable[[T], bool]) -> list[T]:
        with self._lock:
            return [self._copy(e) for e in self._records.values() if predicate(e)]

    # Used by the repository for rollback and loading

    def _restore(self, id: int, previous: Optional[T]) -> None:
        with self._lock:
            if previous is None:
                self._records.pop(id, None)
            else:
                self._records[id] = previous

    def _load(self, entity: T) -> None:
        with self._lock:
            self._records[entity.id] = entity
            self.sequence.observe(entity.id)

    def _snapshot(self) -> list[T]:
        with self._lock:
            return sorted(self._records.values(), key=lambda e: e.id)

    # Keep last: shadows the builtin list in this class body
    def list(self) -> list[T]:
        with self._lock:
            return [self._copy(e) for e in self._records.values()]


class MemoryUserRepository(MemoryCollection[User], UserRepository):

    def by_username(self, username: str) -> Optional[User]:
        matches = self._filter(lambda u: u.username == username)
        return matches[0] if matches else None

    def search(self, query: str) -> list[User]:
        needle = query.strip().lower()
        return self._filter(lambda u: needle in u.username.lower())


class MemoryAssignmentRepository(MemoryCollection[Assignment], AssignmentRepository):

    def by_category(self, category: str) -> list[Assignment]:
        return self._filter(lambda a: a.category == category)

    def by_difficulty(self, difficulty: int) -> list[Assignment]:
        return self._filter(lambda a: a.difficulty == difficulty)


class MemorySubmissionRepository(MemoryCollection[Submission], SubmissionRepository):

    def for_assignment(self, assignment_id: int) -> list[Submission]:
        return self._filter(lambda s: s.assignment_id == assignment_id)

    def for_author(self, author_id: int) -> list[Submission]:
        return self._filter(lambda s: s.author_id == author_id)


class MemoryReviewRepository(MemoryCollection[Review], ReviewRepository):

    def for_submission(self, submission_id: int) -> list[Review]:
        return self._filter(lambda r: r.submission_id == submission_id)

    def for_reviewer(self, reviewer_id: int) -> list[Review]:
        return self._filter(lambda r: r.reviewer_id == reviewer_id)


class MemorySyncRepository(MemoryCollection[SyncRequest], SyncRepository):

    def for_user(self, user_id: int) -> list[SyncRequest]:
        return self._filter(lambda s: s.involves(user_id))

    def between(self, a: int, b: int) -> list[SyncRequest]:
        return self._filter(lambda s: s.matches_pair(a, b))


class MemoryEventRepository(MemoryCollection[CalendarEvent], EventRepository):

    def for_user(self, user_id: int) -> list[CalendarEvent]:
        return self._filter(lambda e: e.user_id == user_id)


class MemorySlotRepository(MemoryCollection[TimeSlot], SlotRepository):

    def for_user(self, user_id: int) -> list[TimeSlot]:
        return self._filter(lambda s: s.user_id == user_id)


class MemoryRepository(Repository):
    """In-memory backend implementation."""

    def __init__(self):
        self._journal = _Journal()
        self._users = MemoryUserRepository("users", User, self._record_write)
        self._assignments = MemoryAssignmentRepository("assignments", Assignment, self._record_write)
        self._submissions = MemorySubmissionRepository("submissions", Submission, self._record_write)
        self._reviews = MemoryReviewRepository("reviews", Review, self._record_write)
        self._syncs = MemorySyncRepository("syncs", SyncRequest, self._record_write)
        self._events = MemoryEventRepository("events", CalendarEvent, self._record_write)
        self._slots = MemorySlotRepository("slots", TimeSlot, self._record_write)

    @property
    def users(self) -> UserRepository:
        return self._users

    @property
    def assignments(self) -> AssignmentRepository:
        return self._assignments

    @property
    def submissions(self) -> SubmissionRepository:
        return self._submissions

    @property
    def reviews(self) -> ReviewRepository:
        return self._reviews

    @property
    def syncs(self) -> SyncRepository:
        return self._syncs

    @property
    def events(self) -> EventRepository:
        return self._events

    @property
    def slots(self) -> SlotRepository:
        return self._slots

    def collections(self) -> list[MemoryCollection]:
        return [
            self._users,
            self._assignments,
            self._submissions,
            self._reviews,
            self._syncs,
            self._events,
            self._slots,
        ]

    @property
    def in_transaction(self) -> bool:
        return self._journal.depth > 0

    @contextmanager
    def transaction(self) -> Iterator["MemoryRepository"]:
        journal = self._journal
        journal.depth += 1
        try:
            yield self
        except BaseException:
            journal.depth -= 1
            if journal.depth == 0:
                entries, journal.entries = journal.entries, []
                journal.callbacks = []
                self._rollback(entries)
            raise
        else:
            journal.depth -= 1
            if journal.depth == 0:
                entries, journal.entries = journal.entries, []
                callbacks, journal.callbacks = journal.callbacks, []
                self._commit(entries)
                for callback, args in callbacks:
                    callback(*args)

    def on_commit(self, callback: Callable[..., Any], *args: Any) -> None:
        if self._journal.depth > 0:
            self._journal.callbacks.append((callback, args))
        else:
            callback(*args)

    # Hooks

    def _record_write(self, collection: MemoryCollection, id: int, previous: Optional[BaseEntity]) -> None:
        if self._journal.depth > 0:
            self._journal.entries.append((collection, id, previous))
        else:
            self._commit([(collection, id, previous)])

    def _rollback(self, entries: list[JournalEntry]) -> None:
        for collection, id, previous in reversed(entries):
            collection._restore(id, previous)
        if entries:
            print(f"[STORE] Rolled back {len(entries)} write(s)")
        self._after_rollback(entries)

    def _commit(self, entries: list[JournalEntry]) -> None:
        """Called once per committed unit of work. Memory has nothing to flush."""
        pass

    def _after_rollback(self, entries: list[JournalEntry]) -> None:
        pass
