"""
Calendar planner - events and time slots, scoped by sync.

Only the owner may change or delete an entry. Anyone else gets the
same NotFound as for an unknown id.

Visibility:
    own entries      - all of them
    synced peers     - events marked is_shared, slots marked is_available
"""

from datetime import datetime
from typing import Callable, Optional

from pydantic import ValidationError as PydanticValidationError

from models import CalendarEntry, CalendarEvent, EventType, TimeSlot
from repositories.base import BaseRepository, Repository
from .errors import NotFound, ValidationError
from .locks import KeyedLocks, EVENT, SLOT
from .sync import SyncHandshake

EVENT_FIELDS = {"title", "description", "type", "start", "end", "is_shared", "color"}
SLOT_FIELDS = {"start", "end", "is_available"}


class CalendarPlanner:
    """Owner-restricted calendar entries plus the peer-visible view."""

    def __init__(self, repo: Repository, sync: SyncHandshake, locks: Optional[KeyedLocks] = None):
        self.repo = repo
        self.sync = sync
        self.locks = locks or sync.locks

    # === Events ===

    def create_event(
        self,
        user_id: int,
        title: str,
        start: datetime,
        end: datetime,
        type: EventType = EventType.STUDY,
        description: str = "",
        is_shared: bool = False,
        color: Optional[str] = None,
    ) -> CalendarEvent:
        self._require_user(user_id)
        event = self._build(CalendarEvent, dict(
            user_id=user_id,
            title=title,
            start=start,
            end=end,
            type=type,
            description=description,
            is_shared=is_shared,
            color=color,
        ))
        event = self.repo.events.insert(event)
        print(f"[CALENDAR] Event {event.id} '{event.title}' for user {user_id}")
        return event

    def get_event(self, event_id: int, acting_user_id: int) -> CalendarEvent:
        return self._owned(self.repo.events, "Event", event_id, acting_user_id)

    def update_event(self, event_id: int, acting_user_id: int, **changes) -> CalendarEvent:
        return self._update(self.repo.events, EVENT, event_id, acting_user_id, EVENT_FIELDS, changes)

    def delete_event(self, event_id: int, acting_user_id: int) -> None:
        self._delete(self.repo.events, EVENT, event_id, acting_user_id)

    def events_for(self, user_id: int) -> list[CalendarEvent]:
        return _in_order(self.repo.events.for_user(user_id))

    def visible_events(
        self,
        user_id: int,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list[CalendarEvent]:
        """The user's own events and the shared events of synced peers."""
        return self._visible(self.repo.events, user_id, lambda e: e.is_shared, start, end)

    # === Time slots ===

    def create_slot(self, user_id: int, start: datetime, end: datetime, is_available: bool = True) -> TimeSlot:
        self._require_user(user_id)
        slot = self._build(TimeSlot, dict(user_id=user_id, start=start, end=end, is_available=is_available))
        slot = self.repo.slots.insert(slot)
        print(f"[CALENDAR] Slot {slot.id} for user {user_id}")
        return slot

    def update_slot(self, slot_id: int, acting_user_id: int, **changes) -> TimeSlot:
        return self._update(self.repo.slots, SLOT, slot_id, acting_user_id, SLOT_FIELDS, changes)

    def delete_slot(self, slot_id: int, acting_user_id: int) -> None:
        self._delete(self.repo.slots, SLOT, slot_id, acting_user_id)

    def slots_for(self, user_id: int) -> list[TimeSlot]:
        return _in_order(self.repo.slots.for_user(user_id))

    def visible_slots(
        self,
        user_id: int,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list[TimeSlot]:
        """The user's own slots and the available slots of synced peers."""
        return self._visible(self.repo.slots, user_id, lambda s: s.is_available, start, end)

    # === Helpers ===

    def _require_user(self, user_id: int) -> None:
        if not self.repo.users.exists(user_id):
            raise NotFound(f"User {user_id} not found")

    def _build(self, model: type[CalendarEntry], data: dict) -> CalendarEntry:
        try:
            return model.model_validate(data)
        except PydanticValidationError as e:
            raise ValidationError(str(e)) from e

    def _owned(self, collection: BaseRepository, label: str, entry_id: int, acting_user_id: int):
        entry = collection.get(entry_id)
        if entry is None or entry.user_id != acting_user_id:
            raise NotFound(f"{label} {entry_id} not found")
        return entry

    def _update(self, collection, kind: str, entry_id: int, acting_user_id: int, allowed: set, changes: dict):
        unknown = set(changes) - allowed
        if unknown:
            raise ValidationError(f"Cannot change: {', '.join(sorted(unknown))}")

        with self.locks.hold((kind, entry_id)):
            entry = self._owned(collection, kind.capitalize(), entry_id, acting_user_id)
            data = entry.model_dump()
            data.update(changes)
            data["updated_at"] = datetime.now()
            updated = self._build(type(entry), data)
            collection.save(updated)

        print(f"[CALENDAR] Updated {kind} {entry_id}: {', '.join(sorted(changes)) or 'nothing'}")
        return updated

    def _delete(self, collection, kind: str, entry_id: int, acting_user_id: int) -> None:
        with self.locks.hold((kind, entry_id)):
            self._owned(collection, kind.capitalize(), entry_id, acting_user_id)
            collection.delete(entry_id)

        print(f"[CALENDAR] Deleted {kind} {entry_id}")

    def _visible(
        self,
        collection,
        user_id: int,
        shown_to_peers: Callable[[CalendarEntry], bool],
        start: Optional[datetime],
        end: Optional[datetime],
    ) -> list:
        entries = collection.for_user(user_id)
        for peer in self.sync.synced_peers(user_id):
            entries.extend(e for e in collection.for_user(peer.id) if shown_to_peers(e))

        if start is not None:
            entries = [e for e in entries if e.end > start]
        if end is not None:
            entries = [e for e in entries if e.start < end]
        return _in_order(entries)


def _in_order(entries: list) -> list:
    return sorted(entries, key=lambda e: (e.start, e.id))
