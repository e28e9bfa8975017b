"""
SyncRequest - pairwise calendar sync handshake.
"""

from enum import Enum

from .base import BaseEntity


class SyncStatus(str, Enum):
    """PENDING moves once to ACCEPTED or REJECTED."""
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class SyncDecision(str, Enum):
    ACCEPT = "accept"
    REJECT = "reject"


class SyncRequest(BaseEntity):
    """A request from one user to sync calendars with another."""
    from_user_id: int
    to_user_id: int
    status: SyncStatus = SyncStatus.PENDING

    @property
    def is_pending(self) -> bool:
        return self.status == SyncStatus.PENDING

    def involves(self, user_id: int) -> bool:
        return user_id in (self.from_user_id, self.to_user_id)

    def matches_pair(self, a: int, b: int) -> bool:
        """True if this request connects a and b, in either direction."""
        return {self.from_user_id, self.to_user_id} == {a, b}

    def peer_of(self, user_id: int) -> int:
        return self.to_user_id if self.from_user_id == user_id else self.from_user_id
