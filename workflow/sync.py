"""
Sync handshake - pairwise calendar sync requests.

    PENDING --accept--> ACCEPTED
            --reject--> REJECTED

Both outcomes are final. An ACCEPTED request makes the two users
synced peers of each other, whichever side asked.
"""

from typing import Optional

from models import SyncRequest, SyncStatus, SyncDecision, User
from repositories.base import Repository
from .errors import NotFound, ValidationError, DomainError, ALREADY_RESPONDED
from .locks import KeyedLocks, SYNC


class SyncHandshake:
    """Request/respond/remove over SyncRequest records."""

    def __init__(self, repo: Repository, locks: Optional[KeyedLocks] = None):
        self.repo = repo
        self.locks = locks or KeyedLocks()

    def request(self, from_user_id: int, to_user_id: int) -> SyncRequest:
        if from_user_id == to_user_id:
            raise ValidationError("Cannot sync with yourself")
        if not self.repo.users.exists(from_user_id):
            raise NotFound(f"User {from_user_id} not found")
        if not self.repo.users.exists(to_user_id):
            raise NotFound(f"User {to_user_id} not found")

        for existing in self.repo.syncs.between(from_user_id, to_user_id):
            if existing.is_pending and existing.from_user_id == from_user_id:
                return existing

        sync = self.repo.syncs.insert(SyncRequest(from_user_id=from_user_id, to_user_id=to_user_id))
        print(f"[SYNC] Request {sync.id}: {from_user_id} -> {to_user_id}")
        return sync

    def respond(self, request_id: int, acting_user_id: int, decision: SyncDecision) -> SyncRequest:
        """
        Accept or reject a pending request.

        Only the addressee may respond. Anyone else gets the same
        NotFound as for an unknown id.
        """
        try:
            decision = SyncDecision(decision)
        except ValueError as e:
            raise ValidationError(f"Unknown decision: {decision!r}") from e

        with self.locks.hold((SYNC, request_id)):
            sync = self.repo.syncs.get(request_id)
            if sync is None or sync.to_user_id != acting_user_id:
                raise NotFound(f"Sync request {request_id} not found")
            if not sync.is_pending:
                raise DomainError(ALREADY_RESPONDED, f"Sync request already {sync.status.value}")

            sync.status = SyncStatus.ACCEPTED if decision == SyncDecision.ACCEPT else SyncStatus.REJECTED
            sync.touch()
            self.repo.syncs.save(sync)

        print(f"[SYNC] Request {request_id} {sync.status.value}")
        return sync

    def incoming(self, user_id: int) -> list[SyncRequest]:
        """Pending requests waiting on this user."""
        return [s for s in self.repo.syncs.for_user(user_id) if s.to_user_id == user_id and s.is_pending]

    def outgoing(self, user_id: int) -> list[SyncRequest]:
        return [s for s in self.repo.syncs.for_user(user_id) if s.from_user_id == user_id]

    def synced_peers(self, user_id: int) -> list[User]:
        peer_ids = []
        for sync in self.repo.syncs.for_user(user_id):
            if sync.status == SyncStatus.ACCEPTED:
                peer = sync.peer_of(user_id)
                if peer not in peer_ids:
                    peer_ids.append(peer)

        peers = []
        for peer_id in peer_ids:
            user = self.repo.users.get(peer_id)
            if user is not None:
                peers.append(user)
        return peers

    def remove(self, user_a: int, user_b: int) -> int:
        """
        Delete every request between the two users, any status, either direction.

        This also cancels a request that is still pending. Returns the
        number of requests deleted.
        """
        removed = 0
        with self.repo.transaction():
            for sync in self.repo.syncs.between(user_a, user_b):
                with self.locks.hold((SYNC, sync.id)):
                    if self.repo.syncs.delete(sync.id):
                        removed += 1

        if removed:
            print(f"[SYNC] Removed {removed} request(s) between {user_a} and {user_b}")
        return removed
