"""Unit tests for SyncHandshake."""

import pytest

from models import SyncStatus, SyncDecision
from workflow import NotFound, ValidationError, DomainError
from workflow.errors import ALREADY_RESPONDED


def peer_names(engine, user):
    return {p.username for p in engine.synced_peers(user.id)}


class TestRequest:

    def test_created_pending(self, engine, users):
        sync = engine.request_sync(users["alice"].id, users["bob"].id)
        assert sync.id is not None
        assert sync.status == SyncStatus.PENDING

    def test_self_request_rejected(self, engine, users):
        with pytest.raises(ValidationError):
            engine.request_sync(users["alice"].id, users["alice"].id)

    def test_unknown_addressee(self, engine, users):
        with pytest.raises(NotFound):
            engine.request_sync(users["alice"].id, 999)

    def test_pending_request_not_duplicated(self, engine, users):
        first = engine.request_sync(users["alice"].id, users["bob"].id)
        second = engine.request_sync(users["alice"].id, users["bob"].id)
        assert first.id == second.id

    def test_incoming_and_outgoing(self, engine, users):
        sync = engine.request_sync(users["alice"].id, users["bob"].id)
        assert [s.id for s in engine.sync.incoming(users["bob"].id)] == [sync.id]
        assert engine.sync.incoming(users["alice"].id) == []
        assert [s.id for s in engine.sync.outgoing(users["alice"].id)] == [sync.id]


class TestRespond:

    def test_accept_makes_symmetric_peers(self, engine, users):
        sync = engine.request_sync(users["alice"].id, users["bob"].id)
        engine.respond_sync(sync.id, users["bob"].id, SyncDecision.ACCEPT)

        assert peer_names(engine, users["alice"]) == {"bob"}
        assert peer_names(engine, users["bob"]) == {"alice"}

    def test_reject_then_rerequest(self, engine, users):
        sync = engine.request_sync(users["alice"].id, users["bob"].id)
        rejected = engine.respond_sync(sync.id, users["bob"].id, "reject")

        assert rejected.status == SyncStatus.REJECTED
        assert "bob" not in peer_names(engine, users["alice"])

        again = engine.request_sync(users["alice"].id, users["bob"].id)
        assert again.id != sync.id
        assert again.status == SyncStatus.PENDING

    def test_wrong_user_sees_not_found(self, engine, users):
        sync = engine.request_sync(users["alice"].id, users["bob"].id)

        with pytest.raises(NotFound) as wrong_user:
            engine.respond_sync(sync.id, users["carol"].id, SyncDecision.ACCEPT)
        with pytest.raises(NotFound) as unknown_id:
            engine.respond_sync(9999, users["bob"].id, SyncDecision.ACCEPT)

        assert type(wrong_user.value) is type(unknown_id.value)
        assert engine.repo.syncs.get(sync.id).status == SyncStatus.PENDING

    def test_requester_cannot_accept_own_request(self, engine, users):
        sync = engine.request_sync(users["alice"].id, users["bob"].id)
        with pytest.raises(NotFound):
            engine.respond_sync(sync.id, users["alice"].id, SyncDecision.ACCEPT)

    def test_terminal_after_response(self, engine, users):
        sync = engine.request_sync(users["alice"].id, users["bob"].id)
        engine.respond_sync(sync.id, users["bob"].id, SyncDecision.REJECT)

        with pytest.raises(DomainError) as exc:
            engine.respond_sync(sync.id, users["bob"].id, SyncDecision.ACCEPT)
        assert exc.value.code == ALREADY_RESPONDED

    def test_unknown_decision(self, engine, users):
        sync = engine.request_sync(users["alice"].id, users["bob"].id)
        with pytest.raises(ValidationError):
            engine.respond_sync(sync.id, users["bob"].id, "maybe")


class TestRemove:

    @pytest.mark.parametrize("remover", ["alice", "bob"])
    def test_either_side_removes(self, engine, users, remover):
        sync = engine.request_sync(users["alice"].id, users["bob"].id)
        engine.respond_sync(sync.id, users["bob"].id, SyncDecision.ACCEPT)

        other = "bob" if remover == "alice" else "alice"
        removed = engine.remove_sync(users[remover].id, users[other].id)

        assert removed == 1
        assert peer_names(engine, users["alice"]) == set()
        assert peer_names(engine, users["bob"]) == set()

    def test_removes_all_statuses_both_directions(self, engine, users):
        a, b = users["alice"].id, users["bob"].id
        first = engine.request_sync(a, b)
        engine.respond_sync(first.id, b, SyncDecision.REJECT)
        engine.request_sync(b, a)
        engine.request_sync(a, b)

        assert engine.remove_sync(a, b) == 3
        assert engine.repo.syncs.between(a, b) == []

    def test_cancels_pending(self, engine, users):
        sync = engine.request_sync(users["alice"].id, users["bob"].id)
        engine.remove_sync(users["bob"].id, users["alice"].id)
        assert engine.sync.incoming(users["bob"].id) == []
        assert engine.repo.syncs.get(sync.id) is None

    def test_leaves_other_pairs(self, engine, users):
        keep = engine.request_sync(users["alice"].id, users["carol"].id)
        engine.request_sync(users["alice"].id, users["bob"].id)
        engine.remove_sync(users["alice"].id, users["bob"].id)
        assert engine.repo.syncs.exists(keep.id)


class TestSymmetry:

    def test_peers_symmetric(self, engine, users):
        a, b, c, d = (users[n].id for n in ("alice", "bob", "carol", "dave"))
        engine.respond_sync(engine.request_sync(a, b).id, b, SyncDecision.ACCEPT)
        engine.respond_sync(engine.request_sync(c, a).id, a, SyncDecision.ACCEPT)
        engine.respond_sync(engine.request_sync(d, b).id, b, SyncDecision.REJECT)
        engine.request_sync(c, d)

        for u in users.values():
            for v in engine.synced_peers(u.id):
                assert u.id in {p.id for p in engine.synced_peers(v.id)}
