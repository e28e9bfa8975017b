"""Unit tests for ReviewMatcher."""

from workflow import ReviewMatcher


def ids(submissions):
    return {s.id for s in submissions}


class TestPendingFor:

    def test_excludes_own_submissions(self, engine, users, submission):
        assert submission.id not in ids(engine.pending_for(users["bob"].id))

    def test_includes_others(self, engine, users, submission):
        assert ids(engine.pending_for(users["carol"].id)) == {submission.id}

    def test_excludes_already_reviewed(self, engine, users, submission, long_feedback):
        engine.submit_review(submission.id, users["carol"].id, 4, long_feedback)
        assert submission.id not in ids(engine.pending_for(users["carol"].id))
        assert submission.id in ids(engine.pending_for(users["dave"].id))

    def test_excludes_completed(self, engine, users, assignment, long_feedback):
        submission = engine.ledger.create(assignment.id, users["bob"].id, "work", reviews_required=1)
        engine.submit_review(submission.id, users["carol"].id, 4, long_feedback)
        assert submission.id not in ids(engine.pending_for(users["dave"].id))

    def test_same_submission_offered_to_many(self, engine, users, submission):
        assert submission.id in ids(engine.pending_for(users["carol"].id))
        assert submission.id in ids(engine.pending_for(users["dave"].id))

    def test_recomputed_each_call(self, engine, users, assignment):
        matcher = ReviewMatcher(engine.repo)
        assert matcher.pending_for(users["carol"].id) == []
        submission = engine.submit_work(assignment.id, users["bob"].id, "late work")
        assert ids(matcher.pending_for(users["carol"].id)) == {submission.id}

    def test_never_offers_ineligible(self, engine, users, assignment, long_feedback):
        """No own, reviewed or completed submissions for anyone."""
        subs = [
            engine.ledger.create(assignment.id, users[name].id, f"work by {name}", reviews_required=2)
            for name in ("alice", "bob", "carol")
        ]
        engine.submit_review(subs[0].id, users["bob"].id, 3, long_feedback)
        engine.submit_review(subs[0].id, users["carol"].id, 5, long_feedback)
        engine.submit_review(subs[1].id, users["dave"].id, 4, long_feedback)

        for user in users.values():
            reviewed = {r.submission_id for r in engine.catalog.reviews_by_reviewer(user.id)}
            for s in engine.pending_for(user.id):
                assert s.author_id != user.id
                assert s.id not in reviewed
                assert not s.is_completed
