"""
Review matcher - which submissions a user can review right now.
"""

from models import Submission
from repositories.base import Repository


class ReviewMatcher:
    """
    Read-only queue derivation.

    Nothing is cached or reserved: two reviewers can be shown the same
    submission, and the scorer settles who gets in first.
    """

    def __init__(self, repo: Repository):
        self.repo = repo

    def pending_for(self, user_id: int) -> list[Submission]:
        reviewed = {r.submission_id for r in self.repo.reviews.for_reviewer(user_id)}
        return [
            s for s in self.repo.submissions.list()
            if s.needs_reviews
            and s.author_id != user_id
            and s.id not in reviewed
        ]
