"""
Workflow engine - every component wired over one repository.

The request layer holds a single engine and calls into it with the
authenticated caller's id.
"""

from datetime import datetime
from typing import Optional

from config import WorkflowSettings, get_settings
from models import Submission, Review, SyncRequest, SyncDecision, User, UserStats, CalendarEvent, TimeSlot
from repositories import get_repository
from repositories.base import Repository
from . import stats
from .calendar import CalendarPlanner
from .catalog import Catalog
from .errors import Unauthenticated
from .ledger import SubmissionLedger
from .locks import KeyedLocks
from .matcher import ReviewMatcher
from .progression import UserProgression
from .scorer import ReviewScorer, ReviewOutcome
from .sync import SyncHandshake


class WorkflowEngine:
    """Facade over every workflow component."""

    def __init__(self, repo: Optional[Repository] = None, settings: Optional[WorkflowSettings] = None):
        self.repo = repo or get_repository()
        self.settings = settings or get_settings()
        self.locks = KeyedLocks()

        self.catalog = Catalog(self.repo, self.settings)
        self.ledger = SubmissionLedger(self.repo, self.locks)
        self.progression = UserProgression(self.repo, self.locks, self.settings)
        self.scorer = ReviewScorer(self.repo, self.ledger, self.progression, self.locks, self.settings)
        self.matcher = ReviewMatcher(self.repo)
        self.sync = SyncHandshake(self.repo, self.locks)
        self.calendar = CalendarPlanner(self.repo, self.sync, self.locks)

    @staticmethod
    def require_caller(caller_id: Optional[int]) -> int:
        """The caller's user id, or Unauthenticated if there is none."""
        if caller_id is None:
            raise Unauthenticated("Login required")
        return caller_id

    # === Submissions ===

    def submit_work(self, assignment_id: int, author_id: int, content: str) -> Submission:
        """Create a submission, taking the review count from the assignment."""
        assignment = self.catalog.get_assignment(assignment_id)
        self.catalog.get_user(author_id)

        if self.settings.honor_assignment_review_count:
            required = assignment.required_review_count
        else:
            required = self.settings.default_required_reviews
        return self.ledger.create(assignment_id, author_id, content, required)

    # === Reviews ===

    def submit_review(self, submission_id: int, reviewer_id: int, rating: int, feedback: str) -> Review:
        return self.scorer.submit_review(submission_id, reviewer_id, rating, feedback)

    def score_review(self, submission_id: int, reviewer_id: int, rating: int, feedback: str) -> ReviewOutcome:
        return self.scorer.score_review(submission_id, reviewer_id, rating, feedback)

    def pending_for(self, user_id: int) -> list[Submission]:
        return self.matcher.pending_for(user_id)

    # === Stats ===

    def user_stats(self, user_id: int) -> UserStats:
        return stats.user_stats(self.repo, user_id)

    def leaderboard(self, limit: int = 10) -> list[User]:
        return stats.leaderboard(self.repo, limit)

    # === Calendar sync ===

    def request_sync(self, from_user_id: int, to_user_id: int) -> SyncRequest:
        return self.sync.request(from_user_id, to_user_id)

    def respond_sync(self, request_id: int, acting_user_id: int, decision: SyncDecision) -> SyncRequest:
        return self.sync.respond(request_id, acting_user_id, decision)

    def synced_peers(self, user_id: int) -> list[User]:
        return self.sync.synced_peers(user_id)

    def remove_sync(self, user_a: int, user_b: int) -> int:
        return self.sync.remove(user_a, user_b)

    # === Calendar ===

    def visible_events(
        self,
        user_id: int,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list[CalendarEvent]:
        return self.calendar.visible_events(user_id, start, end)

    def visible_slots(
        self,
        user_id: int,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list[TimeSlot]:
        return self.calendar.visible_slots(user_id, start, end)
