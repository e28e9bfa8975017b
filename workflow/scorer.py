"""
Review scorer - records a review and pays out for it.

One review is one unit of work:
    1. load the submission, refuse if it already has enough reviews
    2. classify the feedback (basic / quality) and price it
    3. persist the review
    4. count it on the submission ledger
    5. award PRP points to the reviewer
    6. if that review completed the submission, award the author
       experience from the mean rating of all its reviews

Steps 3-6 run inside one repository transaction while holding the
submission lock and the locks of both users involved, so either all
of them apply or none do.
"""

from dataclasses import dataclass
from typing import Optional

from config import WorkflowSettings, get_settings
from models import Review, QualityTier, Submission, User
from repositories.base import Repository
from .errors import (
    NotFound,
    ValidationError,
    DomainError,
    ALREADY_FULLY_REVIEWED,
    ALREADY_REVIEWED,
)
from .ledger import SubmissionLedger
from .locks import KeyedLocks, SUBMISSION, USER
from .progression import UserProgression


@dataclass
class ReviewOutcome:
    """Everything one scored review changed."""
    review: Review
    submission: Submission
    reviewer: User
    completed: bool = False
    author_experience: int = 0


class ReviewScorer:
    """Creates reviews and drives the ledger and progression from them."""

    def __init__(
        self,
        repo: Repository,
        ledger: SubmissionLedger,
        progression: UserProgression,
        locks: Optional[KeyedLocks] = None,
        settings: Optional[WorkflowSettings] = None,
    ):
        self.repo = repo
        self.ledger = ledger
        self.progression = progression
        self.locks = locks or ledger.locks
        self.settings = settings or get_settings()

    # === Pricing ===

    def classify(self, feedback: str) -> tuple[QualityTier, int]:
        """Quality tier and points for a piece of feedback. Rating plays no part."""
        if len(feedback) >= self.settings.quality_feedback_length:
            return QualityTier.QUALITY, self.settings.quality_points
        return QualityTier.BASIC, self.settings.basic_points

    def completion_experience(self, ratings: list[int]) -> int:
        """floor(mean(ratings) * experience_per_rating_point)."""
        if not ratings:
            return 0
        # Integer form of the floor, no float rounding
        return sum(ratings) * self.settings.experience_per_rating_point // len(ratings)

    def validate(self, rating, feedback) -> str:
        """Check rating/feedback shape. Returns the stripped feedback."""
        s = self.settings
        if isinstance(rating, bool) or not isinstance(rating, int):
            raise ValidationError("Rating must be an integer")
        if not s.min_rating <= rating <= s.max_rating:
            raise ValidationError(f"Rating must be between {s.min_rating} and {s.max_rating}")
        if not isinstance(feedback, str):
            raise ValidationError("Feedback is required")
        feedback = feedback.strip()
        if len(feedback) < s.min_feedback_length:
            raise ValidationError(f"Feedback must be at least {s.min_feedback_length} characters")
        return feedback

    # === Scoring ===

    def score_review(self, submission_id: int, reviewer_id: int, rating: int, feedback: str) -> ReviewOutcome:
        feedback = self.validate(rating, feedback)

        # author_id never changes, so it is safe to read before locking
        author_id = self.ledger.get(submission_id).author_id
        if not self.repo.users.exists(reviewer_id):
            raise NotFound(f"User {reviewer_id} not found")

        keys = [(SUBMISSION, submission_id), (USER, reviewer_id), (USER, author_id)]
        with self.locks.hold(*keys), self.repo.transaction():
            submission = self.ledger.get(submission_id)

            if submission.reviews_received >= submission.reviews_required:
                raise DomainError(ALREADY_FULLY_REVIEWED, "This submission already has enough reviews")

            if not self.settings.allow_duplicate_reviews:
                existing = self.repo.reviews.for_submission(submission_id)
                if any(r.reviewer_id == reviewer_id for r in existing):
                    raise DomainError(ALREADY_REVIEWED, "You have already reviewed this submission")

            tier, points = self.classify(feedback)
            review = self.repo.reviews.insert(Review(
                submission_id=submission_id,
                reviewer_id=reviewer_id,
                rating=rating,
                feedback=feedback,
                quality_tier=tier,
                points_awarded=points,
            ))
            self.repo.on_commit(print, f"[REVIEW] Review {review.id} on submission {submission_id}: "
                                       f"rating={rating} tier={tier.value} points={points}")

            updated = self.ledger.record_review(submission_id)
            reviewer = self.progression.add_points(reviewer_id, points)

            outcome = ReviewOutcome(review=review, submission=updated, reviewer=reviewer)
            if updated.is_completed and not submission.is_completed:
                ratings = [r.rating for r in self.repo.reviews.for_submission(submission_id)]
                experience = self.completion_experience(ratings)
                self.progression.add_experience(submission.author_id, experience)
                outcome.completed = True
                outcome.author_experience = experience

        return outcome

    def submit_review(self, submission_id: int, reviewer_id: int, rating: int, feedback: str) -> Review:
        """Record a review and return it."""
        return self.score_review(submission_id, reviewer_id, rating, feedback).review
