"""
Submission - a piece of work moving through peer review.
"""

from enum import Enum
from pydantic import Field

from .base import BaseEntity


class SubmissionStatus(str, Enum):
    """Lifecycle of a submission. COMPLETED is terminal."""
    PENDING = "pending"
    COMPLETED = "completed"


class Submission(BaseEntity):
    """
    A submission against an assignment.

    reviews_required is a snapshot taken at creation time; later
    changes to the assignment do not affect it.
    """
    assignment_id: int
    author_id: int
    content: str = Field(min_length=1)
    status: SubmissionStatus = SubmissionStatus.PENDING
    reviews_received: int = Field(default=0, ge=0)
    reviews_required: int = Field(default=3, ge=1)

    @property
    def is_completed(self) -> bool:
        return self.status == SubmissionStatus.COMPLETED

    @property
    def needs_reviews(self) -> bool:
        return not self.is_completed and self.reviews_received < self.reviews_required

    def record_review(self) -> bool:
        """
        Count one more review.

        Returns True if this review is the one that completed the submission.
        Completion is never undone.
        """
        was_completed = self.is_completed
        self.reviews_received += 1
        if self.reviews_received >= self.reviews_required:
            self.status = SubmissionStatus.COMPLETED
        self.touch()
        return not was_completed and self.is_completed
