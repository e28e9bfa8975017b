"""
Submission ledger - creation and review counting for submissions.
"""

from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from models import Submission
from repositories.base import Repository
from .errors import NotFound, ValidationError
from .locks import KeyedLocks


class SubmissionLedger:
    """
    Owns the submission lifecycle: PENDING until reviews_received
    reaches reviews_required, then COMPLETED for good.
    """

    def __init__(self, repo: Repository, locks: Optional[KeyedLocks] = None):
        self.repo = repo
        self.locks = locks or KeyedLocks()

    def create(self, assignment_id: int, author_id: int, content: str, reviews_required: int) -> Submission:
        if not self.repo.assignments.exists(assignment_id):
            raise NotFound(f"Assignment {assignment_id} not found")

        try:
            submission = Submission(
                assignment_id=assignment_id,
                author_id=author_id,
                content=content,
                reviews_required=reviews_required,
            )
        except PydanticValidationError as e:
            raise ValidationError(str(e)) from e

        submission = self.repo.submissions.insert(submission)
        print(f"[LEDGER] Submission {submission.id} opened ({reviews_required} reviews required)")
        return submission

    def get(self, submission_id: int) -> Submission:
        submission = self.repo.submissions.get(submission_id)
        if submission is None:
            raise NotFound(f"Submission {submission_id} not found")
        return submission

    def list_by_assignment(self, assignment_id: int) -> list[Submission]:
        return self.repo.submissions.for_assignment(assignment_id)

    def list_by_author(self, author_id: int) -> list[Submission]:
        return self.repo.submissions.for_author(author_id)

    def record_review(self, submission_id: int) -> Submission:
        """
        Count one review against the submission.

        Completes it once reviews_received reaches reviews_required.
        """
        with self.locks.submission(submission_id):
            submission = self.get(submission_id)
            completed_now = submission.record_review()
            self.repo.submissions.save(submission)

        if completed_now:
            self.repo.on_commit(print, f"[LEDGER] Submission {submission_id} completed "
                                       f"({submission.reviews_received}/{submission.reviews_required})")
        return submission
