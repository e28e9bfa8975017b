"""
Review & progression workflow.

Usage:
    from workflow import WorkflowEngine

    engine = WorkflowEngine()
    review = engine.submit_review(submission_id, reviewer_id, rating=5, feedback="...")
    queue = engine.pending_for(reviewer_id)
"""

from .errors import WorkflowError, NotFound, ValidationError, DomainError, Unauthenticated
from .locks import KeyedLocks
from .ledger import SubmissionLedger
from .progression import UserProgression
from .scorer import ReviewScorer, ReviewOutcome
from .matcher import ReviewMatcher
from .sync import SyncHandshake
from .calendar import CalendarPlanner
from .catalog import Catalog
from .engine import WorkflowEngine

__all__ = [
    # Errors
    "WorkflowError",
    "NotFound",
    "ValidationError",
    "DomainError",
    "Unauthenticated",
    # Components
    "KeyedLocks",
    "SubmissionLedger",
    "UserProgression",
    "ReviewScorer",
    "ReviewOutcome",
    "ReviewMatcher",
    "SyncHandshake",
    "CalendarPlanner",
    "Catalog",
    "WorkflowEngine",
]
