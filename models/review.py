"""
Review - one reviewer's rating and feedback on a submission.
"""

from enum import Enum
from pydantic import Field

from .base import BaseEntity


class QualityTier(str, Enum):
    """Review classification by feedback length."""
    BASIC = "basic"
    QUALITY = "quality"


class Review(BaseEntity):
    """A review. Written once, never changed."""
    submission_id: int
    reviewer_id: int
    rating: int = Field(ge=1, le=5)
    feedback: str
    quality_tier: QualityTier = QualityTier.BASIC
    points_awarded: int = Field(default=0, ge=0)
