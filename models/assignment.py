"""
Assignment - a task posted by an author for others to submit against.
"""

from pydantic import Field

from .base import BaseEntity


class Assignment(BaseEntity):
    """An assignment. Immutable once created."""
    author_id: int
    title: str = Field(min_length=1)
    description: str = ""
    category: str = "general"
    difficulty: int = Field(default=1, ge=1)
    required_review_count: int = Field(default=3, ge=1)
