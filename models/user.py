"""
User - a learner who submits work and reviews peers.
"""

from pydantic import Field

from .base import BaseEntity


def level_for(total_experience: int, experience_per_level: int = 1000) -> int:
    """Level is always derived from total experience."""
    return total_experience // experience_per_level + 1


class User(BaseEntity):
    """
    A platform user.

    points           - PRP points earned by reviewing
    total_experience - XP earned when own submissions complete
    level            - floor(total_experience / 1000) + 1
    """
    username: str = Field(min_length=1)
    bio: str = ""
    role: str = "student"

    points: int = Field(default=0, ge=0)
    total_experience: int = Field(default=0, ge=0)
    level: int = Field(default=1, ge=1)

    def add_points(self, delta: int) -> None:
        if delta < 0:
            raise ValueError("points can only grow")
        self.points += delta
        self.touch()

    def add_experience(self, delta: int, experience_per_level: int = 1000) -> None:
        """Grow experience and recompute the level from it."""
        if delta < 0:
            raise ValueError("experience can only grow")
        self.total_experience += delta
        self.level = level_for(self.total_experience, experience_per_level)
        self.touch()
