"""
Stats models - read-only aggregates for dashboards.
"""

from pydantic import BaseModel


class UserStats(BaseModel):
    """
    Aggregate progression view for one user.

    Computed on demand, never stored.
    """
    user_id: int
    username: str
    points: int = 0
    level: int = 1
    total_experience: int = 0
    submissions_count: int = 0
    completed_submissions: int = 0
    reviews_count: int = 0
    average_rating_given: float = 0.0

    def to_dict(self) -> dict:
        """Export for API responses."""
        return {
            "prp_points": self.points,
            "skill_level": self.level,
            "total_xp": self.total_experience,
            "submissions_count": self.submissions_count,
            "completed_submissions": self.completed_submissions,
            "reviews_count": self.reviews_count,
            "average_rating": self.average_rating_given,
        }
