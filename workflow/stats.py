"""
Aggregate stats for dashboards.
"""

from models import UserStats, User
from repositories.base import Repository
from .errors import NotFound


def user_stats(repo: Repository, user_id: int) -> UserStats:
    """Progression plus submission/review counts for one user."""
    user = repo.users.get(user_id)
    if user is None:
        raise NotFound(f"User {user_id} not found")

    submissions = repo.submissions.for_author(user_id)
    reviews = repo.reviews.for_reviewer(user_id)
    average = sum(r.rating for r in reviews) / len(reviews) if reviews else 0.0

    return UserStats(
        user_id=user.id,
        username=user.username,
        points=user.points,
        level=user.level,
        total_experience=user.total_experience,
        submissions_count=len(submissions),
        completed_submissions=sum(1 for s in submissions if s.is_completed),
        reviews_count=len(reviews),
        average_rating_given=average,
    )


def leaderboard(repo: Repository, limit: int = 10) -> list[User]:
    """Users by PRP points, then experience."""
    users = repo.users.list()
    users.sort(key=lambda u: (-u.points, -u.total_experience, u.id))
    return users[:limit]
