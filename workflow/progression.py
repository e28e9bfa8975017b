"""
User progression - PRP points for reviewers, experience and levels for authors.

Both counters only ever grow, and the level is recomputed from
total experience on every change.
"""

from typing import Optional

from config import WorkflowSettings, get_settings
from models import User
from repositories.base import Repository
from .errors import NotFound, ValidationError
from .locks import KeyedLocks


class UserProgression:
    """Monotonic point/experience accounting over User records."""

    def __init__(
        self,
        repo: Repository,
        locks: Optional[KeyedLocks] = None,
        settings: Optional[WorkflowSettings] = None,
    ):
        self.repo = repo
        self.locks = locks or KeyedLocks()
        self.settings = settings or get_settings()

    def _load(self, user_id: int) -> User:
        user = self.repo.users.get(user_id)
        if user is None:
            raise NotFound(f"User {user_id} not found")
        return user

    def add_points(self, user_id: int, delta: int) -> User:
        if delta < 0:
            raise ValidationError("Points delta must be non-negative")

        with self.locks.user(user_id):
            user = self._load(user_id)
            user.add_points(delta)
            self.repo.users.save(user)

        self.repo.on_commit(print, f"[PROGRESSION] {user.username} +{delta} PRP (total {user.points})")
        return user

    def add_experience(self, user_id: int, delta: int) -> User:
        if delta < 0:
            raise ValidationError("Experience delta must be non-negative")

        with self.locks.user(user_id):
            user = self._load(user_id)
            previous_level = user.level
            user.add_experience(delta, self.settings.experience_per_level)
            self.repo.users.save(user)

        self.repo.on_commit(print, f"[PROGRESSION] {user.username} +{delta} XP (total {user.total_experience})")
        if user.level > previous_level:
            self.repo.on_commit(print, f"[PROGRESSION] {user.username} reached level {user.level}")
        return user
