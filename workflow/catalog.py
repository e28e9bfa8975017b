"""
Catalog - user registration and the assignment list.
"""

import threading
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from config import WorkflowSettings, get_settings
from models import User, Assignment, Review
from repositories.base import Repository
from .errors import NotFound, ValidationError


class Catalog:
    """Lookups and creation for users, assignments and review history."""

    def __init__(self, repo: Repository, settings: Optional[WorkflowSettings] = None):
        self.repo = repo
        self.settings = settings or get_settings()
        self._register_lock = threading.Lock()

    # === Users ===

    def register_user(self, username: str, bio: str = "", role: str = "student") -> User:
        username = (username or "").strip()
        if not username:
            raise ValidationError("Username required")
        with self._register_lock:
            if self.repo.users.by_username(username) is not None:
                raise ValidationError(f"Username '{username}' is taken")
            user = self.repo.users.insert(User(username=username, bio=bio, role=role))

        print(f"[CATALOG] Registered {user.username} (id={user.id})")
        return user

    def get_user(self, user_id: int) -> User:
        user = self.repo.users.get(user_id)
        if user is None:
            raise NotFound(f"User {user_id} not found")
        return user

    def find_user(self, username: str) -> User:
        user = self.repo.users.by_username(username.strip())
        if user is None:
            raise NotFound(f"User '{username}' not found")
        return user

    def search_users(self, query: str) -> list[User]:
        return self.repo.users.search(query)

    # === Assignments ===

    def create_assignment(
        self,
        author_id: int,
        title: str,
        description: str = "",
        category: str = "general",
        difficulty: int = 1,
        required_review_count: Optional[int] = None,
    ) -> Assignment:
        if not self.repo.users.exists(author_id):
            raise NotFound(f"User {author_id} not found")
        if required_review_count is None:
            required_review_count = self.settings.default_required_reviews

        try:
            assignment = Assignment(
                author_id=author_id,
                title=title,
                description=description,
                category=category,
                difficulty=difficulty,
                required_review_count=required_review_count,
            )
        except PydanticValidationError as e:
            raise ValidationError(str(e)) from e

        return self.repo.assignments.insert(assignment)

    def get_assignment(self, assignment_id: int) -> Assignment:
        assignment = self.repo.assignments.get(assignment_id)
        if assignment is None:
            raise NotFound(f"Assignment {assignment_id} not found")
        return assignment

    def list_assignments(self) -> list[Assignment]:
        return sorted(self.repo.assignments.list(), key=lambda a: a.id)

    def assignments_by_category(self, category: str) -> list[Assignment]:
        return self.repo.assignments.by_category(category)

    def assignments_by_difficulty(self, difficulty: int) -> list[Assignment]:
        return self.repo.assignments.by_difficulty(difficulty)

    # === Reviews ===

    def reviews_for_submission(self, submission_id: int) -> list[Review]:
        return self.repo.reviews.for_submission(submission_id)

    def reviews_by_reviewer(self, reviewer_id: int) -> list[Review]:
        return self.repo.reviews.for_reviewer(reviewer_id)
