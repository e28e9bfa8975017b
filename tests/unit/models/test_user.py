"""Unit tests for User model."""

import pytest
from pydantic import ValidationError

from models import User, level_for


class TestLevelFor:
    """Level is a pure function of experience."""

    @pytest.mark.parametrize("xp,level", [
        (0, 1),
        (999, 1),
        (1000, 2),
        (1999, 2),
        (2500, 3),
    ])
    def test_level_boundaries(self, xp, level):
        assert level_for(xp) == level

    def test_custom_step(self):
        assert level_for(250, experience_per_level=100) == 3


class TestUser:
    """Test User model."""

    def test_create_defaults(self):
        user = User(username="alice")
        assert user.id is None
        assert user.points == 0
        assert user.total_experience == 0
        assert user.level == 1
        assert user.role == "student"

    def test_username_stripped(self):
        assert User(username="  alice ").username == "alice"

    def test_blank_username_rejected(self):
        with pytest.raises(ValidationError):
            User(username="   ")

    def test_negative_points_rejected(self):
        with pytest.raises(ValidationError):
            User(username="alice", points=-1)

    def test_add_points(self):
        user = User(username="alice")
        user.add_points(10)
        user.add_points(15)
        assert user.points == 25

    def test_add_points_rejects_negative(self):
        user = User(username="alice", points=5)
        with pytest.raises(ValueError):
            user.add_points(-1)
        assert user.points == 5

    def test_add_experience_recomputes_level(self):
        user = User(username="alice", total_experience=950)
        user.add_experience(80)
        assert user.total_experience == 1030
        assert user.level == 2

    def test_add_experience_rejects_negative(self):
        user = User(username="alice")
        with pytest.raises(ValueError):
            user.add_experience(-20)

    def test_touch_on_change(self):
        user = User(username="alice")
        original = user.updated_at
        user.add_points(1)
        assert user.updated_at >= original

    def test_ignores_unknown_fields(self):
        """Older data files may carry extra fields - should not fail."""
        user = User(username="alice", password="hunter2")
        assert not hasattr(user, "password")
