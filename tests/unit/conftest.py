"""
Unit test fixtures.

All unit tests should be:
- Fast (< 100ms)
- Isolated (in-memory store, fresh per test)
- Deterministic (same result every time)
"""

import pytest

from repositories import MemoryRepository
from workflow import WorkflowEngine


@pytest.fixture
def repo():
    """Fresh in-memory repository."""
    return MemoryRepository()


@pytest.fixture
def engine(repo, settings):
    """Engine wired over the in-memory repository."""
    return WorkflowEngine(repo, settings)


@pytest.fixture
def users(engine):
    """Four registered users keyed by name."""
    return {
        name: engine.catalog.register_user(name)
        for name in ("alice", "bob", "carol", "dave")
    }


@pytest.fixture
def assignment(engine, users):
    """An assignment by alice needing the default 3 reviews."""
    return engine.catalog.create_assignment(
        author_id=users["alice"].id,
        title="Binary search",
        description="Implement binary search with tests",
        category="algorithms",
        difficulty=2,
    )


@pytest.fixture
def submission(engine, users, assignment):
    """A submission by bob against the assignment."""
    return engine.submit_work(assignment.id, users["bob"].id, "def search(xs, x): ...")
