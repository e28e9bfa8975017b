"""
Repository layer - abstracts persistence.

Usage:
    from repositories import get_repository

    repo = get_repository()  # Returns configured backend
    user = repo.users.get(1)
    with repo.transaction():
        repo.users.save(user)

Backends are swappable via config.
"""

from pathlib import Path
from typing import Optional

from .base import Repository
from .memory_backend import MemoryRepository, IdSequence
from .json_backend import JsonRepository

# Default backend - can be changed via config
_backend: Optional[str] = None
_options: dict = {}
_instance: Optional[Repository] = None


def get_repository() -> Repository:
    """Get the configured repository instance."""
    global _instance

    if _instance is None:
        backend = _backend
        options = dict(_options)
        if backend is None:
            from config import get_settings
            settings = get_settings()
            backend = settings.store_backend
            options.setdefault("base_path", settings.data_dir)

        if backend == "memory":
            _instance = MemoryRepository()
        elif backend == "json":
            _instance = JsonRepository(base_path=options.get("base_path"))
        else:
            raise ValueError(f"Unknown backend: {backend}")

    return _instance


def configure_backend(backend: str, base_path: Optional[Path] = None) -> None:
    """Configure the repository backend."""
    global _backend, _options, _instance
    _backend = backend
    _options = {"base_path": base_path} if base_path else {}
    _instance = None  # Force re-initialization


__all__ = [
    "get_repository",
    "configure_backend",
    "Repository",
    "MemoryRepository",
    "JsonRepository",
    "IdSequence",
]
