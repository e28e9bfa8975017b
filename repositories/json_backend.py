"""
JSON file backend - stores each collection as one JSON file.

Directory structure:
    {data_dir}/
        users.json        - {"next_id": N, "records": [...]}
        assignments.json
        submissions.json
        reviews.json
        syncs.json
        events.json
        slots.json

Records live in memory (see memory_backend) and a collection file is
rewritten whenever a unit of work touching it commits.
"""

import json
import threading
from pathlib import Path
from typing import Callable, Optional

from pydantic import ValidationError as PydanticValidationError

from config import DATA_DIR
from .memory_backend import MemoryRepository, MemoryCollection, JournalEntry


class WriteQueue:
    """Thread-safe write serialization."""

    def __init__(self):
        self._lock = threading.Lock()

    def write_json(self, path: Path, build: Callable[[], dict]) -> None:
        """
        Atomic JSON write.

        build() runs under the write lock, so the last file written
        always holds the newest state.
        """
        with self._lock:
            data = build()
            temp = path.with_suffix(".json.tmp")
            with open(temp, "w") as f:
                json.dump(data, f, indent=2, default=str)
            temp.replace(path)


_write_queue = WriteQueue()


class JsonRepository(MemoryRepository):
    """JSON file backend implementation."""

    def __init__(self, base_path: Optional[Path] = None):
        super().__init__()
        self._base_path = Path(base_path or DATA_DIR)
        self._base_path.mkdir(parents=True, exist_ok=True)
        for collection in self.collections():
            self._load_collection(collection)

    @property
    def base_path(self) -> Path:
        return self._base_path

    def _collection_file(self, collection: MemoryCollection) -> Path:
        return self._base_path / f"{collection.name}.json"

    def _load_collection(self, collection: MemoryCollection) -> None:
        path = self._collection_file(collection)
        if not path.exists():
            return

        try:
            with open(path) as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            print(f"[WARN] Corrupt {path.name}: {e}")
            return

        if not isinstance(data, dict):
            print(f"[WARN] Corrupt {path.name}: expected an object")
            return

        for index, raw in enumerate(data.get("records", [])):
            try:
                entity = collection.model.model_validate(raw)
            except PydanticValidationError as e:
                print(f"[WARN] Skipping record {index} in {path.name}: {e}")
                continue
            if entity.id is None:
                print(f"[WARN] Skipping record {index} in {path.name}: missing id")
                continue
            collection._load(entity)

        try:
            next_id = int(data.get("next_id", 1))
        except (TypeError, ValueError):
            print(f"[WARN] Bad next_id in {path.name}: {data.get('next_id')!r}")
            return
        collection.sequence.observe(next_id - 1)

    def _flush(self, collection: MemoryCollection) -> None:
        def build() -> dict:
            return {
                "next_id": collection.sequence.peek,
                "records": [e.model_dump(mode="json") for e in collection._snapshot()],
            }

        _write_queue.write_json(self._collection_file(collection), build)

    def _touched(self, entries: list[JournalEntry]) -> list[MemoryCollection]:
        seen = []
        for collection, _, _ in entries:
            if collection not in seen:
                seen.append(collection)
        return seen

    def _commit(self, entries: list[JournalEntry]) -> None:
        for collection in self._touched(entries):
            self._flush(collection)

    def _after_rollback(self, entries: list[JournalEntry]) -> None:
        # Another thread may have flushed our uncommitted writes
        for collection in self._touched(entries):
            self._flush(collection)
