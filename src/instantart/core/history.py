"""Gallery history storage for InstantArt.

The gallery is intentionally simple:

- the whole history is one ordered list, newest first
- it is persisted as a single JSON snapshot under a named key
- every mutation rewrites the full snapshot; there is no partial merge

Where the snapshot lives is decided by a :class:`HistoryRepository`.  The
repository only stores and returns raw text under a key, so JSON parsing and
corruption handling stay in :class:`GalleryStore` no matter which backend is
in use:

- :class:`JsonFileHistoryRepository` writes ``<data_dir>/<key>.json``
- :class:`SqliteHistoryRepository` keeps snapshots in a small SQLite table
- :class:`InMemoryHistoryRepository` keeps them in a dict (tests, ephemeral runs)

Persistence is best-effort local state.  A missing or unreadable snapshot
loads as an empty gallery and never blocks generation.
"""

from __future__ import annotations

import json
import logging
import sqlite3
import warnings
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path

from instantart.core.config import InstantArtConfig
from instantart.core.errors import PersistenceWarning
from instantart.core.models import GeneratedImage

logger = logging.getLogger(__name__)


class HistoryRepository(ABC):
    """Key-value storage for serialised gallery snapshots."""

    @abstractmethod
    def load(self, key: str) -> str | None:
        """Return the stored snapshot text, or ``None`` if absent."""

    @abstractmethod
    def persist(self, key: str, snapshot: str) -> None:
        """Store ``snapshot`` under ``key``, replacing any previous value."""

    @abstractmethod
    def clear(self, key: str) -> None:
        """Remove the snapshot stored under ``key`` (no-op if absent)."""


class InMemoryHistoryRepository(HistoryRepository):
    """Dictionary-backed repository; contents vanish with the process."""

    def __init__(self) -> None:
        self._snapshots: dict[str, str] = {}

    def load(self, key: str) -> str | None:
        return self._snapshots.get(key)

    def persist(self, key: str, snapshot: str) -> None:
        self._snapshots[key] = snapshot

    def clear(self, key: str) -> None:
        self._snapshots.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._snapshots


class JsonFileHistoryRepository(HistoryRepository):
    """Stores each snapshot as ``<key>.json`` inside a directory."""

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def path_for(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def load(self, key: str) -> str | None:
        path = self.path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def persist(self, key: str, snapshot: str) -> None:
        self.path_for(key).write_text(snapshot, encoding="utf-8")

    def clear(self, key: str) -> None:
        self.path_for(key).unlink(missing_ok=True)


class SqliteHistoryRepository(HistoryRepository):
    """Stores snapshots in an SQLite table keyed by snapshot name."""

    def __init__(self, db_path: Path) -> None:
        """Initialize the snapshot database.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._initialize_db()
        logger.info(f"Initialized history database at {self.db_path}")

    def _initialize_db(self) -> None:
        """Create database schema if it doesn't exist."""
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS snapshots (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
                """)
            conn.commit()

    def load(self, key: str) -> str | None:
        with sqlite3.connect(self.db_path) as conn:
            row = conn.execute("SELECT value FROM snapshots WHERE key = ?", (key,)).fetchone()
        return row[0] if row else None

    def persist(self, key: str, snapshot: str) -> None:
        with sqlite3.connect(self.db_path) as conn:
            # INSERT OR REPLACE overwrites the previous snapshot in one statement
            conn.execute(
                """
                INSERT OR REPLACE INTO snapshots (key, value, updated_at)
                VALUES (?, ?, ?)
                """,
                (key, snapshot, datetime.now().isoformat()),
            )
            conn.commit()

    def clear(self, key: str) -> None:
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("DELETE FROM snapshots WHERE key = ?", (key,))
            conn.commit()


def create_history_repository(config: InstantArtConfig) -> HistoryRepository:
    """Build the repository selected by ``config.history_backend``."""
    if config.history_backend == "sqlite":
        return SqliteHistoryRepository(config.data_dir / "instantart.db")
    if config.history_backend == "memory":
        return InMemoryHistoryRepository()
    return JsonFileHistoryRepository(config.data_dir)


# ---------------------------------------------------------------------------
# Pure history operations.
# ---------------------------------------------------------------------------


def prepend(history: list[GeneratedImage], item: GeneratedImage) -> list[GeneratedImage]:
    """Return a new history with ``item`` ahead of all existing entries.

    Raises:
        ValueError: If an entry with the same id is already present.
    """
    if any(entry.id == item.id for entry in history):
        raise ValueError(f"Duplicate gallery id: {item.id}")
    return [item, *history]


def select_current(history: list[GeneratedImage], image_id: str | None) -> GeneratedImage | None:
    """Return the entry with ``image_id``, or ``None`` when there is none."""
    if image_id is None:
        return None
    return next((entry for entry in history if entry.id == image_id), None)


class GalleryStore:
    """Loads, mutates and persists the gallery history.

    Every mutating method persists the full resulting history before
    returning it, so the snapshot and the in-memory list never diverge.
    Read-only operations never write.
    """

    def __init__(self, repository: HistoryRepository, key: str = "instantArt_history") -> None:
        self.repository = repository
        self.key = key

    def load(self) -> list[GeneratedImage]:
        """Load the persisted history.

        The snapshot is accepted only as a whole.  If it is not valid JSON,
        not a list, contains an entry that cannot be rebuilt, or repeats an
        id, it is treated as absent: a :class:`PersistenceWarning` is issued
        and an empty history is returned.  Storage errors are handled the
        same way.

        Returns:
            History entries in persisted order (newest first).
        """
        try:
            raw = self.repository.load(self.key)
        except (OSError, UnicodeDecodeError, sqlite3.Error) as e:
            self._report_corrupt(f"could not read snapshot: {e}")
            return []

        if raw is None:
            return []

        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as e:
            self._report_corrupt(f"invalid JSON: {e}")
            return []

        if not isinstance(payload, list):
            self._report_corrupt(f"expected a list, got {type(payload).__name__}")
            return []

        history: list[GeneratedImage] = []
        seen: set[str] = set()
        for index, entry in enumerate(payload):
            if not isinstance(entry, dict):
                self._report_corrupt(f"entry {index} is not an object")
                return []
            try:
                image = GeneratedImage.from_dict(entry)
            except (KeyError, TypeError, ValueError) as e:
                self._report_corrupt(f"entry {index} is invalid: {e!r}")
                return []
            if image.id in seen:
                self._report_corrupt(f"duplicate id {image.id}")
                return []
            seen.add(image.id)
            history.append(image)

        logger.debug(f"Loaded {len(history)} gallery entries from '{self.key}'")
        return history

    def persist(self, history: list[GeneratedImage]) -> None:
        """Serialise ``history`` and overwrite the stored snapshot."""
        snapshot = json.dumps([entry.to_dict() for entry in history], indent=2)
        self.repository.persist(self.key, snapshot)
        logger.debug(f"Persisted {len(history)} gallery entries to '{self.key}'")

    def add(self, history: list[GeneratedImage], item: GeneratedImage) -> list[GeneratedImage]:
        """Prepend ``item`` and persist the result."""
        updated = prepend(history, item)
        self.persist(updated)
        return updated

    def clear(self) -> list[GeneratedImage]:
        """Remove the stored snapshot entirely and return an empty history."""
        self.repository.clear(self.key)
        logger.info(f"Cleared gallery snapshot '{self.key}'")
        return []

    def _report_corrupt(self, reason: str) -> None:
        logger.warning(f"Ignoring gallery snapshot '{self.key}': {reason}")
        warnings.warn(
            f"Gallery snapshot '{self.key}' is unreadable and was ignored ({reason})",
            PersistenceWarning,
            stacklevel=3,
        )
