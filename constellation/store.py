"""Key-value state stores backing progress and view state.

Values are plain strings, the same shape browser ``localStorage`` offers, so the
Python stores and the generated map page agree on keys and encodings.
"""

import abc
import logging
import sqlite3
from pathlib import Path

from constellation.config import Config

logger = logging.getLogger(__name__)

VIEW_X_KEY = "viewTransform.x"
VIEW_Y_KEY = "viewTransform.y"
VIEW_SCALE_KEY = "viewTransform.scale"
VISITED_KEY = "visitedPages"

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS state (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL DEFAULT (datetime('now'))
);
"""


class StateStore(abc.ABC):
    """Base class for persisted key-value state."""

    available: bool = True

    @abc.abstractmethod
    def get(self, key: str) -> str | None:
        ...

    @abc.abstractmethod
    def set(self, key: str, value: str) -> None:
        ...

    @abc.abstractmethod
    def delete(self, key: str) -> None:
        ...

    @abc.abstractmethod
    def clear(self) -> None:
        """Remove every key."""
        ...


class MemoryStateStore(StateStore):
    """In-process store; also counts writes so callers can assert on them."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})
        self.writes = 0

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = str(value)
        self.writes += 1

    def delete(self, key: str) -> None:
        self.data.pop(key, None)
        self.writes += 1

    def clear(self) -> None:
        self.data.clear()
        self.writes += 1


class NullStateStore(StateStore):
    """Storage is unavailable (headless build, no local state)."""

    available = False

    def get(self, key: str) -> str | None:
        return None

    def set(self, key: str, value: str) -> None:
        pass

    def delete(self, key: str) -> None:
        pass

    def clear(self) -> None:
        pass


class SqliteStateStore(StateStore):
    """Single-file local store used by the command line."""

    def __init__(self, config: Config) -> None:
        self.db_path = config.resolved_db_path
        self._conn: sqlite3.Connection | None = None

    @property
    def conn(self) -> sqlite3.Connection:
        if self._conn is None:
            raise RuntimeError("State store not initialized. Call init_db() first.")
        return self._conn

    def init_db(self) -> None:
        """Create database and table."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(str(self.db_path))
        self._conn.row_factory = sqlite3.Row
        self._conn.executescript(SCHEMA_SQL)
        logger.info("State store initialized at %s", self.db_path)

    def close(self) -> None:
        if self._conn:
            self._conn.close()
            self._conn = None

    def get(self, key: str) -> str | None:
        row = self.conn.execute(
            "SELECT value FROM state WHERE key = ?", (key,)
        ).fetchone()
        return row["value"] if row else None

    def set(self, key: str, value: str) -> None:
        self.conn.execute(
            """INSERT INTO state (key, value) VALUES (?, ?)
               ON CONFLICT(key) DO UPDATE SET value = excluded.value,
                                              updated_at = datetime('now')""",
            (key, str(value)),
        )
        self.conn.commit()

    def delete(self, key: str) -> None:
        self.conn.execute("DELETE FROM state WHERE key = ?", (key,))
        self.conn.commit()

    def clear(self) -> None:
        self.conn.execute("DELETE FROM state")
        self.conn.commit()

    def keys(self) -> list[str]:
        rows = self.conn.execute("SELECT key FROM state ORDER BY key").fetchall()
        return [r["key"] for r in rows]


def open_store(db_path: Path | None, config: Config) -> StateStore:
    """Open the sqlite store, or a null store when no path can be used."""
    if db_path is not None:
        config = config.model_copy(update={"state": config.state.model_copy(update={"db_path": str(db_path)})})
    store = SqliteStateStore(config)
    try:
        store.init_db()
    except (sqlite3.OperationalError, OSError) as e:
        logger.warning("State store unavailable at %s (%s); progress will not persist", store.db_path, e)
        return NullStateStore()
    return store
