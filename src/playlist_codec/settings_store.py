"""Structured key-value stores with indexed arrays."""

from __future__ import annotations

from dataclasses import dataclass
import json
import logging
from pathlib import Path
import sqlite3
import threading
from typing import Any, Protocol

from playlist_codec.config import get_config_dir

logger = logging.getLogger(__name__)


class SettingsStore(Protocol):
    """Store interface used to persist playlists.

    Keys written between ``begin_*_array`` and ``end_array`` belong to the
    element selected with ``set_array_index``.
    """

    def begin_write_array(self, name: str, size: int = -1) -> None: ...

    def begin_read_array(self, name: str) -> int: ...

    def set_array_index(self, index: int) -> None: ...

    def set_value(self, key: str, value: Any) -> None: ...

    def value(self, key: str, default: Any = None) -> Any: ...

    def end_array(self) -> None: ...


@dataclass
class _ArrayCursor:
    name: str
    size: int
    writing: bool
    index: int = -1
    highest: int = -1


class ArraySettingsStore:
    """Array bookkeeping shared by the concrete stores.

    Elements are stored under ``<array>/<index + 1>/<key>`` and the array
    length under ``<array>/size``.
    """

    def __init__(self) -> None:
        self._array: _ArrayCursor | None = None

    def begin_write_array(self, name: str, size: int = -1) -> None:
        self._ensure_no_array()
        self._remove_group(f"{name}/")
        self._array = _ArrayCursor(name=name, size=size, writing=True)

    def begin_read_array(self, name: str) -> int:
        self._ensure_no_array()
        size = self._read(f"{name}/size")
        if not isinstance(size, int) or size < 0:
            size = 0
        self._array = _ArrayCursor(name=name, size=size, writing=False)
        return size

    def set_array_index(self, index: int) -> None:
        if self._array is None:
            raise RuntimeError("set_array_index called outside an array")
        if index < 0:
            raise IndexError(f"negative array index: {index}")
        self._array.index = index
        self._array.highest = max(self._array.highest, index)

    def set_value(self, key: str, value: Any) -> None:
        if self._array is not None and not self._array.writing:
            raise RuntimeError(f"array {self._array.name!r} is open for reading")
        self._write(self._full_key(key), value)

    def value(self, key: str, default: Any = None) -> Any:
        result = self._read(self._full_key(key))
        return default if result is None else result

    def end_array(self) -> None:
        array = self._array
        if array is None:
            raise RuntimeError("end_array called without an open array")
        self._array = None
        if array.writing:
            size = max(array.size, array.highest + 1)
            self._write(f"{array.name}/size", size)
        self._flush()

    def _full_key(self, key: str) -> str:
        array = self._array
        if array is None:
            return key
        if array.index < 0:
            raise RuntimeError(f"no index selected in array {array.name!r}")
        return f"{array.name}/{array.index + 1}/{key}"

    def _ensure_no_array(self) -> None:
        if self._array is not None:
            raise RuntimeError(f"array {self._array.name!r} is still open")

    def _read(self, key: str) -> Any:
        raise NotImplementedError

    def _write(self, key: str, value: Any) -> None:
        raise NotImplementedError

    def _remove_group(self, prefix: str) -> None:
        raise NotImplementedError

    def _flush(self) -> None:
        pass


class MemorySettingsStore(ArraySettingsStore):
    """Dictionary backed store, mostly for tests and short-lived sessions."""

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        super().__init__()
        self.data: dict[str, Any] = dict(data or {})

    def _read(self, key: str) -> Any:
        return self.data.get(key)

    def _write(self, key: str, value: Any) -> None:
        self.data[key] = value

    def _remove_group(self, prefix: str) -> None:
        for key in [key for key in self.data if key.startswith(prefix)]:
            del self.data[key]


def default_db_path(app_name: str = "playlist-codec") -> Path:
    try:
        base = get_config_dir(app_name)
    except OSError:
        base = Path.cwd() / ".playlist-codec"
        base.mkdir(parents=True, exist_ok=True)
    return base / "settings.db"


class SQLiteSettingsStore(ArraySettingsStore):
    """Store persisted in a SQLite ``settings`` table, values kept as JSON."""

    def __init__(self, db_path: Path | None = None) -> None:
        super().__init__()
        self._path = db_path or default_db_path()
        self._lock = threading.Lock()
        self._conn = sqlite3.connect(self._path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._apply_pragmas()
        self._ensure_schema()

    @property
    def path(self) -> Path:
        return self._path

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    def __enter__(self) -> SQLiteSettingsStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def keys(self) -> list[str]:
        with self._lock:
            rows = self._conn.execute(
                "SELECT key FROM settings ORDER BY key"
            ).fetchall()
        return [row["key"] for row in rows]

    def _read(self, key: str) -> Any:
        with self._lock:
            row = self._conn.execute(
                "SELECT value FROM settings WHERE key = ?",
                (key,),
            ).fetchone()
        if not row:
            return None
        try:
            return json.loads(row["value"])
        except json.JSONDecodeError:
            logger.warning("Ignoring corrupt settings value for %s", key)
            return None

    def _write(self, key: str, value: Any) -> None:
        with self._lock:
            self._conn.execute(
                """
                INSERT INTO settings (key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value
                """,
                (key, json.dumps(value)),
            )
            if self._array is None:
                self._conn.commit()

    def _remove_group(self, prefix: str) -> None:
        with self._lock:
            self._conn.execute(
                "DELETE FROM settings WHERE substr(key, 1, ?) = ?",
                (len(prefix), prefix),
            )

    def _flush(self) -> None:
        with self._lock:
            self._conn.commit()

    def _apply_pragmas(self) -> None:
        with self._lock:
            self._conn.execute("PRAGMA journal_mode = WAL")
            self._conn.execute("PRAGMA synchronous = NORMAL")
            self._conn.execute("PRAGMA busy_timeout = 3000")

    def _ensure_schema(self) -> None:
        with self._lock:
            self._conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS settings (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                );
                """
            )
            self._conn.commit()
