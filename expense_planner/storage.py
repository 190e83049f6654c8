"""Lightweight persistence layer for the expense ledger."""

from __future__ import annotations

import json
import logging
import sqlite3
import threading
from pathlib import Path
from typing import List, Optional, Sequence

from .config import DEFAULT_STORAGE_KEY
from .models import LedgerEntry

logger = logging.getLogger("expense_planner.storage")


class KeyValueStore:
    """SQLite-backed durable key-value storage."""

    def __init__(self, db_path: str | Path = "expense_planner.sqlite") -> None:
        self.db_path = Path(db_path)
        self._lock = threading.Lock()
        self._connection = sqlite3.connect(self.db_path, check_same_thread=False)
        self._connection.row_factory = sqlite3.Row
        self._initialise()

    def _initialise(self) -> None:
        with self._connection:
            self._connection.execute(
                """
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL DEFAULT (datetime('now'))
                )
                """
            )

    def get(self, key: str) -> Optional[str]:
        cursor = self._connection.execute("SELECT value FROM kv WHERE key = ?", (key,))
        row = cursor.fetchone()
        return None if row is None else row["value"]

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._connection.execute(
                """
                INSERT INTO kv (key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = datetime('now')
                """,
                (key, value),
            )
            self._connection.commit()

    def close(self) -> None:
        self._connection.close()


class EntryStore:
    """Stores the whole ledger as one JSON array under a fixed key."""

    def __init__(self, kv: KeyValueStore, key: str = DEFAULT_STORAGE_KEY) -> None:
        self.kv = kv
        self.key = key

    def load_entries(self) -> List[LedgerEntry]:
        """Return the stored ledger, or an empty one when nothing usable is stored."""

        try:
            payload = self.kv.get(self.key)
        except sqlite3.Error:
            logger.warning("Could not read ledger from storage", exc_info=True)
            return []
        if payload is None:
            return []

        try:
            records = json.loads(payload)
            if not isinstance(records, list):
                raise ValueError("ledger payload is not a JSON array")
            return [LedgerEntry.from_mapping(record) for record in records]
        except (ValueError, TypeError, AttributeError) as exc:
            logger.warning("Discarding malformed ledger payload: %s", exc)
            return []

    def save_entries(self, entries: Sequence[LedgerEntry]) -> bool:
        """Rewrite the full ledger. Returns ``False`` when the write failed."""

        try:
            payload = json.dumps([entry.to_record() for entry in entries])
            self.kv.set(self.key, payload)
        except (TypeError, ValueError, sqlite3.Error):
            logger.warning("Could not persist ledger of %d entries", len(entries), exc_info=True)
            return False
        return True


__all__ = ["KeyValueStore", "EntryStore"]
