"""Async key/value storage for state kept on the user's device.

Mirrors the browser's string-keyed local storage: each key holds one text
value, and the list helpers store JSON arrays of strings.
"""

from __future__ import annotations

import json
import logging
import time
from typing import List, Optional

from utils.database_init import AsyncDatabaseInitializer

LOGGER = logging.getLogger(__name__)

IMAGES_KEY = "gemini-image-mixer-images"
DRAWINGS_KEY = "gemini-image-mixer-drawings"


class LocalStorageDAL:
    """Data access layer for the STORAGE table.

    The constructor accepts an `AsyncDatabaseInitializer` (or any object
    exposing an async `connection()` context manager that yields an
    `aiosqlite.Connection`).
    """

    def __init__(self, db_initializer: AsyncDatabaseInitializer) -> None:
        self._db = db_initializer

    async def get_item(self, key: str) -> Optional[str]:
        """Return the value stored under `key`, or None if absent."""
        async with self._db.connection() as conn:
            cur = await conn.execute("SELECT value FROM STORAGE WHERE key = ?", (key,))
            row = await cur.fetchone()
            return row[0] if row else None

    async def set_item(self, key: str, value: str) -> None:
        """Insert or replace the value stored under `key`."""
        async with self._db.connection() as conn:
            await conn.execute(
                "INSERT INTO STORAGE (key, value, updated_at) VALUES (?, ?, ?) "
                "ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at",
                (key, value, int(time.time())),
            )
            await conn.commit()

    async def remove_item(self, key: str) -> bool:
        """Delete `key`. Returns True if a row was deleted."""
        async with self._db.connection() as conn:
            await conn.execute("DELETE FROM STORAGE WHERE key = ?", (key,))
            await conn.commit()
            cur = await conn.execute("SELECT changes()")
            changed = await cur.fetchone()
            return bool(changed and changed[0] > 0)

    async def load_list(self, key: str) -> List[str]:
        """Return the JSON array of strings stored under `key`.

        Missing keys, malformed JSON and non-list values all yield an empty
        list; non-string entries are dropped. Problems are logged, not raised.
        """
        raw = await self.get_item(key)
        if raw is None:
            return []
        try:
            value = json.loads(raw)
        except json.JSONDecodeError as exc:
            LOGGER.error("Failed to load %s from storage: %s", key, exc)
            return []
        if not isinstance(value, list):
            LOGGER.error("Stored %s is not a list; ignoring it", key)
            return []
        items = [item for item in value if isinstance(item, str)]
        if len(items) != len(value):
            LOGGER.warning("Dropped %d non-string entries from %s", len(value) - len(items), key)
        return items

    async def save_list(self, key: str, items: List[str]) -> None:
        """Store `items` under `key` as a JSON array."""
        await self.set_item(key, json.dumps(list(items)))
