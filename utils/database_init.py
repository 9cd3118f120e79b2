"""On-device SQLite store backing the key/value storage layer."""

import asyncio
import os
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional, Union

import aiosqlite

DB_FILENAME = "storage.db"

STORAGE_SCHEMA = """
CREATE TABLE IF NOT EXISTS STORAGE (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at INTEGER
)
"""


def resolve_storage_dir(directory: Optional[Union[Path, str]] = None) -> Path:
    """
    Return the directory holding the storage database, creating it if needed.

    `directory` wins over the DATABASE_DIR environment variable.

    Raises:
        RuntimeError: If no directory is configured, the path is a file, or
            the directory cannot be created.
    """
    raw = str(directory) if directory is not None else os.getenv("DATABASE_DIR")
    if raw is None or not raw.strip():
        raise RuntimeError(
            "DATABASE_DIR must be set to a writable directory where saved "
            "images and drawings are kept."
        )

    storage_dir = Path(raw).expanduser()
    if storage_dir.exists() and not storage_dir.is_dir():
        raise RuntimeError(f"Storage path {storage_dir} is a file, not a directory.")

    try:
        storage_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise RuntimeError(f"Failed to create storage directory at {storage_dir}") from exc
    return storage_dir


class AsyncDatabaseInitializer:
    """
    Hands out connections to `<directory>/storage.db`.

    The STORAGE table is created on first use and existing rows are kept, so
    saved images and drawings survive restarts.
    """

    def __init__(self, directory: Optional[Union[Path, str]] = None) -> None:
        self.db_dir = resolve_storage_dir(directory)
        self.db_path = self.db_dir / DB_FILENAME
        self._ready = False
        self._ready_lock = asyncio.Lock()

    async def ensure_database(self) -> None:
        if self._ready:
            return
        async with self._ready_lock:
            if self._ready:
                return
            async with aiosqlite.connect(self.db_path) as db:
                await db.execute(STORAGE_SCHEMA)
                await db.commit()
            self._ready = True

    @asynccontextmanager
    async def connection(self) -> AsyncIterator[aiosqlite.Connection]:
        """Yield an `aiosqlite.Connection`; the table exists by the time it is used."""
        await self.ensure_database()
        conn = await aiosqlite.connect(self.db_path)
        try:
            yield conn
        finally:
            await conn.close()
