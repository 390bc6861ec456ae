"""Async key/value repository over the ``kv_store`` table.

All methods accept an ``AsyncSession`` so the caller controls transaction
boundaries.  Writes ``flush()`` but never ``commit()``.
"""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from leak_db.models.kv import KeyValueEntry


class KeyValueRepository:
    """Read and overwrite whole JSONB documents by key."""

    async def get(self, db: AsyncSession, key: str) -> Any | None:
        """Return the stored value, or ``None`` if the key is absent."""
        row = await db.get(KeyValueEntry, key, populate_existing=True)
        return row.value if row is not None else None

    async def put(self, db: AsyncSession, key: str, value: Any) -> None:
        """Insert or fully replace the value under ``key``."""
        now = datetime.now(timezone.utc)
        row = await db.get(KeyValueEntry, key)
        if row is None:
            db.add(KeyValueEntry(key=key, value=value, updated_at=now))
        else:
            row.value = value
            row.updated_at = now
        await db.flush()
