"""leak_db tests — URL handling, engine lifecycle, key/value repository.

No database is contacted: the engine is created lazily and never
connects, and the repository runs against an AsyncMock session.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.schema import CreateTable

from leak_db import engine as db_engine
from leak_db.config import DEFAULT_DATABASE_URL, async_url, database_url, sync_url
from leak_db.models import KeyValueEntry
from leak_db.repository import KeyValueRepository
from leak_server.config import load_settings


# =====================================================================
# URL handling
# =====================================================================


class TestDatabaseUrl:

    def test_default(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        assert database_url() == DEFAULT_DATABASE_URL

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@db:5432/leads")
        assert database_url() == "postgresql://u:p@db:5432/leads"

    def test_async_url_rewrites_plain_scheme(self):
        assert async_url("postgresql://u:p@db/leads") == "postgresql+asyncpg://u:p@db/leads"
        assert async_url("postgresql+asyncpg://u:p@db/leads") == "postgresql+asyncpg://u:p@db/leads"

    def test_sync_url_drops_async_driver(self):
        assert sync_url("postgresql+asyncpg://u:p@db/leads") == "postgresql://u:p@db/leads"
        assert sync_url("postgresql://u:p@db/leads") == "postgresql://u:p@db/leads"

    def test_server_settings_carry_url(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql+asyncpg://u:p@db/leads")
        assert load_settings().database_url == "postgresql+asyncpg://u:p@db/leads"


# =====================================================================
# Engine lifecycle
# =====================================================================


@pytest.mark.asyncio
async def test_init_engine_uses_given_url_once():
    await db_engine.dispose_engine()
    try:
        engine = db_engine.init_engine("postgresql://u:p@db:5432/leads")
        assert engine.url.drivername == "postgresql+asyncpg"
        assert engine.url.database == "leads"
        assert db_engine.init_engine("postgresql://other/elsewhere") is engine
        assert db_engine.get_engine() is engine
        assert db_engine.get_session_factory() is not None
    finally:
        await db_engine.dispose_engine()
    assert db_engine._engine is None


def test_kv_store_primary_key_name():
    ddl = str(CreateTable(KeyValueEntry.__table__).compile(dialect=postgresql.dialect()))
    assert "CONSTRAINT pk_kv_store PRIMARY KEY" in ddl


# =====================================================================
# Repository
# =====================================================================


class TestKeyValueRepository:

    @pytest.mark.asyncio
    async def test_get_missing_key(self):
        db = AsyncMock()
        db.get.return_value = None
        assert await KeyValueRepository().get(db, "leads") is None

    @pytest.mark.asyncio
    async def test_put_inserts_new_row(self):
        db = AsyncMock()
        db.add = MagicMock()
        db.get.return_value = None

        await KeyValueRepository().put(db, "leads", [{"id": "a"}])

        row = db.add.call_args.args[0]
        assert row.key == "leads"
        assert row.value == [{"id": "a"}]
        db.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_put_overwrites_existing_row(self):
        existing = KeyValueEntry(key="leads", value=[])
        db = AsyncMock()
        db.add = MagicMock()
        db.get.return_value = existing

        await KeyValueRepository().put(db, "leads", [{"id": "b"}])

        assert existing.value == [{"id": "b"}]
        assert existing.updated_at is not None
        db.add.assert_not_called()
