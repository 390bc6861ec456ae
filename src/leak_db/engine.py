"""Process-wide async engine for the ledger database.

``init_engine(url)`` is called once from the server lifespan with the
configured URL.  ``get_session_factory()`` falls back to ``DATABASE_URL``
when nothing was initialised (scripts, one-off tools).
"""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from leak_db.config import async_url, database_url

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def init_engine(url: str | None = None) -> AsyncEngine:
    """Create the engine and session factory; a second call is a no-op."""
    global _engine, _session_factory
    if _engine is None:
        _engine = create_async_engine(async_url(url or database_url()), pool_pre_ping=True)
        _session_factory = async_sessionmaker(_engine, expire_on_commit=False)
    return _engine


def get_engine() -> AsyncEngine:
    return init_engine()


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    init_engine()
    return _session_factory


async def dispose_engine() -> None:
    """Close pooled connections and forget the engine (app shutdown)."""
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _session_factory = None
