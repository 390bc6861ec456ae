"""leak_db — PostgreSQL persistence layer for the lead ledger.

This package provides the key/value ORM model, async engine factory, and
repository the SDK uses to read and overwrite the ledger.  It is designed
to be consumed by the FastAPI server through the SDK's ``LeadLedger``.
"""

from leak_db.engine import dispose_engine, get_engine, get_session_factory, init_engine
from leak_db.models.kv import KeyValueEntry
from leak_db.repository import KeyValueRepository

__all__ = [
    "KeyValueEntry",
    "KeyValueRepository",
    "dispose_engine",
    "get_engine",
    "get_session_factory",
    "init_engine",
]
