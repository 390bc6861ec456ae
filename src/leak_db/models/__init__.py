"""ORM models for leak_db."""

from leak_db.models.kv import Base, KeyValueEntry

__all__ = ["Base", "KeyValueEntry"]
