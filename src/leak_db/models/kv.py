"""KeyValueEntry ORM model — one JSONB document per fixed key.

The lead ledger lives here as a single serialized list under
``leakage_leads`` and is overwritten whole on every mutation.
"""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import MetaData, Text, text
from sqlalchemy.dialects.postgresql import JSONB, TIMESTAMP
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    # Primary keys are named pk_<table>.
    metadata = MetaData(naming_convention={"pk": "pk_%(table_name)s"})


class KeyValueEntry(Base):
    __tablename__ = "kv_store"

    key: Mapped[str] = mapped_column(Text, primary_key=True)
    value: Mapped[Any] = mapped_column(JSONB, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("now()"),
    )

    def __repr__(self) -> str:
        return f"<KeyValueEntry key={self.key!r} updated_at={self.updated_at}>"
