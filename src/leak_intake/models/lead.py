"""Lead model — a consultation request awaiting operator triage."""

from __future__ import annotations

import enum
import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, Field


class LeadStatus(str, enum.Enum):
    """Operator-driven lifecycle of a lead.

    ``deleted`` is a soft-delete tag; leads are never physically removed.
    """

    UNCONFIRMED = "unconfirmed"
    IN_PROGRESS = "in_progress"
    DONE = "done"
    DELETED = "deleted"


class Lead(BaseModel):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    region: str
    phone: str
    status: LeadStatus = LeadStatus.UNCONFIRMED
