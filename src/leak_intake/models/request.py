"""Outbound payloads for the external collaborators.

``GenerationRequest`` is what the pipeline hands to a ``GenerativeClient``;
``NotificationPayload`` is the flat key/value body the ledger hands to a
``NotificationRelay``.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

from leak_intake.models.answers import EncodedImage


class GenerationRequest(BaseModel):
    """Free-text instruction plus inline images and an optional output schema."""

    model_config = ConfigDict(frozen=True)

    prompt: str
    images: tuple[EncodedImage, ...] = ()
    # OpenAPI-subset schema the service is asked to honour
    response_schema: Optional[dict[str, Any]] = None


class NotificationPayload(BaseModel):
    region: str
    phone: str
    # Human-readable submission timestamp
    date: str
    message: str
