"""LeadLedger — consultation requests persisted as one list under a fixed key.

Every mutation re-reads the latest stored ledger, applies the change and
overwrites the whole list.  An ``asyncio.Lock`` serialises the
read-modify-write so interleaved requests never derive from a stale
snapshot.  Leads are stored newest first.

Submission order is: validate, persist (committed), then notify.  A relay
failure is logged and re-raised as ``NotificationDeliveryError`` even though
the lead is already saved.
"""

from __future__ import annotations

import asyncio
import logging
import re

from sqlalchemy.ext.asyncio import AsyncSession

from leak_db.repository import KeyValueRepository

from leak_intake.constants import (
    LEDGER_KEY,
    MSG_CONTACT_REQUIRED,
    MSG_PHONE_FORMAT,
    NOTIFICATION_MESSAGE,
    PHONE_PATTERN,
)
from leak_intake.errors import NotificationDeliveryError, ValidationError
from leak_intake.interfaces import NotificationRelay
from leak_intake.models.lead import Lead, LeadStatus
from leak_intake.models.request import NotificationPayload

logger = logging.getLogger(__name__)

_PHONE_RE = re.compile(PHONE_PATTERN)


def format_phone_number(value: str) -> str:
    """Strip non-digits and regroup as 3-4-4 (e.g. ``01012345678`` -> ``010-1234-5678``).

    Partial input is grouped as far as it goes; digits past the eleventh
    are dropped.
    """
    digits = re.sub(r"\D", "", value)
    if len(digits) <= 3:
        return digits
    if len(digits) <= 7:
        return f"{digits[:3]}-{digits[3:]}"
    return f"{digits[:3]}-{digits[3:7]}-{digits[7:11]}"


def validate_contact(region: str, phone: str) -> tuple[str, str]:
    """Normalise and validate consultation input.

    Returns:
        ``(region, phone)`` with region stripped and phone auto-formatted.

    Raises:
        ValidationError: empty region/phone or a phone outside the format.
    """
    region = (region or "").strip()
    if not region or not (phone or "").strip():
        raise ValidationError("Region and phone are required", user_message=MSG_CONTACT_REQUIRED)
    formatted = format_phone_number(phone)
    if not _PHONE_RE.match(formatted):
        raise ValidationError(f"Phone {formatted!r} does not match {PHONE_PATTERN}", user_message=MSG_PHONE_FORMAT)
    return region, formatted


class LeadLedger:
    """Append/mutate-only collection of consultation requests.

    Args:
        relay: notification relay called after each submission; ``None``
            skips notification entirely
    """

    def __init__(self, relay: NotificationRelay | None = None) -> None:
        self._relay = relay
        self._repo = KeyValueRepository()
        self._lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    async def submit(self, db: AsyncSession, *, region: str, phone: str) -> Lead:
        """Validate, persist a new ``unconfirmed`` lead, then notify.

        The lead is committed before the relay call so that it survives a
        relay failure.

        Raises:
            ValidationError: bad region or phone; nothing is stored.
            NotificationDeliveryError: the relay failed after the lead was
                saved.
        """
        region, phone = validate_contact(region, phone)
        lead = Lead(region=region, phone=phone)

        async with self._lock:
            leads = await self._load(db)
            leads.insert(0, lead)
            await self._save(db, leads)
            await db.commit()
        logger.info("Lead %s submitted (region=%s)", lead.id, region)

        if self._relay is not None:
            payload = NotificationPayload(
                region=region,
                phone=phone,
                date=lead.created_at.astimezone().strftime("%Y-%m-%d %H:%M:%S"),
                message=NOTIFICATION_MESSAGE,
            )
            try:
                await self._relay.send(payload)
            except Exception as exc:
                logger.error("Notification relay failed for lead %s: %s", lead.id, exc)
                raise NotificationDeliveryError(
                    f"Relay failed after lead {lead.id} was persisted: {exc}"
                ) from exc
        return lead

    # ------------------------------------------------------------------
    # Operator console
    # ------------------------------------------------------------------

    async def update_status(
        self,
        db: AsyncSession,
        lead_id: str,
        status: LeadStatus | str,
    ) -> Lead:
        """Set a lead's status.

        Raises:
            ValueError: if no lead has ``lead_id``.
        """
        status = LeadStatus(status)
        async with self._lock:
            leads = await self._load(db)
            for i, lead in enumerate(leads):
                if lead.id == lead_id:
                    leads[i] = lead.model_copy(update={"status": status})
                    await self._save(db, leads)
                    logger.info("Lead %s -> %s", lead_id, status.value)
                    return leads[i]
        raise ValueError(f"Lead '{lead_id}' not found")

    async def soft_delete(self, db: AsyncSession, lead_id: str) -> Lead:
        return await self.update_status(db, lead_id, LeadStatus.DELETED)

    async def list_leads(
        self,
        db: AsyncSession,
        status: LeadStatus | str | None = None,
    ) -> list[Lead]:
        """Leads newest first, filtered by status.

        With no filter, soft-deleted leads are left out.
        """
        leads = await self._load(db)
        if status is None:
            return [lead for lead in leads if lead.status is not LeadStatus.DELETED]
        status = LeadStatus(status)
        return [lead for lead in leads if lead.status is status]

    async def counts(self, db: AsyncSession) -> dict[str, int]:
        """Number of leads in each of the four status buckets."""
        result = {s.value: 0 for s in LeadStatus}
        for lead in await self._load(db):
            result[lead.status.value] += 1
        return result

    # ------------------------------------------------------------------
    # Persistence helpers
    # ------------------------------------------------------------------

    async def _load(self, db: AsyncSession) -> list[Lead]:
        raw = await self._repo.get(db, LEDGER_KEY)
        if not raw:
            return []
        return [Lead.model_validate(item) for item in raw]

    async def _save(self, db: AsyncSession, leads: list[Lead]) -> None:
        await self._repo.put(db, LEDGER_KEY, [lead.model_dump(mode="json") for lead in leads])
