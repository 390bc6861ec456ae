"""Operator console endpoints — list, count and triage leads.

Protected by HTTP Basic against the static ``ADMIN_USERNAME`` /
``ADMIN_PASSWORD`` pair.  Returns 403 when the console is not configured,
401 on bad credentials.
"""

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from leak_intake.ledger import LeadLedger
from leak_intake.models.lead import Lead, LeadStatus

from leak_server.dependencies import get_db, get_ledger, require_admin

router = APIRouter(prefix="/admin", tags=["admin"])


class StatusUpdateRequest(BaseModel):
    """Body for PATCH /admin/leads/{lead_id}."""
    status: LeadStatus


@router.get("/leads")
async def list_leads(
    status: LeadStatus | None = Query(None),
    db: AsyncSession = Depends(get_db),
    ledger: LeadLedger = Depends(get_ledger),
    _admin: str = Depends(require_admin),
) -> list[Lead]:
    """Leads newest first in one status bucket (all but deleted if omitted)."""
    return await ledger.list_leads(db, status)


@router.get("/leads/counts")
async def lead_counts(
    db: AsyncSession = Depends(get_db),
    ledger: LeadLedger = Depends(get_ledger),
    _admin: str = Depends(require_admin),
) -> dict[str, int]:
    return await ledger.counts(db)


@router.patch("/leads/{lead_id}")
async def update_lead_status(
    lead_id: str,
    body: StatusUpdateRequest,
    db: AsyncSession = Depends(get_db),
    ledger: LeadLedger = Depends(get_ledger),
    _admin: str = Depends(require_admin),
) -> Lead:
    return await ledger.update_status(db, lead_id, body.status)


@router.delete("/leads/{lead_id}")
async def soft_delete_lead(
    lead_id: str,
    db: AsyncSession = Depends(get_db),
    ledger: LeadLedger = Depends(get_ledger),
    _admin: str = Depends(require_admin),
) -> Lead:
    """Tag the lead ``deleted``; it stays in the ledger."""
    return await ledger.soft_delete(db, lead_id)
