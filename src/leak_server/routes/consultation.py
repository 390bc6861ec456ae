"""Consultation endpoint — turns a visitor into a lead.

The phone number is auto-formatted before validation.  When the e-mail
relay fails the lead is still saved, but the caller receives 502 with the
generic submission error.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from leak_intake.constants import MSG_SUBMISSION_OK
from leak_intake.ledger import LeadLedger
from leak_intake.models.lead import Lead
from leak_intake.navigation import Screen
from leak_intake.wizard import SessionRegistry

from leak_server.dependencies import get_db, get_ledger, get_registry, get_user_id

router = APIRouter(tags=["consultation"])


class ConsultationRequest(BaseModel):
    region: str
    phone: str


class ConsultationResponse(BaseModel):
    lead: Lead
    message: str


@router.post("/consultations", status_code=201)
async def submit_consultation(
    body: ConsultationRequest,
    user_id: str = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
    ledger: LeadLedger = Depends(get_ledger),
    registry: SessionRegistry = Depends(get_registry),
) -> ConsultationResponse:
    lead = await ledger.submit(db, region=body.region, phone=body.phone)

    # A successful submission returns the user to the landing screen.
    session = registry.find(user_id)
    if session is not None:
        session.open_screen(Screen.LANDING)

    return ConsultationResponse(lead=lead, message=MSG_SUBMISSION_OK)
