"""Analysis, report and unlock endpoints.

``POST /analysis`` runs the pipeline synchronously within the request and
returns the outcome.  A second call while one is in flight gets 409.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from leak_intake.models.session import AnalysisOutcome, ReportView
from leak_intake.wizard import WizardSession

from leak_server.dependencies import get_session

router = APIRouter(prefix="/sessions/current", tags=["analysis"])


class ChannelLink(BaseModel):
    """Response for POST /unlock/channel."""
    url: str
    channel_action_taken: bool


@router.post("/analysis")
async def start_analysis(
    session: WizardSession = Depends(get_session),
) -> AnalysisOutcome:
    """Run relevance check and report generation on the current answers.

    Zero photos is a 422 and no external call is made.  Relevance
    rejection and failure are returned as outcomes, not errors.
    """
    return await session.start_analysis()


@router.get("/report")
async def get_report(
    session: WizardSession = Depends(get_session),
) -> ReportView:
    """Stored report; premium sections are emptied while locked."""
    return session.report_view()


@router.post("/unlock/channel")
async def record_channel_click(
    session: WizardSession = Depends(get_session),
) -> ChannelLink:
    """Record the external channel action and return the link to open."""
    url = session.channel_click()
    return ChannelLink(url=url, channel_action_taken=session.gate.channel_action_taken)


@router.post("/unlock/confirm")
async def confirm_unlock(
    session: WizardSession = Depends(get_session),
) -> ReportView:
    """Unlock the report; 422 until the channel action was recorded."""
    return session.confirm_unlock()
