"""Screen navigation endpoints — push a screen or go back."""

from typing import Literal

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from leak_intake.models.session import NavigationState
from leak_intake.wizard import WizardSession

from leak_server.dependencies import get_session

router = APIRouter(prefix="/sessions/current/navigation", tags=["navigation"])


class NavigateRequest(BaseModel):
    # LOADING, RESULT, WIZARD and ADMIN_DASHBOARD are entered by their own actions.
    screen: Literal["LANDING", "CONSULTATION", "SERVICE_GUIDE", "INSURANCE_GUIDE", "ADMIN_LOGIN"]


@router.post("")
async def navigate(
    body: NavigateRequest,
    session: WizardSession = Depends(get_session),
) -> NavigationState:
    return session.open_screen(body.screen)


@router.post("/back")
async def navigate_back(
    session: WizardSession = Depends(get_session),
) -> NavigationState:
    """Pop the back-stack; falls back to LANDING when empty."""
    return session.go_back()
