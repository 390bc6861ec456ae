"""Step endpoints — render the current step and apply interactions.

``POST /step`` takes ``{action, value}``:
  - ``select``: option id on a single-select step (auto-advances if flagged)
  - ``toggle``: option id on a multi-select step
  - ``text``: note text on a free-text step
  - ``continue``: advance, optionally with a field mapping as ``value``

Blocked advances come back as 422 with the user-facing message.
"""

from typing import Any, Literal

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from leak_intake.models.session import NavigationState, WizardStep
from leak_intake.wizard import WizardSession

from leak_server.dependencies import get_session

router = APIRouter(prefix="/sessions/current", tags=["steps"])


# ------------------------------------------------------------------
# Request models
# ------------------------------------------------------------------

class StepActionRequest(BaseModel):
    """Body for POST /sessions/current/step."""
    action: Literal["select", "toggle", "text", "continue"]
    value: Any = None


class HazardRequest(BaseModel):
    """Body for POST /sessions/current/hazards."""
    check: str
    checked: bool


# ------------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------------

@router.get("/step")
async def get_current_step(
    session: WizardSession = Depends(get_session),
) -> WizardStep:
    return session.current_step()


@router.post("/step")
async def submit_step_action(
    body: StepActionRequest,
    session: WizardSession = Depends(get_session),
) -> WizardStep:
    """Apply one interaction and return the (possibly new) current step."""
    return session.answer(body.action, body.value)


@router.post("/step/back")
async def step_back(
    session: WizardSession = Depends(get_session),
) -> WizardStep | NavigationState:
    """Previous step, or the previous screen when already on the first step."""
    return session.back()


@router.post("/hazards")
async def set_hazard(
    body: HazardRequest,
    session: WizardSession = Depends(get_session),
) -> WizardStep:
    return session.set_hazard(body.check, body.checked)
