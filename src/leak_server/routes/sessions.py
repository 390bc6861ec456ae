"""Session management endpoints — create, get, tear down.

All endpoints require the ``X-User-ID`` header.  Each user has at most one
wizard session; creating a new one replaces the previous.
"""

from fastapi import APIRouter, Depends

from leak_intake.models.session import SessionInfo
from leak_intake.wizard import SessionRegistry, WizardSession

from leak_server.dependencies import get_registry, get_session, get_user_id

router = APIRouter(tags=["sessions"])


@router.post("/sessions", status_code=201)
async def create_session(
    user_id: str = Depends(get_user_id),
    registry: SessionRegistry = Depends(get_registry),
) -> SessionInfo:
    """Start a fresh wizard run on the first step.

    Any existing session for this user is torn down first.
    """
    return registry.create(user_id).info()


@router.get("/sessions/current")
async def get_current_session(
    session: WizardSession = Depends(get_session),
) -> SessionInfo:
    """Session info; 404 if the user has no session."""
    return session.info()


@router.delete("/sessions/current", status_code=204)
async def delete_current_session(
    user_id: str = Depends(get_user_id),
    registry: SessionRegistry = Depends(get_registry),
) -> None:
    registry.remove(user_id)
