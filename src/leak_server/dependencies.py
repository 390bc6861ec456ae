"""FastAPI dependency injection — DB sessions, SDK singletons, identities.

Each request that touches the database gets a fresh ``AsyncSession`` via
``get_db()``.  The session is committed on success and rolled back on
error; the ledger additionally commits a new lead itself before notifying.
"""

import hmac
import secrets
from typing import AsyncGenerator

from fastapi import Depends, Header, HTTPException, Request
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from leak_db.engine import get_session_factory
from leak_intake.catalog import StepCatalog
from leak_intake.ledger import LeadLedger
from leak_intake.wizard import SessionRegistry, WizardSession


# ------------------------------------------------------------------
# Database session: transaction boundary lives here
# ------------------------------------------------------------------

async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield an async DB session; commit on success, rollback on error."""
    factory = get_session_factory()
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


# ------------------------------------------------------------------
# SDK singletons: stashed on app.state during lifespan
# ------------------------------------------------------------------

def get_registry(request: Request) -> SessionRegistry:
    return request.app.state.registry


def get_catalog(request: Request) -> StepCatalog:
    return request.app.state.catalog


def get_ledger(request: Request) -> LeadLedger:
    return request.app.state.ledger


# ------------------------------------------------------------------
# User identity: extracted from the X-User-ID header
# ------------------------------------------------------------------

async def get_user_id(
    request: Request,
    x_user_id: str | None = Header(None, alias="X-User-ID"),
    x_proxy_secret: str | None = Header(None, alias="X-Proxy-Secret"),
) -> str:
    """Extract user identity from the ``X-User-ID`` header.

    Returns 401 if the header is missing.  When ``TRUSTED_PROXY_SECRET`` is
    configured, the request must also carry a matching ``X-Proxy-Secret``.
    """
    if not x_user_id:
        raise HTTPException(status_code=401, detail="X-User-ID header is required")

    expected_secret: str | None = request.app.state.settings.trusted_proxy_secret
    if expected_secret:
        if not x_proxy_secret:
            raise HTTPException(status_code=403, detail="X-Proxy-Secret header is required")
        if not hmac.compare_digest(x_proxy_secret, expected_secret):
            raise HTTPException(status_code=403, detail="Invalid proxy secret")

    return x_user_id


async def get_session(
    user_id: str = Depends(get_user_id),
    registry: SessionRegistry = Depends(get_registry),
) -> WizardSession:
    """The caller's wizard session (404 via ValueError if none)."""
    return registry.get(user_id)


# ------------------------------------------------------------------
# Operator console: static credential pair over HTTP Basic
# ------------------------------------------------------------------

_basic = HTTPBasic(auto_error=False)


async def require_admin(
    request: Request,
    credentials: HTTPBasicCredentials | None = Depends(_basic),
) -> str:
    """Check HTTP Basic credentials against ``ADMIN_USERNAME``/``ADMIN_PASSWORD``.

    Raises 403 if the console is not configured, 401 on missing or wrong
    credentials.
    """
    settings = request.app.state.settings
    if not settings.admin_password:
        raise HTTPException(
            status_code=403,
            detail="Operator console is disabled (ADMIN_PASSWORD not configured)",
        )
    unauthorized = HTTPException(
        status_code=401,
        detail="Invalid operator credentials",
        headers={"WWW-Authenticate": "Basic"},
    )
    if credentials is None:
        raise unauthorized
    # Both comparisons always run.
    user_ok = secrets.compare_digest(credentials.username.encode(), settings.admin_username.encode())
    pass_ok = secrets.compare_digest(credentials.password.encode(), settings.admin_password.encode())
    if not (user_ok and pass_ok):
        raise unauthorized
    return credentials.username
