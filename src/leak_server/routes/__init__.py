"""Route registration — mounts all routers under ``/api/v1``."""

from fastapi import FastAPI

from leak_server.routes.admin import router as admin_router
from leak_server.routes.analysis import router as analysis_router
from leak_server.routes.consultation import router as consultation_router
from leak_server.routes.navigation import router as navigation_router
from leak_server.routes.photos import router as photos_router
from leak_server.routes.reference import router as reference_router
from leak_server.routes.sessions import router as sessions_router
from leak_server.routes.steps import router as steps_router

API_PREFIX = "/api/v1"


def register_routes(app: FastAPI) -> None:
    """Include all sub-routers under the versioned API prefix."""
    app.include_router(sessions_router, prefix=API_PREFIX)
    app.include_router(steps_router, prefix=API_PREFIX)
    app.include_router(photos_router, prefix=API_PREFIX)
    app.include_router(analysis_router, prefix=API_PREFIX)
    app.include_router(navigation_router, prefix=API_PREFIX)
    app.include_router(consultation_router, prefix=API_PREFIX)
    app.include_router(reference_router, prefix=API_PREFIX)
    app.include_router(admin_router, prefix=API_PREFIX)
