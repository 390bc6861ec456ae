"""Application factory and CLI entry point.

``create_app()`` builds the FastAPI application with:
  - Lifespan handler that loads the step catalog and builds the session
    registry, lead ledger and external clients once
  - CORS middleware
  - Global exception handlers (IntakeError by class, ValueError by keyword)
  - All API routes mounted under ``/api/v1``
  - A ``/health`` endpoint for readiness probes

The ``cli()`` function is the ``leak-server`` console-script entry point.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from leak_db.engine import dispose_engine, get_engine, init_engine
from leak_intake.catalog import StepCatalog
from leak_intake.errors import IntakeError
from leak_intake.gemini import GeminiClient
from leak_intake.interfaces import GenerativeClient, NotificationRelay
from leak_intake.ledger import LeadLedger
from leak_intake.relay import EmailJSRelay
from leak_intake.wizard import SessionRegistry

from leak_server.config import ServerSettings, load_settings
from leak_server.errors import (
    generic_error_handler,
    intake_error_handler,
    key_error_handler,
    value_error_handler,
)
from leak_server.routes import register_routes

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
# Lifespan: runs once at startup/shutdown
# ------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Initialise shared resources at startup, tear down on shutdown.

    Startup:
      1. Create the ledger database engine from ``settings.database_url``
      2. Load the YAML step catalog
      3. Build the generative client and notification relay (unless
         injected through ``create_app``)
      4. Build ``SessionRegistry`` and ``LeadLedger`` and stash them on
         ``app.state`` for dependency injection

    Shutdown:
      1. Dispose the database engine's connection pool
    """
    settings: ServerSettings = app.state.settings

    init_engine(settings.database_url)

    # --- Load catalog ---
    catalog = StepCatalog(catalog_dir=settings.catalog_dir)
    catalog.load()

    # --- External collaborators ---
    client: GenerativeClient | None = app.state.generative_client
    if client is None:
        client = GeminiClient(
            settings.gemini_api_key,
            model=settings.gemini_model,
            timeout_seconds=settings.gemini_timeout_seconds,
        )
        logger.info("GeminiClient ready (model=%s)", settings.gemini_model)

    relay: NotificationRelay | None = app.state.relay
    if relay is None and settings.emailjs_configured:
        relay = EmailJSRelay(
            service_id=settings.emailjs_service_id,
            template_id=settings.emailjs_template_id,
            public_key=settings.emailjs_public_key,
        )
    if relay is None:
        logger.warning("EmailJS is not configured; consultation notifications are disabled")

    app.state.catalog = catalog
    app.state.registry = SessionRegistry(
        catalog,
        client,
        flow=settings.wizard_flow,
        relevance_enabled=settings.relevance_check_enabled,
        channel_url=settings.channel_url,
    )
    app.state.ledger = LeadLedger(relay)

    yield

    # --- Shutdown ---
    await dispose_engine()
    logger.info("Database engine disposed")


# ------------------------------------------------------------------
# Factory
# ------------------------------------------------------------------

def create_app(
    settings: ServerSettings | None = None,
    *,
    generative_client: GenerativeClient | None = None,
    relay: NotificationRelay | None = None,
) -> FastAPI:
    """Build and return the configured FastAPI application.

    ``generative_client`` and ``relay`` replace the production clients
    built from settings.
    """
    if settings is None:
        settings = load_settings()

    # --- Configure logging ---
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app = FastAPI(
        title="Leak Intake API Server",
        description="REST API for the water-leak intake wizard and AI report",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Read by the lifespan handler
    app.state.settings = settings
    app.state.generative_client = generative_client
    app.state.relay = relay

    # --- CORS ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # --- Exception handlers ---
    app.add_exception_handler(IntakeError, intake_error_handler)
    app.add_exception_handler(ValueError, value_error_handler)
    app.add_exception_handler(KeyError, key_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    # --- Health check (outside /api/v1 prefix) ---
    @app.get("/health")
    async def health() -> dict:
        """Readiness probe — verifies DB connectivity."""
        try:
            engine = get_engine()
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return {"status": "ok"}
        except Exception as exc:
            logger.error("Health check failed: %s", exc)
            return {"status": "error", "detail": "database unavailable"}

    # --- Mount all API routes ---
    register_routes(app)

    return app


# ------------------------------------------------------------------
# Module-level ASGI export (for uvicorn leak_server.app:app)
# ------------------------------------------------------------------
app = create_app()


# ------------------------------------------------------------------
# CLI entry point
# ------------------------------------------------------------------

def cli() -> None:
    """Console-script entry point: ``leak-server``."""
    import uvicorn

    settings = load_settings()
    uvicorn.run(
        "leak_server.app:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        reload=False,
    )
