"""Server configuration — reads settings from environment variables.

All settings have sensible defaults for local development.  In production
the values are typically overridden via env vars or a ``.env`` file.
"""

import os
from dataclasses import dataclass, field

from leak_db.config import database_url
from leak_intake.constants import DEFAULT_CHANNEL_URL
from leak_intake.gemini import DEFAULT_MODEL, DEFAULT_TIMEOUT_SECONDS


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class ServerSettings:
    """Immutable server configuration read from environment at startup."""

    # Network
    host: str = "0.0.0.0"
    port: int = 8080

    # CORS: comma-separated origins, or "*" for wide-open dev mode
    cors_origins: list[str] = field(default_factory=lambda: ["*"])

    # Logging
    log_level: str = "INFO"

    # Ledger database (either postgresql:// or postgresql+asyncpg://)
    database_url: str = field(default_factory=database_url)

    # Wizard flow name (full / compact) and catalog override directory
    wizard_flow: str = "full"
    catalog_dir: str | None = None

    # Generative service
    gemini_api_key: str | None = None
    gemini_model: str = DEFAULT_MODEL
    gemini_timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    relevance_check_enabled: bool = True

    # Unlock gate channel link
    channel_url: str = DEFAULT_CHANNEL_URL

    # EmailJS relay (all three required, otherwise notifications are off)
    emailjs_service_id: str | None = None
    emailjs_template_id: str | None = None
    emailjs_public_key: str | None = None

    # Operator console credential pair (password unset = console disabled)
    admin_username: str = "admin"
    admin_password: str | None = None

    # Trusted proxy secret: when set, every request that carries
    # X-User-ID must also carry a matching X-Proxy-Secret.
    trusted_proxy_secret: str | None = None

    @property
    def emailjs_configured(self) -> bool:
        return bool(self.emailjs_service_id and self.emailjs_template_id and self.emailjs_public_key)


def load_settings() -> ServerSettings:
    """Build settings from environment variables."""
    raw_origins = os.getenv("SERVER_CORS_ORIGINS", "*")
    origins = [o.strip() for o in raw_origins.split(",") if o.strip()]

    return ServerSettings(
        host=os.getenv("SERVER_HOST", "0.0.0.0"),
        port=int(os.getenv("SERVER_PORT", "8080")),
        cors_origins=origins,
        log_level=os.getenv("SERVER_LOG_LEVEL", "INFO").upper(),
        database_url=database_url(),
        wizard_flow=os.getenv("WIZARD_FLOW", "full"),
        catalog_dir=os.getenv("CATALOG_DIR") or None,
        gemini_api_key=os.getenv("GEMINI_API_KEY") or None,
        gemini_model=os.getenv("GEMINI_MODEL", DEFAULT_MODEL),
        gemini_timeout_seconds=float(os.getenv("GEMINI_TIMEOUT_SECONDS", str(DEFAULT_TIMEOUT_SECONDS))),
        relevance_check_enabled=_env_bool("RELEVANCE_CHECK_ENABLED", True),
        channel_url=os.getenv("CHANNEL_URL", DEFAULT_CHANNEL_URL),
        emailjs_service_id=os.getenv("EMAILJS_SERVICE_ID") or None,
        emailjs_template_id=os.getenv("EMAILJS_TEMPLATE_ID") or None,
        emailjs_public_key=os.getenv("EMAILJS_PUBLIC_KEY") or None,
        admin_username=os.getenv("ADMIN_USERNAME", "admin"),
        admin_password=os.getenv("ADMIN_PASSWORD") or None,
        trusted_proxy_secret=os.getenv("TRUSTED_PROXY_SECRET") or None,
    )
