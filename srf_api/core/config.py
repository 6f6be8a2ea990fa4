"""
Configuration helpers for the forms backend.

Routers/services must not fetch os.environ directly; they call get_settings().
"""

from dataclasses import dataclass
from functools import lru_cache
import os


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    data_dir: str
    public_dir: str
    admin_id: str
    admin_password: str
    admin_password_hash: str
    admin_require_session: bool
    admin_session_ttl_seconds: int
    mirror_database_url: str
    sync_enabled: bool
    sync_interval_seconds: int
    form_rate_limit: int
    trust_proxy_headers: bool
    cors_origins: tuple[str, ...]
    log_level: str


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _bool(value: str | None, default: bool = False) -> bool:
        if value is None:
            return default
        return value.strip().lower() in {"1", "true", "yes", "on"}

    root = os.getcwd()
    origins = tuple(o.strip().rstrip("/") for o in (os.getenv("CORS_ORIGINS") or "").split(",") if o.strip())

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        data_dir=os.getenv("DATA_DIR") or os.path.join(root, "data"),
        public_dir=os.getenv("PUBLIC_DIR") or os.path.join(root, "public"),
        admin_id=os.getenv("ADMIN_ID", ""),
        admin_password=os.getenv("ADMIN_PASSWORD", ""),
        admin_password_hash=os.getenv("ADMIN_PASSWORD_HASH", ""),
        admin_require_session=_bool(os.getenv("ADMIN_REQUIRE_SESSION"), True),
        admin_session_ttl_seconds=max(60, _int(os.getenv("ADMIN_SESSION_TTL_SECONDS", "43200"), 43200)),
        mirror_database_url=(os.getenv("MIRROR_DATABASE_URL") or "").strip(),
        sync_enabled=_bool(os.getenv("SYNC_ENABLED"), True),
        sync_interval_seconds=max(1, _int(os.getenv("SYNC_INTERVAL_SECONDS", "300"), 300)),
        form_rate_limit=_int(os.getenv("FORM_RATE_LIMIT", "30"), 30),
        trust_proxy_headers=_bool(os.getenv("TRUST_PROXY_HEADERS"), False),
        cors_origins=origins,
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
    )
