"""Engine/session helpers for the mirror database."""
from __future__ import annotations

from contextlib import contextmanager
from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session

from srf_api.core.config import get_settings

Base = declarative_base()


class MirrorNotConfigured(RuntimeError):
    """Raised when the sync job runs without MIRROR_DATABASE_URL."""


@lru_cache
def get_engine():
    settings = get_settings()
    url = (settings.mirror_database_url or "").strip()
    if not url:
        raise MirrorNotConfigured("MIRROR_DATABASE_URL must be configured to sync submissions.")
    return create_engine(url, future=True, pool_pre_ping=True)


@lru_cache
def _get_sessionmaker():
    return sessionmaker(bind=get_engine(), autoflush=False, autocommit=False, future=True)


@contextmanager
def get_session() -> Session:
    session: Session = _get_sessionmaker()()
    try:
        yield session
    finally:
        session.close()


def reset_engine() -> None:
    """Dispose the cached engine so the next call re-reads settings."""
    if get_engine.cache_info().currsize:
        try:
            get_engine().dispose()
        except MirrorNotConfigured:
            pass
    get_engine.cache_clear()
    _get_sessionmaker.cache_clear()
