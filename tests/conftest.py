from __future__ import annotations

import dataclasses
import sys
from pathlib import Path

import pytest

# Makes the srf_api package importable when running tests from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from srf_api.core import config as core_config  # noqa: E402
from srf_api.core.rate_limiter import reset_limits  # noqa: E402
from srf_api.db import models  # noqa: E402
from srf_api.db import session as db_session  # noqa: E402


@pytest.fixture(autouse=True)
def _clean_limits():
    reset_limits()
    yield
    reset_limits()


@pytest.fixture()
def make_settings(tmp_path, monkeypatch):
    """Build Settings rooted in tmp_path; keyword overrides replace fields."""
    monkeypatch.setenv("DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("PUBLIC_DIR", str(tmp_path / "public"))
    monkeypatch.setenv("ADMIN_ID", "admin@srf")
    monkeypatch.setenv("ADMIN_PASSWORD", "s3cret")
    monkeypatch.delenv("ADMIN_PASSWORD_HASH", raising=False)
    monkeypatch.delenv("MIRROR_DATABASE_URL", raising=False)
    core_config.get_settings.cache_clear()

    def _make(**overrides):
        return dataclasses.replace(core_config.get_settings(), **overrides)

    yield _make
    core_config.get_settings.cache_clear()


@pytest.fixture()
def mirror_db(tmp_path, monkeypatch):
    """Temporary SQLite mirror; caches are reset so the engine re-reads env."""
    db_file = tmp_path / "mirror.db"
    monkeypatch.setenv("MIRROR_DATABASE_URL", f"sqlite:///{db_file}")
    core_config.get_settings.cache_clear()
    db_session.reset_engine()

    engine = db_session.get_engine()
    models.Base.metadata.drop_all(bind=engine)
    models.Base.metadata.create_all(bind=engine)

    yield db_file

    models.Base.metadata.drop_all(bind=engine)
    db_session.reset_engine()
    core_config.get_settings.cache_clear()
