"""
Admin use cases: credential check, session handling and the aggregated read.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from srf_api.core.config import Settings
from srf_api.core.security import constant_time_equals, verify_password
from srf_api.domain.collections import Collection
from srf_api.repositories.base import RecordStore
from srf_api.services.session_service import SessionStore

logger = logging.getLogger(__name__)


class AdminAuthError(Exception):
    """Raised when credentials or a session are rejected."""


@dataclass
class AdminService:
    store: RecordStore
    settings: Settings
    sessions: SessionStore = field(init=False)

    def __post_init__(self):
        self.sessions = SessionStore(self.settings.admin_session_ttl_seconds)
        if not self.settings.admin_id or not (self.settings.admin_password or self.settings.admin_password_hash):
            logger.warning("ADMIN_ID / ADMIN_PASSWORD not configured; admin login is disabled")

    def check_credentials(self, admin_id: Optional[str], password: Optional[str]) -> bool:
        """True only when both values match the configured pair."""
        expected_id = self.settings.admin_id
        if not expected_id or not isinstance(admin_id, str) or not isinstance(password, str):
            return False
        id_ok = constant_time_equals(admin_id, expected_id)
        if self.settings.admin_password_hash:
            password_ok = verify_password(password, self.settings.admin_password_hash)
        elif self.settings.admin_password:
            password_ok = constant_time_equals(password, self.settings.admin_password)
        else:
            password_ok = False
        return id_ok and password_ok

    def login(self, admin_id: Optional[str], password: Optional[str]) -> str:
        if not self.check_credentials(admin_id, password):
            logger.warning("Rejected admin login attempt")
            raise AdminAuthError("Invalid ID or password")
        logger.info("Admin login succeeded")
        return self.sessions.issue(admin_id or "")

    def logout(self, token: Optional[str]) -> None:
        self.sessions.revoke(token)

    def authorize(self, token: Optional[str]) -> None:
        if not self.settings.admin_require_session:
            return
        if not self.sessions.lookup(token):
            raise AdminAuthError("Not authenticated")

    def collect(self) -> dict:
        return {
            "donations": self.store.read_all(Collection.DONATIONS),
            "volunteer": self.store.read_all(Collection.VOLUNTEER),
            "newsletter": self.store.read_all(Collection.NEWSLETTER),
            "contact": self.store.read_all(Collection.CONTACT),
        }
