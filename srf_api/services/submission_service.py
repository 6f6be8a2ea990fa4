"""
Form submission use cases: validate, apply defaults, timestamp, append.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Mapping

from srf_api.domain.collections import MAX_EMAIL_LENGTH, PARCEL_PRICE, Collection, utc_timestamp
from srf_api.repositories.base import RecordStore, StorageError

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"^\s*([+-]?)(\d+)")
_MAX_DIGITS = 18

MAX_PARCEL_COUNT = 10_000
MAX_TOTAL_AMOUNT = 100_000_000


class SubmissionError(Exception):
    """Base class for submission failures."""


class ValidationError(SubmissionError):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


def parse_int(value: Any) -> int | None:
    """Leading-integer parse: "3", 3, 3.7 and "3 parcels" all give 3."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value == value and abs(value) != float("inf") else None
    match = _LEADING_INT.match(str(value))
    if not match:
        return None
    sign, digits = match.groups()
    digits = digits.lstrip("0") or "0"
    # Wider than any accepted amount; clamp instead of converting a huge string.
    number = int(digits) if len(digits) <= _MAX_DIGITS else 10**_MAX_DIGITS
    return -number if sign == "-" else number


def _text(payload: Mapping[str, Any], field: str) -> str:
    value = payload.get(field)
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _require(payload: Mapping[str, Any], fields: tuple[str, ...], message: str) -> None:
    missing = [f for f in fields if not _text(payload, f).strip()]
    if missing:
        logger.info("Rejected submission, missing fields: %s", ", ".join(missing))
        raise ValidationError(message)
    if len(_text(payload, "email")) > MAX_EMAIL_LENGTH:
        logger.info("Rejected submission, email longer than %d characters", MAX_EMAIL_LENGTH)
        raise ValidationError("Email address is too long.")


@dataclass
class SubmissionService:
    """Validates and stores the four kinds of form submissions."""

    store: RecordStore

    def donation_count(self) -> int:
        return self.store.count(Collection.DONATIONS)

    def submit_donation(self, payload: Mapping[str, Any]) -> tuple[dict, int]:
        _require(payload, ("name", "email", "phone"), "Name, email, and phone are required.")
        parcel_count = parse_int(payload.get("parcelCount"))
        if not parcel_count or parcel_count < 1:
            parcel_count = 1
        total = parse_int(payload.get("totalAmount")) or parcel_count * PARCEL_PRICE
        if parcel_count > MAX_PARCEL_COUNT or not -MAX_TOTAL_AMOUNT <= total <= MAX_TOTAL_AMOUNT:
            logger.info("Rejected donation, parcel count or amount out of range")
            raise ValidationError("Parcel count or amount is out of range.")
        entry = {
            "name": _text(payload, "name"),
            "email": _text(payload, "email"),
            "phone": _text(payload, "phone"),
            "parcelName": _text(payload, "parcelName"),
            "parcelCount": parcel_count,
            "totalAmount": total,
            "date": utc_timestamp(),
        }
        count = self.store.append(Collection.DONATIONS, entry)
        logger.info("Stored donation #%d (%d parcels, total %d)", count, parcel_count, total)
        return entry, count

    def submit_volunteer(self, payload: Mapping[str, Any]) -> dict:
        _require(
            payload,
            ("name", "email", "phone", "help"),
            "Name, email, phone, and how you want to help are required.",
        )
        entry = {
            "name": _text(payload, "name"),
            "email": _text(payload, "email"),
            "phone": _text(payload, "phone"),
            "help": _text(payload, "help"),
            "message": _text(payload, "message"),
            "date": utc_timestamp(),
        }
        self.store.append(Collection.VOLUNTEER, entry)
        return entry

    def subscribe_newsletter(self, payload: Mapping[str, Any]) -> bool:
        _require(payload, ("email",), "Email is required.")
        created = self.store.subscribe(_text(payload, "email").strip(), utc_timestamp())
        if not created:
            logger.info("Newsletter address already subscribed; nothing stored")
        return created

    def submit_contact(self, payload: Mapping[str, Any]) -> dict:
        _require(payload, ("name", "email", "message"), "All fields are required.")
        entry = {
            "name": _text(payload, "name"),
            "email": _text(payload, "email"),
            "message": _text(payload, "message"),
            "date": utc_timestamp(),
        }
        self.store.append(Collection.CONTACT, entry)
        return entry


__all__ = [
    "SubmissionService",
    "SubmissionError",
    "ValidationError",
    "StorageError",
    "parse_int",
]
