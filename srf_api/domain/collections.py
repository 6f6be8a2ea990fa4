"""Collection names, file layout and dedup identity for form records."""
from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping


class Collection(str, Enum):
    DONATIONS = "donations"
    VOLUNTEER = "volunteer"
    NEWSLETTER = "newsletter"
    CONTACT = "contact"


FILE_NAMES = {
    Collection.DONATIONS: "donations.json",
    Collection.VOLUNTEER: "volunteerForms.json",
    Collection.NEWSLETTER: "newsletter.json",
    Collection.CONTACT: "contactForms.json",
}

PARCEL_PRICE = 75

# Column widths of the mirror tables; longer values cannot be keyed there.
MAX_EMAIL_LENGTH = 320
MAX_DATE_LENGTH = 40


def utc_timestamp(now: datetime | None = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision, e.g. 2024-05-01T10:00:00.000Z."""
    moment = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def normalize_email(value: Any) -> str:
    if not isinstance(value, str):
        return ""
    return value.strip().lower()


def newsletter_email(entry: Any) -> str:
    """Email of a newsletter entry; legacy entries are bare strings."""
    if isinstance(entry, str):
        return entry.strip()
    if isinstance(entry, Mapping):
        value = entry.get("email")
        return value.strip() if isinstance(value, str) else ""
    return ""


def is_subscribed(entries: list, email: str) -> bool:
    wanted = normalize_email(email)
    if not wanted:
        return False
    return any(normalize_email(newsletter_email(e)) == wanted for e in entries)


def dedup_key(collection: Collection, record: Any) -> tuple | None:
    """Identity used to detect a record already copied to the mirror.

    Newsletter entries are keyed by normalized email alone; every other
    collection by (email, date), with a non-string date compared as its text
    form. Returns None when the email is missing or a key part is too wide
    for the mirror columns.
    """
    if collection is Collection.NEWSLETTER:
        email = normalize_email(newsletter_email(record))
        return (email,) if email and len(email) <= MAX_EMAIL_LENGTH else None
    if not isinstance(record, Mapping):
        return None
    email = record.get("email")
    if not isinstance(email, str) or not email or len(email) > MAX_EMAIL_LENGTH:
        return None
    date = record.get("date")
    if date is not None and not isinstance(date, str):
        date = str(date)
    if date is not None and len(date) > MAX_DATE_LENGTH:
        return None
    return (email, date)
