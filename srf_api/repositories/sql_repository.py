"""Mirror-store access backed by SQLAlchemy."""
from __future__ import annotations

from typing import Any, Mapping

from sqlalchemy import func, select

from srf_api.db.create_tables import create_all
from srf_api.db.models import Contact, Donation, Newsletter, Volunteer
from srf_api.db.session import get_session
from srf_api.domain.collections import MAX_DATE_LENGTH, Collection, newsletter_email, utc_timestamp

MODELS = {
    Collection.DONATIONS: Donation,
    Collection.VOLUNTEER: Volunteer,
    Collection.CONTACT: Contact,
    Collection.NEWSLETTER: Newsletter,
}


# Integer columns are 32-bit on Postgres.
INT_MIN, INT_MAX = -(2**31), 2**31 - 1
NAME_LENGTH = 255
PHONE_LENGTH = 64


def _text(value: Any, limit: int | None = None) -> str | None:
    if value is None:
        return None
    text = value if isinstance(value, str) else str(value)
    return text[:limit] if limit else text


def _int_or_none(value: Any) -> int | None:
    try:
        number = int(value)
    except (TypeError, ValueError, OverflowError):
        return None
    return number if INT_MIN <= number <= INT_MAX else None


class MirrorRepository:
    """Lookups and inserts against the mirror tables.

    Existing rows are never updated or deleted from here.
    """

    def ensure_schema(self) -> None:
        """Create any missing mirror tables; existing ones are left alone."""
        create_all()

    def _key_filter(self, model, collection: Collection, key: tuple):
        if collection is Collection.NEWSLETTER:
            return [func.lower(model.email) == key[0]]
        email, date = key
        clauses = [model.email == email]
        clauses.append(model.date.is_(None) if date is None else model.date == date)
        return clauses

    def exists(self, collection: Collection, key: tuple) -> bool:
        model = MODELS[collection]
        with get_session() as session:
            stmt = select(model.id).where(*self._key_filter(model, collection, key)).limit(1)
            return session.execute(stmt).first() is not None

    def insert(self, collection: Collection, record: Any) -> None:
        entity = self._build(collection, record)
        with get_session() as session:
            session.add(entity)
            session.commit()

    def count(self, collection: Collection) -> int:
        model = MODELS[collection]
        with get_session() as session:
            return session.execute(select(func.count(model.id))).scalar_one()

    def list_documents(self, collection: Collection) -> list[dict]:
        model = MODELS[collection]
        with get_session() as session:
            rows = session.execute(select(model).order_by(model.id)).scalars().all()
            return [dict(row.document or {}) for row in rows]

    # ------------------------------ builders ------------------------------
    def _build(self, collection: Collection, record: Any):
        if collection is Collection.NEWSLETTER:
            email = newsletter_email(record)
            date = record.get("date") if isinstance(record, Mapping) else None
            date = _text(date) or utc_timestamp()
            document = {"email": email, "date": date}
            return Newsletter(email=email.lower(), date=date[:MAX_DATE_LENGTH], document=document)

        data = dict(record)
        common = {
            "email": _text(data.get("email")),
            "date": _text(data.get("date")),
            "document": data,
        }
        if collection is Collection.DONATIONS:
            return Donation(
                name=_text(data.get("name"), NAME_LENGTH),
                phone=_text(data.get("phone"), PHONE_LENGTH),
                parcel_name=_text(data.get("parcelName"), NAME_LENGTH),
                parcel_count=_int_or_none(data.get("parcelCount")),
                total_amount=_int_or_none(data.get("totalAmount")),
                **common,
            )
        if collection is Collection.VOLUNTEER:
            return Volunteer(
                name=_text(data.get("name"), NAME_LENGTH),
                phone=_text(data.get("phone"), PHONE_LENGTH),
                help=_text(data.get("help")),
                message=_text(data.get("message")),
                **common,
            )
        return Contact(name=_text(data.get("name"), NAME_LENGTH), message=_text(data.get("message")), **common)

