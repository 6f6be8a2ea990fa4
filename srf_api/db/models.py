"""SQLAlchemy models mirroring the four JSON collections.

Each row keeps the dedup columns, the submitted fields and the original JSON
document. ``created_at``/``updated_at`` are storage timestamps set by the
mirror; ``date`` is the submission time recorded locally.
"""
from __future__ import annotations

from sqlalchemy import Column, DateTime, Integer, String, Text, JSON, Index, func

from srf_api.domain.collections import MAX_DATE_LENGTH, MAX_EMAIL_LENGTH
from .session import Base


class _MirrorColumns:
    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(MAX_EMAIL_LENGTH), nullable=False)
    date = Column(String(MAX_DATE_LENGTH), nullable=True)
    document = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


class Donation(_MirrorColumns, Base):
    __tablename__ = "donations"

    name = Column(String(255))
    phone = Column(String(64))
    parcel_name = Column(String(255))
    parcel_count = Column(Integer)
    total_amount = Column(Integer)

    __table_args__ = (Index("ix_donations_email_date", "email", "date"),)


class Volunteer(_MirrorColumns, Base):
    __tablename__ = "volunteers"

    name = Column(String(255))
    phone = Column(String(64))
    help = Column(Text)
    message = Column(Text)

    __table_args__ = (Index("ix_volunteers_email_date", "email", "date"),)


class Contact(_MirrorColumns, Base):
    __tablename__ = "contacts"

    name = Column(String(255))
    message = Column(Text)

    __table_args__ = (Index("ix_contacts_email_date", "email", "date"),)


class Newsletter(_MirrorColumns, Base):
    __tablename__ = "newsletters"

    __table_args__ = (Index("ix_newsletters_email", "email"),)
