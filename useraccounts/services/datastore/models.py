"""SQLAlchemy models for the accounts datastore."""

import uuid
from datetime import datetime

from flask_sqlalchemy import SQLAlchemy
from pytz import UTC
from sqlalchemy import Column, DateTime, String

db: SQLAlchemy = SQLAlchemy()


def _now() -> datetime:
    return datetime.now(tz=UTC)


def _new_id() -> str:
    return str(uuid.uuid4())


class DBAccount(db.Model):  # type: ignore
    """Persistence for :class:`domain.Account`."""

    __tablename__ = 'users'

    id = Column(String(36), primary_key=True, default=_new_id)
    user_name = Column(String(255), nullable=False, unique=True)
    email_address = Column(String(255), nullable=False, unique=True)
    identity_number = Column(String(16), nullable=False, unique=True)
    account_number = Column(String(10), nullable=False, unique=True)
    """Randomly generated; uniqueness is checked before insert and enforced
    here as a backstop."""

    password = Column(String(255), nullable=False)
    """bcrypt hash."""

    created_at = Column(DateTime(timezone=True), default=_now)
    updated_at = Column(DateTime(timezone=True), default=_now, onupdate=_now)
