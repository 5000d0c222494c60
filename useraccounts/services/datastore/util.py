"""Session and schema helpers for the accounts datastore."""

from contextlib import contextmanager
from typing import Generator, Optional

from flask import Flask
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from ... import logging
from ...exceptions import Conflict, InternalError
from .models import DBAccount, db

logger = logging.getLogger(__name__)


class DatastoreUnavailable(InternalError):
    """The datastore could not be reached or queried."""


def init_app(app: Flask) -> None:
    """Set configuration defaults and attach the datastore to ``app``."""
    app.config.setdefault('SQLALCHEMY_DATABASE_URI', 'sqlite://')
    app.config.setdefault('SQLALCHEMY_TRACK_MODIFICATIONS', False)
    db.init_app(app)


def create_all() -> None:
    """Create all tables in the database."""
    db.create_all()


def drop_all() -> None:
    """Drop all tables in the database."""
    db.drop_all()


def violated_column(error: IntegrityError) -> Optional[str]:
    """
    Name the unique column that ``error`` reports as violated, if any.

    Engines mention the column (SQLite, MySQL) or a constraint named after
    it (PostgreSQL) in their error text.
    """
    detail = str(error.orig)
    for column in DBAccount.__table__.columns:
        if column.unique and column.name in detail:
            return column.name
    return None


@contextmanager
def transaction() -> Generator[Session, None, None]:
    """
    Context manager for database transactions.

    Commits on exit; rolls back and translates storage-engine errors on
    failure.

    Raises
    ------
    :class:`Conflict`
        If a unique constraint is violated.
    :class:`DatastoreUnavailable`
        If the database cannot be reached.

    """
    try:
        yield db.session
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        logger.debug('Integrity error: %s', e.orig)
        column = violated_column(e)
        if column is None:
            raise Conflict() from e
        raise Conflict(f'Duplicate field value: {column}') from e
    except OperationalError as e:
        db.session.rollback()
        logger.error('Could not reach the datastore: %s', e)
        raise DatastoreUnavailable('Could not query database') from e
    except Exception:
        db.session.rollback()
        raise
