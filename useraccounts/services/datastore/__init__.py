"""Database integration for persisting user accounts."""

from typing import Optional, Any

from sqlalchemy import or_

from ... import logging
from ...domain import Account, Profile
from . import util, models
from .models import DBAccount
from .util import DatastoreUnavailable

logger = logging.getLogger(__name__)

init_app = util.init_app
create_all = util.create_all
drop_all = util.drop_all

_PROFILE_COLUMNS = (
    DBAccount.id,
    DBAccount.user_name,
    DBAccount.account_number,
    DBAccount.email_address,
    DBAccount.identity_number,
)


def _to_domain(db_account: DBAccount) -> Account:
    return Account(
        id=db_account.id,
        user_name=db_account.user_name,
        email_address=db_account.email_address,
        identity_number=db_account.identity_number,
        account_number=db_account.account_number,
        password=db_account.password,
        created_at=db_account.created_at,
        updated_at=db_account.updated_at
    )


def find_by_identifiers(user_name: Optional[str] = None,
                        email_address: Optional[str] = None,
                        identity_number: Optional[str] = None) \
        -> Optional[Account]:
    """
    Find an account that matches any of the given unique fields.

    Fields that are not provided are ignored. If none are provided, nothing
    matches.

    Returns
    -------
    :class:`.Account` or None

    """
    criteria = []
    if user_name is not None:
        criteria.append(DBAccount.user_name == user_name)
    if email_address is not None:
        criteria.append(DBAccount.email_address == email_address)
    if identity_number is not None:
        criteria.append(DBAccount.identity_number == identity_number)
    if not criteria:
        return None
    with util.transaction() as dbsession:
        db_account = dbsession.query(DBAccount) \
            .filter(or_(*criteria)) \
            .first()
        if db_account is None:
            return None
        return _to_domain(db_account)


def find_by_id(account_id: str) -> Optional[Account]:
    """Load an :class:`.Account` by its identifier."""
    with util.transaction() as dbsession:
        db_account = dbsession.get(DBAccount, account_id)
        if db_account is None:
            return None
        return _to_domain(db_account)


def account_number_exists(account_number: str) -> bool:
    """Whether an account number has already been assigned."""
    with util.transaction() as dbsession:
        return dbsession.query(DBAccount.id) \
            .filter(DBAccount.account_number == account_number) \
            .first() is not None


def _load_profile(criterion: Any) -> Optional[Profile]:
    with util.transaction() as dbsession:
        row = dbsession.query(*_PROFILE_COLUMNS).filter(criterion).first()
        if row is None:
            return None
        return Profile(*row)


def get_profile(account_id: str) -> Optional[Profile]:
    """Load the restricted projection of an account by identifier."""
    return _load_profile(DBAccount.id == account_id)


def get_profile_by_account_number(account_number: str) -> Optional[Profile]:
    """Load the restricted projection of an account by account number."""
    return _load_profile(DBAccount.account_number == account_number)


def get_profile_by_identity_number(identity_number: str) \
        -> Optional[Profile]:
    """Load the restricted projection of an account by identity number."""
    return _load_profile(DBAccount.identity_number == identity_number)


def create(user_name: str, email_address: str, identity_number: str,
           account_number: str, password: str) -> Account:
    """
    Persist a new account.

    Parameters
    ----------
    user_name : str
    email_address : str
    identity_number : str
    account_number : str
    password : str
        The password *hash*.

    Returns
    -------
    :class:`.Account`

    Raises
    ------
    :class:`.Conflict`
        If any unique field is already taken.

    """
    with util.transaction() as dbsession:
        db_account = DBAccount(
            user_name=user_name,
            email_address=email_address,
            identity_number=identity_number,
            account_number=account_number,
            password=password
        )
        dbsession.add(db_account)
    logger.debug('Created account %s', db_account.id)
    return _to_domain(db_account)


def update(account_id: str, user_name: Optional[str] = None,
           email_address: Optional[str] = None,
           password: Optional[str] = None) -> Optional[Account]:
    """
    Update an account. Only the fields that are provided are changed.

    Returns
    -------
    :class:`.Account` or None
        The updated account, or None if there is no such account.

    """
    with util.transaction() as dbsession:
        db_account = dbsession.get(DBAccount, account_id)
        if db_account is None:
            return None
        if user_name is not None:
            db_account.user_name = user_name
        if email_address is not None:
            db_account.email_address = email_address
        if password is not None:
            db_account.password = password
        dbsession.add(db_account)
    return _to_domain(db_account)


def delete(account_id: str) -> bool:
    """Delete an account. Returns False if there was no such account."""
    with util.transaction() as dbsession:
        db_account = dbsession.get(DBAccount, account_id)
        if db_account is None:
            return False
        dbsession.delete(db_account)
    logger.debug('Deleted account %s', account_id)
    return True
