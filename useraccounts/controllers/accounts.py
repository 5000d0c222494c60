"""
Handles account registration, login and profile requests.

Each controller returns a ``(data, status_code, headers)`` tuple, and raises
a :class:`.ServiceError` when the request cannot be satisfied.

Protected controllers receive the caller's :class:`.Account` as resolved by
:func:`useraccounts.auth.decorators.authenticated`, and additionally require
a live entry for the caller in the :class:`.SessionCache`.
"""

import secrets
from typing import Any, Mapping, Optional, Tuple

from .. import logging, status
from ..auth import passwords
from ..auth.tokens import TokenService
from ..domain import Account, public_view, registration_view
from ..exceptions import Conflict, NotFound, Unauthorized, InternalError
from ..services import datastore
from ..services.sessions import SessionCache
from . import forms

logger = logging.getLogger(__name__)

Response = Tuple[Optional[dict], int, dict]

USER_EXISTS = 'User already exists'
USER_NOT_FOUND = 'User not found'
INVALID_PASSWORD = 'Invalid password'
UNAUTHORIZED = 'Unauthorized'
USER_FOUND = 'User found!'

ACCOUNT_NUMBER_MIN = 10 ** 9
ACCOUNT_NUMBER_MAX = 10 ** 10 - 1


def generate_account_number() -> str:
    """Draw a random 10-digit account number."""
    span = ACCOUNT_NUMBER_MAX - ACCOUNT_NUMBER_MIN + 1
    return str(ACCOUNT_NUMBER_MIN + secrets.randbelow(span))


def _new_account_number(attempts: int) -> str:
    for _ in range(attempts):
        account_number = generate_account_number()
        if not datastore.account_number_exists(account_number):
            return account_number
        logger.debug('Account number %s is taken', account_number)
    raise InternalError('Could not allocate an account number')


def _start_session(account: Account, tokens: TokenService,
                   cache: SessionCache) -> str:
    token = tokens.issue(account.claims)
    cache.put(account.id, token)
    return token


def _require_live_session(account: Account, cache: SessionCache) -> None:
    if not cache.is_live(account.id):
        logger.debug('No cached session for %s', account.id)
        raise Unauthorized(UNAUTHORIZED)


def register(params: Mapping[str, Any], tokens: TokenService,
             cache: SessionCache, rounds: Optional[int] = None,
             account_number_attempts: int = 5) -> Response:
    """
    Register a new account, and start a session for it.

    Parameters
    ----------
    params : dict
        Must contain ``userName``, ``emailAddress``, ``identityNumber`` and
        ``password``.
    tokens : :class:`.TokenService`
    cache : :class:`.SessionCache`
    rounds : int
        bcrypt work factor.
    account_number_attempts : int
        How many random account numbers to try.

    Returns
    -------
    dict
        The new ``user`` (without its password hash), and a session ``token``.
    int
        201 Created.
    dict
        Extra headers.

    Raises
    ------
    :class:`.ValidationFailed`
    :class:`.Conflict`
        If the user name, email address or identity number is taken.

    """
    form = forms.parse(forms.RegistrationForm, params)
    user_name = form.userName.data
    email_address = form.emailAddress.data
    identity_number = form.identityNumber.data

    existing = datastore.find_by_identifiers(user_name=user_name,
                                             email_address=email_address,
                                             identity_number=identity_number)
    if existing is not None:
        logger.debug('Registration conflicts with account %s', existing.id)
        raise Conflict(USER_EXISTS)

    hashed = passwords.hash_password(form.password.data, rounds=rounds)
    account = datastore.create(
        user_name=user_name,
        email_address=email_address,
        identity_number=identity_number,
        account_number=_new_account_number(account_number_attempts),
        password=hashed
    )
    token = _start_session(account, tokens, cache)
    logger.info('Registered account %s', account.id)
    return ({'user': registration_view(account), 'token': token},
            status.HTTP_201_CREATED, {})


def login(params: Mapping[str, Any], tokens: TokenService,
          cache: SessionCache) -> Response:
    """
    Log in with a user name or email address, and a password.

    A fresh token is issued, and replaces any session cached for the
    account.

    Raises
    ------
    :class:`.ValidationFailed`
    :class:`.NotFound`
        If no account has that user name or email address.
    :class:`.Unauthorized`
        If the password is wrong.

    """
    form = forms.parse(forms.LoginForm, params)
    account = datastore.find_by_identifiers(
        user_name=forms.optional_value(form.userName),
        email_address=forms.optional_value(form.emailAddress)
    )
    if account is None:
        raise NotFound(USER_NOT_FOUND)
    if not passwords.check_password(form.password.data, account.password):
        logger.debug('Wrong password for %s', account.id)
        raise Unauthorized(INVALID_PASSWORD)

    token = _start_session(account, tokens, cache)
    logger.info('Logged in account %s', account.id)
    return ({'data': {'user': public_view(account), 'token': token}},
            status.HTTP_200_OK, {})


def update(account: Account, params: Mapping[str, Any], cache: SessionCache,
           rounds: Optional[int] = None) -> Response:
    """
    Update the caller's user name, email address and/or password.

    Only the fields that are provided are changed; the password is re-hashed
    only when a new one is given.

    Raises
    ------
    :class:`.ValidationFailed`
    :class:`.Unauthorized`
        If the caller has no live session.
    :class:`.NotFound`
        If the account was deleted in the meantime.
    :class:`.Conflict`
        If the new user name or email address is taken.

    """
    form = forms.parse(forms.UpdateForm, params)
    _require_live_session(account, cache)
    if datastore.find_by_id(account.id) is None:
        raise NotFound(USER_NOT_FOUND)

    password = forms.optional_value(form.password)
    hashed = passwords.hash_password(password, rounds=rounds) \
        if password else None
    updated = datastore.update(
        account.id,
        user_name=forms.optional_value(form.userName),
        email_address=forms.optional_value(form.emailAddress),
        password=hashed
    )
    if updated is None:
        raise NotFound(USER_NOT_FOUND)
    logger.info('Updated account %s', account.id)
    return {'user': public_view(updated)}, status.HTTP_200_OK, {}


def delete(account: Account, cache: SessionCache) -> Response:
    """
    Delete the caller's account.

    Raises
    ------
    :class:`.Unauthorized`
        If the caller has no live session.
    :class:`.NotFound`

    """
    _require_live_session(account, cache)
    if datastore.find_by_id(account.id) is None:
        raise NotFound(USER_NOT_FOUND)
    if not datastore.delete(account.id):
        raise NotFound(USER_NOT_FOUND)
    logger.info('Deleted account %s', account.id)
    return None, status.HTTP_204_NO_CONTENT, {}


def get_self(account: Account, cache: SessionCache) -> Response:
    """Get the caller's own profile."""
    _require_live_session(account, cache)
    profile = datastore.get_profile(account.id)
    if profile is None:
        raise NotFound(USER_NOT_FOUND)
    return {'user': profile.to_dict()}, status.HTTP_200_OK, {}


def get_by_account_number(params: Mapping[str, Any]) -> Response:
    """Look up a profile by its 10-digit account number."""
    form = forms.parse(forms.AccountNumberQuery, params)
    profile = datastore.get_profile_by_account_number(form.accountNumber.data)
    if profile is None:
        raise NotFound(USER_NOT_FOUND)
    return ({'message': USER_FOUND, 'user': profile.to_dict()},
            status.HTTP_200_OK, {})


def get_by_identity_number(params: Mapping[str, Any]) -> Response:
    """Look up a profile by its 16-character identity number."""
    form = forms.parse(forms.IdentityNumberQuery, params)
    profile = datastore.get_profile_by_identity_number(
        form.identityNumber.data
    )
    if profile is None:
        raise NotFound(USER_NOT_FOUND)
    return ({'message': USER_FOUND, 'user': profile.to_dict()},
            status.HTTP_200_OK, {})
