"""
Authorization gate for protected routes.

:func:`authenticated` is a decorator for Flask routes that require a
logged-in caller. Before the route is called:

- The bearer token is read from the ``Authorization`` header.
- The token is verified with the application's
  :class:`.tokens.TokenService`.
- The account named by the token's claims is loaded from the datastore, to
  make sure that it still exists.
- The account is attached to the request as ``request.account``.

The gate does not consult the session cache. Protected operations check the
cache themselves (see :mod:`useraccounts.controllers.accounts`).

.. code-block:: python

   @blueprint.route('/getMe', methods=['GET'])
   @authenticated
   def get_me() -> Response:
       data, code, headers = accounts.get_self(request.account, ...)

"""

from enum import Enum
from functools import wraps
from typing import Any, Callable, Optional

from flask import request

from .. import logging
from ..domain import Account
from ..exceptions import Unauthorized, NotFound, ServiceError
from ..services import datastore
from .exceptions import InvalidToken, MissingToken
from .tokens import TokenService, current_tokens

logger = logging.getLogger(__name__)


class RejectionReason(Enum):
    """Why the gate turned a request away."""

    MISSING_TOKEN = 'missing token'
    INVALID_TOKEN = 'invalid token'
    ACCOUNT_NOT_FOUND = 'account not found'


class Rejected(Exception):
    """The caller could not be authorized."""

    def __init__(self, reason: RejectionReason) -> None:
        self.reason = reason
        super(Rejected, self).__init__(reason.value)

    def as_service_error(self) -> ServiceError:
        """The client-facing error for this rejection."""
        if self.reason is RejectionReason.ACCOUNT_NOT_FOUND:
            return NotFound('User not found')
        return Unauthorized('Unauthorized')


def bearer_token(authorization: Optional[str]) -> str:
    """
    Extract the token from an ``Authorization: Bearer <token>`` header.

    Raises
    ------
    :class:`.MissingToken`

    """
    if not authorization:
        raise MissingToken('No authorization header')
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != 'bearer':
        raise MissingToken('Not a bearer credential')
    return parts[1]


def authorize(authorization: Optional[str], tokens: TokenService,
              load_account: Callable[[str], Optional[Account]]) -> Account:
    """
    Resolve the caller's account from an ``Authorization`` header.

    Parameters
    ----------
    authorization : str or None
        Value of the ``Authorization`` header.
    tokens : :class:`.TokenService`
    load_account : callable
        Loads an :class:`.Account` by identifier, or returns None.

    Returns
    -------
    :class:`.Account`

    Raises
    ------
    :class:`Rejected`

    """
    try:
        token = bearer_token(authorization)
    except MissingToken as e:
        raise Rejected(RejectionReason.MISSING_TOKEN) from e

    try:
        claims = tokens.verify(token)
    except InvalidToken as e:
        raise Rejected(RejectionReason.INVALID_TOKEN) from e

    account = load_account(claims.id)
    if account is None:
        raise Rejected(RejectionReason.ACCOUNT_NOT_FOUND)
    return account


def authenticated(func: Callable) -> Callable:
    """Require a valid bearer token for an existing account."""
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            account = authorize(request.headers.get('Authorization'),
                                current_tokens(), datastore.find_by_id)
        except Rejected as e:
            logger.info('Request rejected: %s', e.reason.value)
            raise e.as_service_error() from e
        request.account = account  # type: ignore
        logger.debug('Request is authorized for %s, proceeding', account.id)
        return func(*args, **kwargs)
    return wrapper
