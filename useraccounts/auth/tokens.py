"""Functions for working with signed session tokens."""

import re
from datetime import datetime, timedelta
from typing import Optional, Union

import jwt
from flask import Flask, current_app
from pytz import UTC

from .. import logging
from ..domain import Claims
from .exceptions import InvalidToken, ExpiredToken, ConfigurationError

logger = logging.getLogger(__name__)

ALGORITHM = 'HS256'
DEFAULT_EXPIRY = 24 * 60 * 60

_UNITS = {'s': 1, 'm': 60, 'h': 60 * 60, 'd': 24 * 60 * 60, 'w': 7 * 24 * 60 * 60}
_DURATION = re.compile(r'^\s*(\d+)\s*([smhdw]?)\s*$')


def parse_duration(value: Union[str, int]) -> int:
    """
    Convert a token lifetime like ``1d``, ``12h``, ``30m`` to seconds.

    Bare numbers are taken as seconds.

    Raises
    ------
    :class:`ConfigurationError`
        If the value cannot be interpreted, or is not positive.

    """
    if isinstance(value, int):
        seconds = value
    else:
        match = _DURATION.match(str(value).lower())
        if match is None:
            raise ConfigurationError(f'Invalid token lifetime: {value!r}')
        amount, unit = match.groups()
        seconds = int(amount) * _UNITS[unit or 's']
    if seconds <= 0:
        raise ConfigurationError(f'Invalid token lifetime: {value!r}')
    return seconds


class TokenService(object):
    """
    Issues and verifies session tokens.

    Tokens are JWTs signed with a server-held secret, so any node with the
    same secret can verify them without a round-trip to a shared store.
    """

    def __init__(self, secret: str, expires_in: int = DEFAULT_EXPIRY,
                 algorithm: str = ALGORITHM) -> None:
        if not secret:
            raise ConfigurationError('Missing token signing secret')
        self._secret = secret
        self._algorithm = algorithm
        self.expires_in = expires_in

    def issue(self, claims: Claims, now: Optional[datetime] = None) -> str:
        """
        Issue a signed token for a set of claims.

        Parameters
        ----------
        claims : :class:`.Claims`
        now : datetime
            Issue time; defaults to the current time.

        Returns
        -------
        str

        """
        if now is None:
            now = datetime.now(tz=UTC)
        payload = claims.to_payload()
        payload.update({
            'iat': now,
            'exp': now + timedelta(seconds=self.expires_in)
        })
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> Claims:
        """
        Verify a token, and get the claims that it carries.

        Raises
        ------
        :class:`InvalidToken`
            If the signature does not match, the payload is malformed, or
            the token has expired (:class:`ExpiredToken`).

        """
        try:
            payload = jwt.decode(token, self._secret,
                                 algorithms=[self._algorithm],
                                 options={'require': ['exp']})
        except jwt.ExpiredSignatureError as e:
            raise ExpiredToken('Token has expired') from e
        except jwt.InvalidTokenError as e:
            raise InvalidToken('Not a valid token') from e

        try:
            return Claims.from_payload(payload)
        except KeyError as e:
            logger.debug('Token is missing claim %s', e)
            raise InvalidToken('Token payload malformed') from e


EXTENSION_KEY = 'token_service'


def init_app(app: Flask) -> None:
    """Construct the application's :class:`TokenService` from its config."""
    app.config.setdefault('JWT_EXPIRED', '1d')
    service = TokenService(app.config.get('JWT_SECRET'),
                           expires_in=parse_duration(app.config['JWT_EXPIRED']))
    app.extensions[EXTENSION_KEY] = service


def current_tokens() -> TokenService:
    """Get the token service for the current application."""
    return current_app.extensions[EXTENSION_KEY]  # type: ignore
