"""Exceptions raised by the authentication components."""

from ..exceptions import InternalError, ConfigurationError


class InvalidToken(ValueError):
    """Token could not be verified."""


class ExpiredToken(InvalidToken):
    """Token was well-formed and signed, but has expired."""


class MissingToken(ValueError):
    """No bearer token was presented."""


class PasswordHashInvalid(InternalError):
    """A stored password hash could not be interpreted."""


__all__ = ('InvalidToken', 'ExpiredToken', 'MissingToken',
           'PasswordHashInvalid', 'ConfigurationError')
