"""
Error taxonomy for the user-accounts service.

Every failure that should reach the client is a :class:`ServiceError`
tagged with an :class:`ErrorKind`. The kind is resolved to an HTTP status
code exactly once, by the error handlers registered in
:func:`useraccounts.factory.register_error_handlers`, using
:data:`STATUS_CODES`.
"""

from enum import Enum
from typing import Dict

from . import status


class ErrorKind(Enum):
    """Kinds of failure that the service reports to clients."""

    VALIDATION = 'validation'
    CONFLICT = 'conflict'
    UNAUTHORIZED = 'unauthorized'
    NOT_FOUND = 'not_found'
    INTERNAL = 'internal'


STATUS_CODES: Dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class ServiceError(Exception):
    """Base class for errors that are rendered for the client."""

    kind: ErrorKind = ErrorKind.INTERNAL
    default_message = 'Something went wrong'

    def __init__(self, message: str = '') -> None:
        self.message = message or self.default_message
        super(ServiceError, self).__init__(self.message)

    @property
    def status_code(self) -> int:
        """HTTP status code for this error."""
        return STATUS_CODES[self.kind]


class ValidationFailed(ServiceError):
    """The request payload or query is malformed or incomplete."""

    kind = ErrorKind.VALIDATION
    default_message = 'Invalid request'


class Conflict(ServiceError):
    """A unique field (user name, email, identity number) is taken."""

    kind = ErrorKind.CONFLICT
    default_message = 'User already exists'


class Unauthorized(ServiceError):
    """The caller is not authorized, or has no live session."""

    kind = ErrorKind.UNAUTHORIZED
    default_message = 'Unauthorized'


class NotFound(ServiceError):
    """No matching account."""

    kind = ErrorKind.NOT_FOUND
    default_message = 'User not found'


class InternalError(ServiceError):
    """A failure that is not otherwise classified."""

    kind = ErrorKind.INTERNAL


class ConfigurationError(InternalError):
    """Required configuration is missing or malformed."""
