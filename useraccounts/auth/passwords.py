"""Salted one-way password hashes."""

from typing import Optional

import bcrypt

from .. import logging
from .exceptions import PasswordHashInvalid

logger = logging.getLogger(__name__)

DEFAULT_ROUNDS = 10
MAX_PASSWORD_BYTES = 72
"""bcrypt only considers the first 72 bytes of a password; longer passwords
are truncated to that many bytes."""


def _encode(password: str) -> bytes:
    return password.encode('utf-8')[:MAX_PASSWORD_BYTES]


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    """
    Generate a salted bcrypt hash of a password.

    Parameters
    ----------
    password : str
    rounds : int
        Work factor (log2 of the number of iterations). Defaults to
        :data:`DEFAULT_ROUNDS`.

    Returns
    -------
    str

    Raises
    ------
    ValueError
        If the password is empty.

    """
    if not password:
        raise ValueError('Password is empty')
    salt = bcrypt.gensalt(rounds=rounds or DEFAULT_ROUNDS)
    return bcrypt.hashpw(_encode(password), salt).decode('ascii')


def check_password(password: str, hashed: str) -> bool:
    """
    Check a password against a hash produced by :func:`hash_password`.

    Returns ``False`` for a wrong password.

    Raises
    ------
    :class:`PasswordHashInvalid`
        If ``hashed`` is not a bcrypt hash.

    """
    if not password:
        return False
    try:
        return bcrypt.checkpw(_encode(password), hashed.encode('ascii'))
    except (ValueError, UnicodeEncodeError) as e:
        logger.error('Stored password hash is not valid: %s', e)
        raise PasswordHashInvalid('Invalid password hash') from e
