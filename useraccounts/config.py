"""Flask configuration."""

import os

VERSION = '0.1.0'

DEBUG = bool(int(os.environ.get('APP_DEBUG', '0')))
"""When set, error responses include the error kind and a stack trace."""

LOGLEVEL = int(os.environ.get('LOGLEVEL', 20))

#################### Session tokens ####################
JWT_SECRET = os.environ.get('JWT_SECRET_KEY', os.environ.get('JWT_SECRET'))
"""Secret used to sign session tokens. There is no default; the application
factory refuses to start without one."""

JWT_EXPIRED = os.environ.get('JWT_EXPIRED', '1d')
"""Lifetime of a session token, e.g. ``1d``, ``12h``, ``30m`` or seconds."""

#################### Session cache ####################
REDIS_URL = os.environ.get('REDIS_URL', 'redis://localhost:6379/0')
REDIS_TIMEOUT = float(os.environ.get('REDIS_TIMEOUT', '5'))
"""Socket timeout (seconds) for calls to the session cache."""

REDIS_FAKE = bool(int(os.environ.get('REDIS_FAKE', '0')))
"""Use the FakeRedis library instead of a redis service.

Useful for testing, dev, beta."""

SESSION_CACHE_TTL = int(os.environ.get('SESSION_CACHE_TTL', '3600'))
"""Seconds that a cached session token keeps a user's session live."""

#################### Accounts datastore ####################
SQLALCHEMY_DATABASE_URI = os.environ.get('SQLALCHEMY_DATABASE_URI',
                                         'sqlite://')
SQLALCHEMY_TRACK_MODIFICATIONS = False
CREATE_DB = bool(int(os.environ.get('CREATE_DB', 0)))

BCRYPT_ROUNDS = int(os.environ.get('BCRYPT_ROUNDS', '10'))
"""Work factor for password hashes."""

ACCOUNT_NUMBER_ATTEMPTS = int(os.environ.get('ACCOUNT_NUMBER_ATTEMPTS', '5'))
"""How many random account numbers to try before giving up on registration."""
