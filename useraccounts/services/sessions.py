"""
Short-lived session cache, backed by Redis.

The most recently issued token for each account is kept under
``user:<account id>`` for a fixed time-to-live. Protected operations treat
the *presence* of that entry as proof that the caller's session is still
live; tokens themselves are verified separately by
:class:`useraccounts.auth.tokens.TokenService`.
"""

from typing import Optional

import redis
from flask import Flask, current_app

from .. import logging
from ..exceptions import InternalError

logger = logging.getLogger(__name__)

KEY_FORMAT = 'user:{}'
EXTENSION_KEY = 'session_cache'


class SessionCacheUnavailable(InternalError):
    """The session cache could not be reached."""


class SessionCache(object):
    """
    Maps account identifiers to their current session token.

    The Redis client is thread safe, and connections are attached at the time
    a command is executed. This class simply provides a container for the
    connection and the time-to-live.
    """

    def __init__(self, connection: redis.Redis, ttl: int = 3600) -> None:
        self.r = connection
        self.ttl = ttl

    @staticmethod
    def key(account_id: str) -> str:
        """Cache key for an account."""
        return KEY_FORMAT.format(account_id)

    def put(self, account_id: str, token: str,
            ttl: Optional[int] = None) -> None:
        """
        Store ``token`` as the current session for an account.

        Any existing entry is overwritten, and the expiry is reset.

        Raises
        ------
        :class:`SessionCacheUnavailable`

        """
        try:
            self.r.set(self.key(account_id), token, ex=ttl or self.ttl)
        except redis.exceptions.RedisError as e:
            logger.error('Could not cache session for %s: %s', account_id, e)
            raise SessionCacheUnavailable('Session cache unavailable') from e

    def get(self, account_id: str) -> Optional[str]:
        """Get the cached token for an account, if there is one."""
        try:
            value = self.r.get(self.key(account_id))
        except redis.exceptions.RedisError as e:
            logger.error('Could not read session for %s: %s', account_id, e)
            raise SessionCacheUnavailable('Session cache unavailable') from e
        if isinstance(value, bytes):
            return value.decode('utf-8')
        return value

    def is_live(self, account_id: str) -> bool:
        """Whether any session is cached for the account.

        The cached value is not compared with the caller's token.
        """
        return self.get(account_id) is not None


def _connect(app: Flask) -> redis.Redis:
    if app.config['REDIS_FAKE']:
        import fakeredis
        logger.debug('Using fake session cache')
        return fakeredis.FakeStrictRedis(server=fakeredis.FakeServer(),
                                         decode_responses=True)
    timeout = float(app.config['REDIS_TIMEOUT'])
    logger.debug('New Redis connection at %s', app.config['REDIS_URL'])
    return redis.Redis.from_url(app.config['REDIS_URL'],
                                socket_timeout=timeout,
                                socket_connect_timeout=timeout,
                                decode_responses=True)


def init_app(app: Flask) -> None:
    """Set configuration defaults and attach a session cache to ``app``."""
    app.config.setdefault('REDIS_URL', 'redis://localhost:6379/0')
    app.config.setdefault('REDIS_TIMEOUT', 5)
    app.config.setdefault('REDIS_FAKE', False)
    app.config.setdefault('SESSION_CACHE_TTL', 3600)
    app.extensions[EXTENSION_KEY] = SessionCache(
        _connect(app),
        ttl=int(app.config['SESSION_CACHE_TTL'])
    )


def current_cache() -> SessionCache:
    """Get the session cache for the current application."""
    return current_app.extensions[EXTENSION_KEY]  # type: ignore
