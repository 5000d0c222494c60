"""Tests for :mod:`useraccounts.services.sessions`."""

from unittest import TestCase, mock

from flask import Flask
from redis.exceptions import ConnectionError, TimeoutError

from useraccounts.services import sessions


class TestSessionCache(TestCase):
    """The session cache keeps one token per account, with a TTL."""

    def setUp(self):
        self.connection = mock.MagicMock()
        self.cache = sessions.SessionCache(self.connection, ttl=3600)

    def test_key(self):
        """Entries are keyed by account identifier."""
        self.assertEqual(sessions.SessionCache.key('abc'), 'user:abc')

    def test_put(self):
        """A token is stored with the configured expiry."""
        self.cache.put('abc', 'footoken')
        self.connection.set.assert_called_once_with('user:abc', 'footoken',
                                                    ex=3600)

    def test_put_with_ttl(self):
        """The expiry can be overridden per entry."""
        self.cache.put('abc', 'footoken', ttl=60)
        self.connection.set.assert_called_once_with('user:abc', 'footoken',
                                                    ex=60)

    def test_get(self):
        """The cached token is returned as a string."""
        self.connection.get.return_value = b'footoken'
        self.assertEqual(self.cache.get('abc'), 'footoken')
        self.connection.get.assert_called_once_with('user:abc')

    def test_is_live(self):
        """Any cached value makes the session live."""
        self.connection.get.return_value = 'someothertoken'
        self.assertTrue(self.cache.is_live('abc'))

    def test_is_not_live(self):
        """No cached value means no live session."""
        self.connection.get.return_value = None
        self.assertFalse(self.cache.is_live('abc'))

    def test_connection_failed(self):
        """:class:`.SessionCacheUnavailable` is raised when Redis fails."""
        self.connection.set.side_effect = ConnectionError
        with self.assertRaises(sessions.SessionCacheUnavailable):
            self.cache.put('abc', 'footoken')

    def test_read_timed_out(self):
        """Timeouts on read also raise :class:`.SessionCacheUnavailable`."""
        self.connection.get.side_effect = TimeoutError
        with self.assertRaises(sessions.SessionCacheUnavailable):
            self.cache.is_live('abc')


class TestInitApp(TestCase):
    """:func:`.sessions.init_app` attaches a cache to the application."""

    @mock.patch('useraccounts.services.sessions.redis')
    def test_init_app(self, mock_redis):
        """A Redis client is created from the app config."""
        app = Flask('test')
        app.config.update({'REDIS_URL': 'redis://cache:6379/1',
                           'REDIS_TIMEOUT': 2,
                           'SESSION_CACHE_TTL': 600})
        sessions.init_app(app)
        mock_redis.Redis.from_url.assert_called_once_with(
            'redis://cache:6379/1', socket_timeout=2.0,
            socket_connect_timeout=2.0, decode_responses=True
        )
        with app.app_context():
            cache = sessions.current_cache()
        self.assertEqual(cache.ttl, 600)
        self.assertIs(cache.r, mock_redis.Redis.from_url.return_value)

    def test_fake_redis(self):
        """With ``REDIS_FAKE`` set, an in-process fake is used."""
        app = Flask('test')
        app.config['REDIS_FAKE'] = True
        sessions.init_app(app)
        with app.app_context():
            cache = sessions.current_cache()
            cache.put('abc', 'footoken')
            self.assertEqual(cache.get('abc'), 'footoken')
            self.assertTrue(0 < cache.r.ttl('user:abc') <= 3600)
