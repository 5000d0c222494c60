"""Tests for :mod:`useraccounts.factory`."""

from unittest import TestCase

from useraccounts.auth import tokens
from useraccounts.exceptions import ConfigurationError
from useraccounts.factory import create_web_app
from useraccounts.services import sessions


class TestCreateWebApp(TestCase):
    """:func:`.create_web_app` builds a configured application."""

    def test_missing_secret(self):
        """The app will not start without a signing secret."""
        with self.assertRaises(ConfigurationError):
            create_web_app({'JWT_SECRET': None, 'REDIS_FAKE': True})

    def test_bad_lifetime(self):
        """The token lifetime must be parseable."""
        with self.assertRaises(ConfigurationError):
            create_web_app({'JWT_SECRET': 'foosecret',
                            'JWT_EXPIRED': 'forever',
                            'REDIS_FAKE': True})

    def test_services_attached(self):
        """Each app gets its own token service and session cache."""
        config = {'JWT_SECRET': 'foosecret', 'JWT_EXPIRED': '2h',
                  'REDIS_FAKE': True, 'SESSION_CACHE_TTL': 120}
        app = create_web_app(config)
        other = create_web_app(config)
        with app.app_context():
            service = tokens.current_tokens()
            cache = sessions.current_cache()
        self.assertEqual(service.expires_in, 7200)
        self.assertEqual(cache.ttl, 120)
        self.assertIsNot(app.extensions[tokens.EXTENSION_KEY],
                         other.extensions[tokens.EXTENSION_KEY])
