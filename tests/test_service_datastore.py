"""Tests for :mod:`useraccounts.services.datastore`."""

from typing import Any
from unittest import TestCase, mock

import sqlalchemy
from flask import Flask

from useraccounts.domain import Account, Profile
from useraccounts.exceptions import Conflict
from useraccounts.services import datastore
from useraccounts.services.datastore import util


def _new_account(**overrides: str) -> Account:
    data = dict(user_name='alice', email_address='alice@mail.com',
                identity_number='1234567890123456',
                account_number='1234567890', password='$2b$04$hash')
    data.update(overrides)
    return datastore.create(**data)


class DatastoreTestCase(TestCase):
    """Runs each test against a fresh in-memory SQLite database."""

    def setUp(self) -> None:
        self.app = Flask('test')
        self.app.config['SQLALCHEMY_DATABASE_URI'] = 'sqlite://'
        datastore.init_app(self.app)
        self.context = self.app.app_context()
        self.context.push()
        datastore.create_all()

    def tearDown(self) -> None:
        datastore.drop_all()
        self.context.pop()


class TestCreate(DatastoreTestCase):
    """:func:`.datastore.create` persists new accounts."""

    def test_create(self) -> None:
        """A new account gets an identifier and timestamps."""
        account = _new_account()
        self.assertIsInstance(account, Account)
        self.assertTrue(bool(account.id))
        self.assertEqual(account.user_name, 'alice')
        self.assertIsNotNone(account.created_at)
        self.assertEqual(datastore.find_by_id(account.id), account)

    def test_duplicate_email(self) -> None:
        """A taken unique field raises :class:`.Conflict`."""
        _new_account()
        with self.assertRaises(Conflict):
            _new_account(user_name='bob',
                         identity_number='6543210987654321',
                         account_number='0987654321')

    def test_conflict_names_column(self) -> None:
        """The conflict message names the column, not the engine error."""
        _new_account()
        with self.assertRaises(Conflict) as ctx:
            _new_account(user_name='bob',
                         identity_number='6543210987654321',
                         account_number='0987654321')
        self.assertEqual(ctx.exception.message,
                         'Duplicate field value: email_address')

    def test_duplicate_account_number(self) -> None:
        """Account numbers are unique too."""
        _new_account()
        with self.assertRaises(Conflict):
            _new_account(user_name='bob', email_address='bob@mail.com',
                         identity_number='6543210987654321')


class TestFind(DatastoreTestCase):
    """Accounts can be found by any unique field."""

    def setUp(self) -> None:
        super(TestFind, self).setUp()
        self.account = _new_account()

    def test_find_by_user_name(self) -> None:
        """Match on user name."""
        found = datastore.find_by_identifiers(user_name='alice')
        self.assertEqual(found.id, self.account.id)

    def test_find_by_any(self) -> None:
        """Any one matching field is enough."""
        found = datastore.find_by_identifiers(
            user_name='nobody', email_address='nobody@mail.com',
            identity_number='1234567890123456'
        )
        self.assertEqual(found.id, self.account.id)

    def test_no_match(self) -> None:
        """Returns None when nothing matches."""
        self.assertIsNone(datastore.find_by_identifiers(user_name='bob'))

    def test_no_criteria(self) -> None:
        """Returns None when no fields are given."""
        self.assertIsNone(datastore.find_by_identifiers())

    def test_find_by_id_missing(self) -> None:
        """Returns None for an unknown identifier."""
        self.assertIsNone(datastore.find_by_id('nope'))

    def test_account_number_exists(self) -> None:
        """Assigned account numbers are detected."""
        self.assertTrue(datastore.account_number_exists('1234567890'))
        self.assertFalse(datastore.account_number_exists('0000000000'))

    def test_profiles(self) -> None:
        """Profiles are available by id, account and identity number."""
        expected = Profile(id=self.account.id, user_name='alice',
                           account_number='1234567890',
                           email_address='alice@mail.com',
                           identity_number='1234567890123456')
        self.assertEqual(datastore.get_profile(self.account.id), expected)
        self.assertEqual(
            datastore.get_profile_by_account_number('1234567890'), expected
        )
        self.assertEqual(
            datastore.get_profile_by_identity_number('1234567890123456'),
            expected
        )
        self.assertIsNone(datastore.get_profile_by_account_number('0'))

    @mock.patch('useraccounts.services.datastore.util.db.session.get')
    def test_db_unavailable(self, mock_get: Any) -> None:
        """When the database squawks, raises :class:`.DatastoreUnavailable`."""
        def raise_op_error(*args: str, **kwargs: str) -> None:
            raise sqlalchemy.exc.OperationalError('statement', {}, None)
        mock_get.side_effect = raise_op_error
        with self.assertRaises(datastore.DatastoreUnavailable):
            datastore.find_by_id(self.account.id)


class TestUpdateAndDelete(DatastoreTestCase):
    """Accounts can be changed and removed."""

    def setUp(self) -> None:
        super(TestUpdateAndDelete, self).setUp()
        self.account = _new_account()

    def test_update_password_only(self) -> None:
        """Fields that are not given are left alone."""
        updated = datastore.update(self.account.id, password='$2b$04$new')
        self.assertEqual(updated.password, '$2b$04$new')
        self.assertEqual(updated.user_name, 'alice')
        self.assertEqual(updated.email_address, 'alice@mail.com')

    def test_update_user_name(self) -> None:
        """A new user name is persisted."""
        datastore.update(self.account.id, user_name='alicia')
        self.assertEqual(datastore.find_by_id(self.account.id).user_name,
                         'alicia')

    def test_update_to_taken_name(self) -> None:
        """Taking another account's user name is a conflict."""
        _new_account(user_name='bob', email_address='bob@mail.com',
                     identity_number='6543210987654321',
                     account_number='0987654321')
        with self.assertRaises(Conflict):
            datastore.update(self.account.id, user_name='bob')

    def test_update_missing(self) -> None:
        """Returns None for an unknown account."""
        self.assertIsNone(datastore.update('nope', user_name='bob'))

    def test_delete(self) -> None:
        """A deleted account is gone."""
        self.assertTrue(datastore.delete(self.account.id))
        self.assertIsNone(datastore.find_by_id(self.account.id))
        self.assertFalse(datastore.delete(self.account.id))


class TestViolatedColumn(TestCase):
    """:func:`.util.violated_column` reads the column from engine errors."""

    def _error(self, detail: str) -> sqlalchemy.exc.IntegrityError:
        return sqlalchemy.exc.IntegrityError('statement', {},
                                             Exception(detail))

    def test_mysql(self) -> None:
        """MySQL names the unique key."""
        error = self._error("(1062, \"Duplicate entry 'bob' for key "
                            "'users.user_name'\")")
        self.assertEqual(util.violated_column(error), 'user_name')

    def test_postgres(self) -> None:
        """PostgreSQL names the constraint."""
        error = self._error('duplicate key value violates unique constraint '
                            '"users_identity_number_key"')
        self.assertEqual(util.violated_column(error), 'identity_number')

    def test_unknown(self) -> None:
        """Unrecognized errors name no column."""
        self.assertIsNone(util.violated_column(self._error('no idea')))
