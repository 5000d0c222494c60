"""Provides the JSON API for user accounts."""

from typing import Any

from flask import Blueprint, current_app, jsonify, request

from .. import status
from ..auth.decorators import authenticated
from ..auth.tokens import current_tokens
from ..controllers import accounts
from ..services.sessions import current_cache

blueprint = Blueprint('api', __name__, url_prefix='/api/auth')


def _payload() -> Any:
    # Ignore Content-Type header; an unparseable body is an empty payload.
    payload = request.get_json(force=True, silent=True)
    return {} if payload is None else payload


def _respond(data: Any, status_code: int, headers: dict) -> tuple:
    if status_code == status.HTTP_204_NO_CONTENT:
        return '', status_code, headers
    return jsonify(data), status_code, headers


@blueprint.route('/status', methods=['GET'])
def ok() -> tuple:
    """Health check endpoint."""
    return jsonify({'status': 'ok'}), status.HTTP_200_OK


@blueprint.route('/register', methods=['POST'])
def register() -> tuple:
    """Register a new account."""
    data, status_code, headers = accounts.register(
        _payload(), current_tokens(), current_cache(),
        rounds=current_app.config['BCRYPT_ROUNDS'],
        account_number_attempts=current_app.config['ACCOUNT_NUMBER_ATTEMPTS']
    )
    return _respond(data, status_code, headers)


@blueprint.route('/login', methods=['POST'])
def login() -> tuple:
    """Log in by user name or email address."""
    data, status_code, headers = accounts.login(_payload(), current_tokens(),
                                                current_cache())
    return _respond(data, status_code, headers)


@blueprint.route('/update', methods=['POST'])
@authenticated
def update() -> tuple:
    """Update the caller's account."""
    data, status_code, headers = accounts.update(
        request.account, _payload(), current_cache(),
        rounds=current_app.config['BCRYPT_ROUNDS']
    )
    return _respond(data, status_code, headers)


@blueprint.route('/delete', methods=['POST'])
@authenticated
def delete() -> tuple:
    """Delete the caller's account."""
    data, status_code, headers = accounts.delete(request.account,
                                                 current_cache())
    return _respond(data, status_code, headers)


@blueprint.route('/getMe', methods=['GET'])
@authenticated
def get_me() -> tuple:
    """Get the caller's own profile."""
    data, status_code, headers = accounts.get_self(request.account,
                                                   current_cache())
    return _respond(data, status_code, headers)


@blueprint.route('/getByAccountNumber', methods=['GET'])
@authenticated
def get_by_account_number() -> tuple:
    """Look up a profile by account number."""
    data, status_code, headers = accounts.get_by_account_number(request.args)
    return _respond(data, status_code, headers)


@blueprint.route('/getByIdentityNumber', methods=['GET'])
@authenticated
def get_by_identity_number() -> tuple:
    """Look up a profile by identity number."""
    data, status_code, headers = accounts.get_by_identity_number(request.args)
    return _respond(data, status_code, headers)
