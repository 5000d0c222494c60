"""Application factory for the user accounts service."""

import traceback
from typing import Any, Mapping, Optional

from flask import Flask, Response, jsonify
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from werkzeug.exceptions import HTTPException

from . import logging, status
from .auth import tokens
from .exceptions import ConfigurationError, ErrorKind, ServiceError
from .routes import blueprint
from .services import datastore, sessions

logger = logging.getLogger(__name__)


def create_web_app(config: Optional[Mapping[str, Any]] = None) -> Flask:
    """
    Initialize and configure the user accounts application.

    Parameters
    ----------
    config : dict
        Overrides applied on top of :mod:`useraccounts.config`.

    Raises
    ------
    :class:`.ConfigurationError`
        If no token signing secret is configured, or the token lifetime
        cannot be parsed.

    """
    app = Flask('useraccounts')
    app.config.from_pyfile('config.py')
    if config is not None:
        app.config.update(config)

    logging.setup_logger(app.config.get('LOGLEVEL', logging.LOGLEVEL))
    if not app.config.get('JWT_SECRET'):
        raise ConfigurationError('JWT_SECRET must be set')

    tokens.init_app(app)
    datastore.init_app(app)
    sessions.init_app(app)
    app.register_blueprint(blueprint)

    if app.config['CREATE_DB']:
        with app.app_context():
            datastore.create_all()

    register_error_handlers(app)
    return app


def register_error_handlers(app: Flask) -> None:
    """Register error handlers for the Flask app."""
    debug = bool(app.config.get('DEBUG'))

    def render(message: str, status_code: int, kind: ErrorKind,
               error: BaseException) -> Response:
        body = {'message': message}
        if debug:
            body['kind'] = kind.value
            body['stack'] = ''.join(traceback.format_exception(
                type(error), error, error.__traceback__
            ))
        response: Response = jsonify(body)
        response.status_code = status_code
        return response

    @app.errorhandler(ServiceError)
    def handle_service_error(error: ServiceError) -> Response:
        if error.kind is ErrorKind.INTERNAL:
            logger.error('Internal error: %s', error.message, exc_info=error)
        return render(error.message, error.status_code, error.kind, error)

    @app.errorhandler(HTTPException)
    def handle_http_exception(error: HTTPException) -> Response:
        kind = ErrorKind.NOT_FOUND \
            if error.code == status.HTTP_404_NOT_FOUND \
            else ErrorKind.VALIDATION
        return render(error.name, error.code or 500, kind, error)

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(error: IntegrityError) -> Response:
        logger.debug('Unhandled integrity error: %s', error.orig)
        return render('Duplicate field value', status.HTTP_409_CONFLICT,
                      ErrorKind.CONFLICT, error)

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(error: SQLAlchemyError) -> Response:
        logger.error('Database error: %s', error, exc_info=error)
        return render('Something went wrong',
                      status.HTTP_500_INTERNAL_SERVER_ERROR,
                      ErrorKind.INTERNAL, error)

    @app.errorhandler(Exception)
    def handle_unexpected(error: Exception) -> Response:
        logger.error('Unhandled exception: %s', error, exc_info=error)
        return render('Something went wrong',
                      status.HTTP_500_INTERNAL_SERVER_ERROR,
                      ErrorKind.INTERNAL, error)
