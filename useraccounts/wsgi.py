"""Web Server Gateway Interface entry-point."""

import os

from useraccounts.factory import create_web_app

__flask_app__ = None


def application(environ, start_response):    # type: ignore
    """WSGI application."""
    for key, value in environ.items():
        # ``SERVER_NAME`` stays as configured in config.py; under uWSGI it is
        # usually just a container ID.
        if key == 'SERVER_NAME':
            continue
        if type(value) is str:
            os.environ[key] = value

    global __flask_app__
    if __flask_app__ is None:
        __flask_app__ = create_web_app()
    return __flask_app__(environ, start_response)
