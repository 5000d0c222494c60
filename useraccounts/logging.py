"""Logging for the user-accounts service, with JSON-formatted output."""

import logging
import os
from typing import Union

from pythonjsonlogger.json import JsonFormatter

LOGLEVEL = int(os.environ.get('LOGLEVEL', '20'))
FORMAT = '%(asctime)s %(levelname)s %(name)s %(message)s'

_handler_installed = False


def setup_logger(level: Union[int, str] = LOGLEVEL) -> None:
    """Attach a JSON handler to the root logger (once per process)."""
    global _handler_installed
    root = logging.getLogger()
    root.setLevel(int(level))
    if _handler_installed:
        return
    handler = logging.StreamHandler()
    formatter = JsonFormatter(
        FORMAT,
        rename_fields={'levelname': 'level', 'asctime': 'timestamp'}
    )
    handler.setFormatter(formatter)
    root.addHandler(handler)
    _handler_installed = True


def getLogger(name: str) -> logging.Logger:
    """Get a logger for ``name`` at the configured level."""
    logger = logging.getLogger(name)
    logger.setLevel(LOGLEVEL)
    return logger
