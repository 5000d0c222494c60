"""HTTP routes for the user accounts application."""

from .api import blueprint
