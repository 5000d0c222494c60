"""Request controllers for the user accounts application."""

from . import accounts, forms
