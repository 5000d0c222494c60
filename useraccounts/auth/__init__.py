"""
Authentication for the user-accounts service.

- :mod:`.passwords` hashes and checks credentials.
- :mod:`.tokens` issues and verifies signed session tokens.
- :mod:`.decorators` provides the authorization gate for protected routes.
"""
