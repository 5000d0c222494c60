"""
User-account service.

Registration, login and profile management for user accounts, with
JWT-based sessions gated by a short-lived Redis session cache.
"""
