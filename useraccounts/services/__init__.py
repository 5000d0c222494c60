"""Integrations with the datastore and the session cache."""
