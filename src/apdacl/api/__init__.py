"""API layer: the query/transform surface handed to HTTP handlers and the CLI.

Key rules:

1. No SQLAlchemy imports - only call repo functions
2. No re-sorting of rows; the statement decides the order
3. Return envelope models or raise NotificationFetchError
"""
