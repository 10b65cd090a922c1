"""Unit tests for the database layer in athlinked/core/database.

Repositories run against in-memory SQLite so no external database service is
needed.
"""
