"""Contract tests.

The record store and both upsert strategies must be observably equivalent on
every backend; each test is parametrized over SQLite and PostgreSQL.
"""
