"""Unit tests.

Decoding, merge resolution and engine orchestration run against in-memory
fakes. Adapter helpers may touch a throwaway SQLite database.
"""
