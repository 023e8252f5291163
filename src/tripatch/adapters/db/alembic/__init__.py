"""Alembic migration scripts for tripatch (``script_location``)."""
