"""Integration tests: Alembic migrations and bootstrap wiring on real databases."""
