"""Concrete adapters (SQLAlchemy) for tripatch ports."""
