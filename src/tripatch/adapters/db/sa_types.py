"""Portable SQLAlchemy column types for tripatch."""

from sqlalchemy import BigInteger, Integer

__all__ = ["BIGINT_PK"]

# BIGINT identity on Postgres; SQLite only autoincrements an INTEGER PRIMARY KEY.
BIGINT_PK = BigInteger().with_variant(Integer(), "sqlite")
