"""Records schema.

Defines the ``records`` table: one row per merge key.

Constraints (enforced here):

| Constraint          | Purpose                                        |
|---------------------|------------------------------------------------|
| PRIMARY KEY(id)     | store-assigned identity                        |
| UNIQUE(internal_id) | one record per merge key; upsert conflict target |

Updatable columns are nullable: a stored field is a value or null.
"""

from __future__ import annotations

from sqlalchemy import BigInteger, Column, Identity, String, Table, UniqueConstraint

from tripatch.adapters.db.metadata import metadata
from tripatch.adapters.db.sa_types import BIGINT_PK

__all__ = ["records"]

records = Table(
    "records",
    metadata,
    Column(
        "id",
        BIGINT_PK,
        Identity(start=1),
        nullable=False,
        primary_key=True,
        comment="Store-assigned identity. Never supplied by callers.",
    ),
    Column(
        "internal_id",
        BigInteger,
        nullable=False,
        comment="Caller-assigned merge key; immutable after creation.",
    ),
    Column("one", String, nullable=True),
    Column("two", String, nullable=True),
    UniqueConstraint("internal_id"),
    comment="Partially-updatable records addressed by internal_id.",
)
