"""Record storage adapters."""

from .schema import records
from .sqlalchemy_store import SqlAlchemyRecordStore

__all__ = ["SqlAlchemyRecordStore", "records"]
