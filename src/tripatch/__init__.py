"""tripatch

Partial-update (PATCH) semantics for relational records: tri-state fields
(present, explicit null, missing) merged into stored rows by a race-free
merge-upsert engine with a row-lock or an atomic-upsert strategy.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
