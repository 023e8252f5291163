"""Database plumbing shared by tripatch adapters."""
