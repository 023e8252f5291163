"""Bootstrap (composition root) for tripatch.

Assembles the application at runtime: reads configuration, builds the pooled
SQLAlchemy engine, and wires a unit-of-work factory into the configured
upsert engine.

Inner layers (interfaces, service_layer, adapters) must not import
`tripatch.bootstrap`.
"""

from .bootstrap import AppContainer, bootstrap, build_uow_factory

__all__ = ["AppContainer", "bootstrap", "build_uow_factory"]
