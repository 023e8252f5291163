"""Entrypoints (inbound adapters) for tripatch.

Parse and validate command-line input, call service-layer handlers through
the application built by `tripatch.bootstrap`, and present results.
"""
