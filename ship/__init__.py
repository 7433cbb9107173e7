"""ship - conditional release orchestrator for the store demo services."""

__version__ = "0.4.0"
