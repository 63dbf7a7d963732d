"""Constraints, binding helpers, API operation codes and envelope encryption for services."""

__version__ = "0.1.0"