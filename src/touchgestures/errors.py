"""Exceptions raised for caller programming errors.

Recognition failures are never raised; a recognizer that cannot match its
gesture moves to ``State.FAILED`` instead.
"""

from __future__ import annotations


class GestureError(Exception):
    """Base class for touchgestures errors."""


class ConfigurationError(GestureError, ValueError):
    """A recognizer or config value is out of range."""


class DependencyCycleError(GestureError):
    """Installing a require-failure edge would close a cycle."""
