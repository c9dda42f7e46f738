"""Exception types raised outside the pure graph engine."""

from __future__ import annotations


class IncludeGraphError(Exception):
    """Base class for IncludeGraph errors."""


class ConfigError(IncludeGraphError, ValueError):
    """A configuration value is missing or invalid."""


class ChurnError(IncludeGraphError):
    """Commit history could not be read."""
