"""Exceptions raised by the status service."""

from __future__ import annotations


class SpyStatusError(Exception):
    """Base class for service errors."""


class FetchError(SpyStatusError):
    """The status API could not be reached or answered with an error."""


class ConfigError(SpyStatusError):
    """The configuration file is malformed."""
