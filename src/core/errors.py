from __future__ import annotations


class BoundedStoreError(Exception):
    """Base error for the session store server."""


class ConfigurationError(BoundedStoreError):
    """Raised when a capacity, TTL or interval bound is not positive."""


class ValidationError(BoundedStoreError):
    """Raised when user input is invalid."""
