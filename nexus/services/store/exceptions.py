"""Custom exceptions for the remote store service."""

from typing import Optional


class StoreError(Exception):
    """Base exception for all store-related errors."""


class TransportError(StoreError):
    """Raised when a store request fails or returns a non-2xx status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class StoreConfigError(StoreError):
    """Raised when no usable store URL or key is configured."""
