"""Remote lead store (PostgREST) client and local credential settings."""

from .client import StoreClient
from .exceptions import StoreConfigError, StoreError, TransportError

__all__ = ["StoreClient", "StoreError", "StoreConfigError", "TransportError"]
