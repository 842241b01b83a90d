"""Protocols for the backing stores consumed by libraries."""

from tome.ports.storage import (
    AsyncLocalStoreProtocol,
    LegacyLocalStoreProtocol,
    RemoteAccountStoreProtocol,
)

__all__ = [
    "AsyncLocalStoreProtocol",
    "LegacyLocalStoreProtocol",
    "RemoteAccountStoreProtocol",
]
