"""Backing store adapters."""

from tome.io.account import AccountClient
from tome.io.async_store import FileSystemAsyncStore
from tome.io.legacy_store import LegacyFileStore

__all__ = ["AccountClient", "FileSystemAsyncStore", "LegacyFileStore"]
