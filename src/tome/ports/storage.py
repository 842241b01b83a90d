"""Protocol definitions for local and remote item storage.

Items cross these boundaries as alias-keyed JSON documents (``dict``), the
same shape the stores persist. Libraries validate them into models.
"""

from __future__ import annotations

from typing import Any, Protocol, TypeAlias, runtime_checkable

Document: TypeAlias = dict[str, Any]


@runtime_checkable
class AsyncLocalStoreProtocol(Protocol):
    """Durable local store; the baseline every save must reach."""

    async def save(self, store_name: str, item_id: str, item: Document) -> None:
        """Persist *item* under *item_id*.

        Raises:
            StorageError: If the item cannot be written.
        """
        raise NotImplementedError

    async def load(self, store_name: str, item_id: str) -> Document | None:
        """Load a single item, or None when it is not stored."""
        raise NotImplementedError

    async def load_all_and_update_ids(self, store_name: str) -> list[Document]:
        """Load every item in *store_name*, assigning Ids to items lacking one."""
        raise NotImplementedError

    async def delete(self, store_name: str, item_id: str) -> None:
        """Remove an item; deleting a missing item is not an error."""
        raise NotImplementedError


@runtime_checkable
class LegacyLocalStoreProtocol(Protocol):
    """Synchronous legacy store, read only from a library's point of view."""

    async def load_all_and_update_ids(self, store_name: str) -> list[Document]:
        """Load every item in *store_name*, assigning Ids to items lacking one."""
        raise NotImplementedError

    async def load(self, store_name: str, item_id: str) -> Document | None:
        """Load a single item, or None when it is not stored."""
        raise NotImplementedError


@runtime_checkable
class RemoteAccountStoreProtocol(Protocol):
    """Account-backed remote store. Every operation may fail."""

    async def account_save(self, account_route: str, item: Document) -> Document | None:
        """Save *item* to the account.

        Returns:
            Document | None: Remote listing data, or None when sync is unavailable.

        Raises:
            RemoteError: If the remote save failed.
        """
        raise NotImplementedError

    async def account_delete(self, account_route: str, item_id: str) -> None:
        """Delete an item from the account.

        Raises:
            RemoteError: If the remote delete failed.
        """
        raise NotImplementedError

    async def fetch(self, link: str) -> Document:
        """Fetch a full item from a remote link.

        Raises:
            FetchError: If the item is unreachable or malformed.
        """
        raise NotImplementedError
