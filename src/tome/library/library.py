"""Library: the reconciled in-memory collection of listings for one content type."""

from __future__ import annotations

import asyncio
from collections import Counter
from collections.abc import AsyncIterator, Callable, Iterable
from contextlib import asynccontextmanager
from typing import Generic, TypeVar

from pydantic import ValidationError

from tome.errors import RemoteError, StorageErrorCode
from tome.io._errors import storage_error
from tome.library.listing import Fetcher, Listing
from tome.model.kind import ContentKind
from tome.model.listable import (
    LOCAL_ORIGINS,
    Listable,
    ListingMeta,
    Origin,
    now_ms,
    probably_unique_string,
)
from tome.ports.storage import (
    AsyncLocalStoreProtocol,
    Document,
    LegacyLocalStoreProtocol,
    RemoteAccountStoreProtocol,
)
from tome.util.logging import get_logger

logger = get_logger(__name__)

ItemT = TypeVar("ItemT", bound=Listable)


class Library(Generic[ItemT]):
    """Listings of one content type, kept free of duplicate items across origins.

    Every save lands in the async local store before anything else is
    attempted; the remote account save is best effort. Duplicates created by
    saving the same logical item under different origins are collapsed by
    the overwrite rules in :meth:`save_new_listing` and
    :meth:`save_edited_listing`.

    The in-memory collection changes before an operation's first suspension,
    so callers observe their own saves and deletes in issue order. Store
    writes for a given Id run under that Id's lock.
    """

    def __init__(
        self,
        kind: ContentKind[ItemT],
        async_store: AsyncLocalStoreProtocol,
        legacy_store: LegacyLocalStoreProtocol,
        remote: RemoteAccountStoreProtocol | None = None,
        *,
        loading_finished: Callable[[str], None] | None = None,
    ) -> None:
        """Initialize an empty library.

        Args:
            kind: Capability bundle for the content type.
            async_store: Durable local store.
            legacy_store: Migration source used when the async store is empty.
            remote: Account store; None disables remote sync.
            loading_finished: Called with the store name once :meth:`load` completes.
        """
        self._kind = kind
        self._async_store = async_store
        self._legacy_store = legacy_store
        self._remote = remote
        self._loading_finished = loading_finished

        self._listings: list[Listing[ItemT]] = []
        self._id_locks: dict[str, asyncio.Lock] = {}
        self._id_lock_users: Counter[str] = Counter()

    @property
    def store_name(self) -> str:
        """Store namespace of the content type."""
        return self._kind.store_name

    def get_all_listings(self) -> list[Listing[ItemT]]:
        """Return a snapshot of the current listings."""
        return list(self._listings)

    def get_listing(self, item_id: str) -> Listing[ItemT] | None:
        """Return the listing with *item_id*, if any."""
        return next((listing for listing in self._listings if listing.meta().id == item_id), None)

    def add_listings(
        self,
        metas: Iterable[ListingMeta],
        origin: Origin,
        *,
        fetch: Fetcher | None = None,
    ) -> None:
        """Append listings loaded from a backing store. No deduplication.

        Args:
            metas: Listing metadata in load order.
            origin: Store the metadata came from.
            fetch: Loader for item bodies; defaults to the store matching *origin*.
        """
        fetcher = fetch or self._fetcher_for(Origin(origin))
        self._listings.extend(Listing(meta, origin, fetch=fetcher) for meta in metas)

    async def load(self) -> None:
        """Load listings from the async store, migrating from the legacy store when it is empty.

        Migrated items are copied into the async store, so later saves of one
        item do not hide the others. Listings from this load keep the
        ``localStorage`` origin.

        Raises:
            StorageError: If a store cannot be read or written, or holds an invalid item.
        """
        documents = await self._async_store.load_all_and_update_ids(self.store_name)
        origin = Origin.LOCAL_ASYNC
        if not documents:
            documents = await self._legacy_store.load_all_and_update_ids(self.store_name)
            origin = Origin.LOCAL_STORAGE

        metas = [self._meta_from_document(document) for document in documents]
        if origin == Origin.LOCAL_STORAGE:
            for document in documents:
                await self._async_store.save(self.store_name, document["Id"], document)
        self.add_listings(metas, origin)
        logger.info("Loaded %d %s listings from %s", len(metas), self.store_name, origin.value)

        if self._loading_finished is not None:
            self._loading_finished(self.store_name)

    async def delete_listing(self, item_id: str) -> None:
        """Remove a listing from memory, then from the async store, then from the account.

        The remote delete is best effort; local removal is the guarantee.

        Raises:
            StorageError: If the async store delete fails.
        """
        self._listings = [listing for listing in self._listings if listing.meta().id != item_id]

        async with self._id_lock(item_id):
            await self._async_store.delete(self.store_name, item_id)
            if self._remote is None:
                return
            try:
                await self._remote.account_delete(self._kind.account_route, item_id)
            except RemoteError as exc:
                logger.warning("Remote delete of %s/%s failed: %s", self.store_name, item_id, exc)

    async def save_new_listing(self, item: ItemT) -> Listing[ItemT]:
        """Save fresh content as a new listing.

        Local-only listings with the same path and name are considered stale
        once the save completes and are deleted.

        Returns:
            Listing[ItemT]: The new listing.

        Raises:
            StorageError: If the async store write fails.
        """
        if not item.id:
            item.id = probably_unique_string()

        listings_to_overwrite = [
            listing
            for listing in self._listings
            if listing.origin in LOCAL_ORIGINS and listing.meta().identity_key() == (item.path, item.name)
        ]

        listing = Listing(
            self._meta_from_item(item, last_update_ms=now_ms()),
            Origin.LOCAL_ASYNC,
            fetch=self._fetcher_for(Origin.LOCAL_ASYNC),
        )
        saved_listing = await self._save_listing(listing, item)

        for stale in listings_to_overwrite:
            # Same Id means the save already replaced it.
            if stale.meta().id == item.id:
                continue
            await self.delete_listing(stale.meta().id)

        return saved_listing

    async def save_edited_listing(self, listing: Listing[ItemT], item: ItemT) -> Listing[ItemT]:
        """Save an edit of *listing*.

        Every listing sharing the Id, or sharing path+name, with *listing* is
        deleted unless it is server content. Editing server content forks a
        personal copy under a new Id and leaves the reference listing alone.

        Returns:
            Listing[ItemT]: The saved listing (the fork for server content).

        Raises:
            StorageError: If an async store write or delete fails.
        """
        target = listing.meta()
        target_id = target.id
        target_key = target.path + target.name

        listings_to_overwrite = [
            existing
            for existing in self._listings
            if existing.meta().id == target_id or existing.meta().path + existing.meta().name == target_key
        ]
        for existing in listings_to_overwrite:
            if existing.origin != Origin.SERVER:
                await self.delete_listing(existing.meta().id)

        if listing.origin == Origin.SERVER:
            item.id = probably_unique_string()
            fork = Listing(
                self._meta_from_item(item, last_update_ms=now_ms()),
                Origin.LOCAL_ASYNC,
                fetch=self._fetcher_for(Origin.LOCAL_ASYNC),
            )
            logger.info("Forked %s/%s as %s", self.store_name, target_id, item.id)
            return await self._save_listing(fork, item)

        if not item.id:
            item.id = target_id
        return await self._save_listing(listing, item)

    async def get_or_create_listing_by_id(self, item_id: str) -> Listing[ItemT]:
        """Return the listing with *item_id*, creating an empty item under that Id if needed.

        Returns:
            Listing[ItemT]: Existing or newly saved listing.
        """
        existing = self.get_listing(item_id)
        if existing is not None:
            return existing

        template = self._kind.create_empty()
        template.id = item_id
        return await self.save_new_listing(template)

    async def update_listing(self, listing: Listing[ItemT], item: ItemT) -> Listing[ItemT]:
        """Persist *item* through *listing* without applying overwrite rules.

        Returns:
            Listing[ItemT]: The saved listing.
        """
        return await self._save_listing(listing, item)

    async def _save_listing(self, listing: Listing[ItemT], item: ItemT) -> Listing[ItemT]:
        item.last_update_ms = now_ms()
        if not item.id:
            item.id = probably_unique_string()
        self._refresh_meta(listing.meta(), item)
        self._register(listing)

        async with self._id_lock(item.id):
            await self._async_store.save(self.store_name, item.id, item.to_document())
            listing.set_value(item)

            if self._remote is None:
                return listing
            try:
                save_result = await self._remote.account_save(self._kind.account_route, item.to_document())
            except RemoteError as exc:
                logger.warning("Remote save of %s/%s failed: %s", self.store_name, item.id, exc)
                return listing

            if not save_result or listing.origin == Origin.ACCOUNT:
                return listing

            listing.promote(self._kind.account_link(item.id), fetch=self._fetcher_for(Origin.ACCOUNT))
            logger.debug("Promoted %s/%s to account", self.store_name, item.id)
            return listing

    @asynccontextmanager
    async def _id_lock(self, item_id: str) -> AsyncIterator[None]:
        """Hold the lock for *item_id*; the lock is dropped once nobody holds or awaits it."""
        lock = self._id_locks.setdefault(item_id, asyncio.Lock())
        self._id_lock_users[item_id] += 1
        try:
            async with lock:
                yield
        finally:
            self._id_lock_users[item_id] -= 1
            if not self._id_lock_users[item_id]:
                del self._id_lock_users[item_id]
                del self._id_locks[item_id]

    def _register(self, listing: Listing[ItemT]) -> None:
        """Put *listing* in the collection, replacing any listing with the same Id in place."""
        item_id = listing.meta().id
        registered = False
        updated: list[Listing[ItemT]] = []
        for existing in self._listings:
            if existing is listing or existing.meta().id == item_id:
                if not registered:
                    updated.append(listing)
                    registered = True
                continue
            updated.append(existing)
        if not registered:
            updated.append(listing)
        self._listings = updated

    def _refresh_meta(self, meta: ListingMeta, item: ItemT) -> None:
        meta.id = item.id
        meta.name = item.name
        meta.path = item.path
        meta.search_hint = self._kind.get_search_hint(item)
        meta.filter_dimensions = self._kind.get_filter_dimensions(item)
        meta.last_update_ms = item.last_update_ms

    def _meta_from_item(self, item: ItemT, *, last_update_ms: int) -> ListingMeta:
        return ListingMeta(
            id=item.id,
            name=item.name,
            path=item.path,
            search_hint=self._kind.get_search_hint(item),
            filter_dimensions=self._kind.get_filter_dimensions(item),
            link=self.store_name,
            last_update_ms=last_update_ms,
        )

    def _meta_from_document(self, document: Document) -> ListingMeta:
        try:
            item = self._kind.model.model_validate(document)
        except ValidationError as exc:
            raise storage_error(
                StorageErrorCode.VALIDATION_ERROR,
                f"Stored {self.store_name} item is invalid: {exc}",
                operation="load",
                store_name=self.store_name,
                item_id=str(document.get("Id")),
            ) from exc
        return self._meta_from_item(item, last_update_ms=item.last_update_ms)

    def _fetcher_for(self, origin: Origin) -> Fetcher:
        if origin == Origin.LOCAL_ASYNC:
            return self._fetch_local_async
        if origin == Origin.LOCAL_STORAGE:
            return self._fetch_legacy
        return self._fetch_remote

    async def _fetch_local_async(self, meta: ListingMeta) -> Document | None:
        return await self._async_store.load(self.store_name, meta.id)

    async def _fetch_legacy(self, meta: ListingMeta) -> Document | None:
        return await self._legacy_store.load(self.store_name, meta.id)

    async def _fetch_remote(self, meta: ListingMeta) -> Document | None:
        if self._remote is None:
            return None
        return await self._remote.fetch(meta.link)
