"""Listing: metadata for one stored item plus its lazily loaded body."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Generic, TypeAlias, TypeVar

from pydantic import ValidationError

from tome.errors import FetchError, StorageError
from tome.model.listable import Listable, ListingMeta, Origin
from tome.ports.storage import Document

ItemT = TypeVar("ItemT", bound=Listable)

Fetcher: TypeAlias = Callable[[ListingMeta], Awaitable[Document | None]]


class Listing(Generic[ItemT]):
    """Handle on one stored item.

    The metadata record is shared by reference: changes the library makes
    while saving are visible to every holder of the listing.
    """

    def __init__(
        self,
        meta: ListingMeta,
        origin: Origin,
        value: ItemT | None = None,
        *,
        fetch: Fetcher | None = None,
    ) -> None:
        """Initialize the listing.

        Args:
            meta: Metadata record for the item.
            origin: Store the listing reflects.
            value: Already loaded item body, if any.
            fetch: Loads the item document for *meta* when no body is cached.
        """
        self._meta = meta
        self._origin = Origin(origin)
        self._value = value
        self._fetch = fetch

    def __repr__(self) -> str:
        return f"Listing(id={self._meta.id!r}, name={self._meta.name!r}, origin={self._origin.value!r})"

    def meta(self) -> ListingMeta:
        """Return the mutable metadata record."""
        return self._meta

    @property
    def origin(self) -> Origin:
        """Store this listing reflects."""
        return self._origin

    def has_value(self) -> bool:
        """Whether the item body is cached."""
        return self._value is not None

    def set_value(self, item: ItemT) -> None:
        """Replace the cached item body."""
        self._value = item

    def promote(self, link: str, fetch: Fetcher | None = None) -> None:
        """Mark the listing as account-backed after a successful remote save.

        Only the owning library calls this.
        """
        self._origin = Origin.ACCOUNT
        self._meta.link = link
        if fetch is not None:
            self._fetch = fetch

    async def get_with_template(self, template: ItemT) -> ItemT:
        """Return the item body, fetching it on first access.

        Fields missing from the fetched document take their value from
        *template*, so items written before a schema addition still load.

        Returns:
            ItemT: The cached or freshly fetched item.

        Raises:
            FetchError: If the item cannot be fetched or does not validate.
        """
        if self._value is not None:
            return self._value
        if self._fetch is None:
            raise FetchError("Listing has no fetcher", link=self._meta.link, item_id=self._meta.id)

        try:
            document = await self._fetch(self._meta)
        except StorageError as exc:
            raise FetchError(
                f"Could not load {self._meta.id} from {self._meta.link}: {exc}",
                link=self._meta.link,
                item_id=self._meta.id,
            ) from exc
        if document is None:
            raise FetchError(
                f"Item {self._meta.id} not found at {self._meta.link}",
                link=self._meta.link,
                item_id=self._meta.id,
            )

        merged = {**template.to_document(), **document}
        try:
            item = type(template).model_validate(merged)
        except ValidationError as exc:
            raise FetchError(
                f"Item {self._meta.id} from {self._meta.link} is malformed: {exc}",
                link=self._meta.link,
                item_id=self._meta.id,
            ) from exc
        self._value = item
        return item
