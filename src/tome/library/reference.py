"""Read-only catalog of published content loaded from a JSON file."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Generic, TypeVar

import anyio
import orjson
from pydantic import ValidationError

from tome.errors import CatalogValidationError
from tome.model.kind import ContentKind
from tome.model.listable import Listable, ListingMeta
from tome.ports.storage import Document
from tome.util.logging import get_logger

logger = get_logger(__name__)

ItemT = TypeVar("ItemT", bound=Listable)

# Kobold Fight Club looks for basic rules creatures in the monster manual.
SOURCE_ABBREVIATIONS = {
    "monster-manual": "mm",
    "basic-rules": "mm",
    "players-handbook": "phb",
}

_WHITESPACE = re.compile(r"\s")
_NOT_ID_CHAR = re.compile(r"[^a-z0-9-]")


def format_string_for_id(value: str) -> str:
    """Lowercase, replace whitespace with dashes, drop other non-word characters."""
    return _NOT_ID_CHAR.sub("", _WHITESPACE.sub("-", value.lower()))


def create_id(name: str, source: str) -> str:
    """Build the catalog Id ``<source prefix>.<name>``, e.g. ``mm.goblin``."""
    source_string = format_string_for_id(source)
    source_prefix = SOURCE_ABBREVIATIONS.get(source_string, source_string)
    return f"{source_prefix}.{format_string_for_id(name)}"


class ReferenceLibrary(Generic[ItemT]):
    """Published items keyed by catalog Id, with listing metadata for each."""

    def __init__(self, route: str, kind: ContentKind[ItemT]) -> None:
        """Initialize an empty catalog.

        Args:
            route: Route prefix for item links, e.g. ``/statblocks/``.
            kind: Content type of the catalog items.
        """
        self._route = route
        self._kind = kind
        self._items: dict[str, ItemT] = {}
        self._listings: list[ListingMeta] = []

    @classmethod
    async def from_file(cls, path: Path, route: str, kind: ContentKind[ItemT]) -> ReferenceLibrary[ItemT]:
        """Load a catalog from a JSON array of items.

        Returns:
            ReferenceLibrary[ItemT]: The populated catalog.

        Raises:
            CatalogValidationError: If the file is not a JSON array or any
                record lacks a Name or Source.
        """
        library = cls(route, kind)
        try:
            payload = orjson.loads(await anyio.Path(path).read_bytes())
        except orjson.JSONDecodeError as exc:
            message = f"Couldn't read {path} as a library: {exc}"
            raise CatalogValidationError(message) from exc
        if not isinstance(payload, list):
            message = f"Couldn't read {path} as a library: expected a JSON array"
            raise CatalogValidationError(message)
        library.add(payload)
        logger.info("Loaded %d items from %s", len(payload), path)
        return library

    def add(self, items: list[Any]) -> None:
        """Add raw catalog records, assigning each its catalog Id.

        Raises:
            CatalogValidationError: On the first record missing Name or Source.
        """
        for record in items:
            if not isinstance(record, dict) or not (record.get("Name") and record.get("Source")):
                message = f"Missing Name or Source: Couldn't import {orjson.dumps(record).decode('utf-8')}"
                raise CatalogValidationError(message)
            item_id = create_id(record["Name"], record["Source"])
            try:
                item = self._kind.model.model_validate({**record, "Id": item_id})
            except ValidationError as exc:
                message = f"Couldn't import {item_id}: {exc}"
                raise CatalogValidationError(message) from exc
            self._items[item_id] = item
            self._listings.append(
                ListingMeta(
                    id=item_id,
                    name=item.name,
                    path=item.path or "",
                    search_hint=self._kind.get_search_hint(item),
                    filter_dimensions=self._kind.get_filter_dimensions(item),
                    link=self._route + item_id,
                    last_update_ms=0,
                )
            )

    def get_by_id(self, item_id: str) -> ItemT | None:
        """Return the item with *item_id*, if cataloged."""
        return self._items.get(item_id)

    def get_listings(self) -> list[ListingMeta]:
        """Return listing metadata for every item."""
        return self._listings

    def route(self) -> str:
        """Route prefix used for item links."""
        return self._route

    async def fetch(self, meta: ListingMeta) -> Document | None:
        """Fetch an item document in-process; usable as a listing fetcher."""
        item = self._items.get(meta.id)
        return item.to_document() if item is not None else None
