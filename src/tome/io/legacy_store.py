"""Legacy synchronous local store.

Earlier versions kept each content type as one JSON document,
``<base_dir>/<store_name>.json``, mapping item keys to items. The library
only reads it, as a migration source while the async store is empty. The
async methods exist to match the async store's interface; the work itself is
synchronous.
"""

from __future__ import annotations

from pathlib import Path

import orjson

from tome.errors import StorageErrorCode
from tome.io._errors import storage_error, validate_key
from tome.model.listable import probably_unique_string
from tome.ports.storage import Document, LegacyLocalStoreProtocol
from tome.util.logging import get_logger

logger = get_logger(__name__)


class LegacyFileStore(LegacyLocalStoreProtocol):
    """Single-document-per-store legacy storage."""

    def __init__(self, base_dir: str | Path) -> None:
        """Initialize the store rooted at *base_dir*."""
        self._base_dir = Path(base_dir)

    async def load_all_and_update_ids(self, store_name: str) -> list[Document]:
        """Load every item; items lacking an ``Id`` take their key as Id.

        An item whose Id is already used by an earlier entry gets a fresh Id.

        Returns:
            list[Document]: Stored documents in key order of the file.
        """
        return self.load_all_and_update_ids_sync(store_name)

    async def load(self, store_name: str, item_id: str) -> Document | None:
        """Load one item by Id.

        Returns:
            Document | None: The stored item or None.
        """
        return self.load_sync(store_name, item_id)

    def load_all_and_update_ids_sync(self, store_name: str) -> list[Document]:
        """Synchronous form of :meth:`load_all_and_update_ids`.

        Returns:
            list[Document]: Stored documents.

        Raises:
            StorageError: If the document cannot be read or rewritten.
        """
        entries = self._read(store_name, operation="load_all_and_update_ids")
        updated: dict[str, Document] = {}
        changed = False
        for key, item in entries.items():
            item_id = item.get("Id") or key or probably_unique_string()
            if item_id in updated:
                logger.warning("Legacy %s item %s reuses id %s; assigning a new id", store_name, key, item_id)
                item_id = probably_unique_string()
            if item_id != item.get("Id") or item_id != key:
                item["Id"] = item_id
                changed = True
            updated[item_id] = item
        if changed:
            logger.info("Updated ids in legacy store %s", store_name)
            self._write(store_name, updated, operation="load_all_and_update_ids")
        return list(updated.values())

    def load_sync(self, store_name: str, item_id: str) -> Document | None:
        """Synchronous form of :meth:`load`.

        Returns:
            Document | None: The stored item or None.
        """
        return self._read(store_name, operation="load").get(item_id)

    def save(self, store_name: str, item_id: str, item: Document) -> None:
        """Store *item* under *item_id*, replacing any previous value."""
        entries = self._read(store_name, operation="save")
        entries[item_id] = item
        self._write(store_name, entries, operation="save")

    def _path(self, store_name: str, *, operation: str) -> Path:
        validate_key(store_name, operation=operation, store_name=store_name, kind="store name")
        return self._base_dir / f"{store_name}.json"

    def _read(self, store_name: str, *, operation: str) -> dict[str, Document]:
        path = self._path(store_name, operation=operation)
        if not path.exists():
            return {}
        try:
            payload = orjson.loads(path.read_bytes())
        except OSError as exc:
            raise storage_error(
                StorageErrorCode.IO_ERROR, str(exc), operation=operation, store_name=store_name, path=path
            ) from exc
        except orjson.JSONDecodeError as exc:
            raise storage_error(
                StorageErrorCode.SERIALIZATION_ERROR,
                f"Legacy store is not valid JSON: {exc}",
                operation=operation,
                store_name=store_name,
                path=path,
            ) from exc
        if not isinstance(payload, dict) or not all(isinstance(item, dict) for item in payload.values()):
            raise storage_error(
                StorageErrorCode.SERIALIZATION_ERROR,
                "Legacy store must map keys to JSON objects",
                operation=operation,
                store_name=store_name,
                path=path,
            )
        return payload

    def _write(self, store_name: str, entries: dict[str, Document], *, operation: str) -> None:
        path = self._path(store_name, operation=operation)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(orjson.dumps(entries, option=orjson.OPT_INDENT_2))
        except OSError as exc:
            raise storage_error(
                StorageErrorCode.IO_ERROR, str(exc), operation=operation, store_name=store_name, path=path
            ) from exc
