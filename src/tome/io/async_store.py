"""Filesystem-backed async local store.

Layout: ``<base_dir>/<store_name>/<item_id>.json``, one alias-keyed JSON
document per item.
"""

from __future__ import annotations

from pathlib import Path

import anyio
import orjson

from tome.errors import StorageErrorCode
from tome.io._errors import is_valid_key, storage_error, validate_key
from tome.model.listable import probably_unique_string
from tome.ports.storage import AsyncLocalStoreProtocol, Document
from tome.util.logging import get_logger

logger = get_logger(__name__)


class FileSystemAsyncStore(AsyncLocalStoreProtocol):
    """Async local store writing one JSON file per item."""

    def __init__(self, base_dir: str | Path) -> None:
        """Initialize the store rooted at *base_dir*."""
        self._base_dir = Path(base_dir)

    @property
    def base_dir(self) -> Path:
        """Root directory of the store."""
        return self._base_dir

    async def save(self, store_name: str, item_id: str, item: Document) -> None:
        """Write *item* atomically (temp file, then replace).

        Raises:
            StorageError: If the item cannot be serialized or written.
        """
        path = self._item_path(store_name, item_id, operation="save")
        try:
            payload = orjson.dumps(item)
        except TypeError as exc:
            raise storage_error(
                StorageErrorCode.SERIALIZATION_ERROR,
                str(exc),
                operation="save",
                store_name=store_name,
                item_id=item_id,
                path=path,
            ) from exc
        try:
            await _write_atomic(path, payload)
        except OSError as exc:
            raise storage_error(
                StorageErrorCode.IO_ERROR,
                str(exc),
                operation="save",
                store_name=store_name,
                item_id=item_id,
                path=path,
            ) from exc
        logger.debug("Saved %s/%s", store_name, item_id)

    async def load(self, store_name: str, item_id: str) -> Document | None:
        """Load one item.

        Returns:
            Document | None: Stored document, or None if absent.

        Raises:
            StorageError: If the file cannot be read or is not a JSON object.
        """
        path = self._item_path(store_name, item_id, operation="load")
        if not await anyio.Path(path).exists():
            return None
        return await self._read_document(path, store_name=store_name, operation="load")

    async def load_all_and_update_ids(self, store_name: str) -> list[Document]:
        """Load every item in *store_name*, ordered by file name.

        A document whose ``Id`` does not match its file name is moved to
        ``<Id>.json``. Documents without a usable ``Id``, or whose ``Id``
        another file already holds, receive a fresh one first.

        Returns:
            list[Document]: Stored documents.

        Raises:
            StorageError: If any file cannot be read or rewritten.
        """
        validate_key(store_name, operation="load_all_and_update_ids", store_name=store_name, kind="store name")
        store_dir = anyio.Path(self._base_dir / store_name)
        if not await store_dir.exists():
            return []

        try:
            paths = sorted([Path(child) async for child in store_dir.glob("*.json")])
        except OSError as exc:
            raise storage_error(
                StorageErrorCode.IO_ERROR,
                str(exc),
                operation="load_all_and_update_ids",
                store_name=store_name,
                path=Path(store_dir),
            ) from exc

        documents: list[Document] = []
        seen: set[str] = set()
        for path in paths:
            document = await self._read_document(path, store_name=store_name, operation="load_all_and_update_ids")
            item_id = document.get("Id")
            if item_id != path.stem:
                # Keep the stored Id unless it is unusable or already taken by another file.
                if (
                    not is_valid_key(item_id)
                    or item_id in seen
                    or await anyio.Path(self._base_dir / store_name / f"{item_id}.json").exists()
                ):
                    item_id = probably_unique_string()
                document["Id"] = item_id
                logger.info("Moved %s item stored at %s to id %s", store_name, path.name, item_id)
                await self.save(store_name, item_id, document)
                try:
                    await anyio.Path(path).unlink(missing_ok=True)
                except OSError as exc:
                    raise storage_error(
                        StorageErrorCode.IO_ERROR,
                        str(exc),
                        operation="load_all_and_update_ids",
                        store_name=store_name,
                        path=path,
                    ) from exc
            seen.add(item_id)
            documents.append(document)
        return documents

    async def delete(self, store_name: str, item_id: str) -> None:
        """Delete one item; missing items are ignored.

        Raises:
            StorageError: If the file exists but cannot be removed.
        """
        path = self._item_path(store_name, item_id, operation="delete")
        try:
            await anyio.Path(path).unlink(missing_ok=True)
        except OSError as exc:
            raise storage_error(
                StorageErrorCode.IO_ERROR,
                str(exc),
                operation="delete",
                store_name=store_name,
                item_id=item_id,
                path=path,
            ) from exc
        logger.debug("Deleted %s/%s", store_name, item_id)

    def _item_path(self, store_name: str, item_id: str, *, operation: str) -> Path:
        validate_key(store_name, operation=operation, store_name=store_name, kind="store name")
        validate_key(item_id, operation=operation, store_name=store_name, kind="item id")
        return self._base_dir / store_name / f"{item_id}.json"

    async def _read_document(self, path: Path, *, store_name: str, operation: str) -> Document:
        try:
            raw = await anyio.Path(path).read_bytes()
        except OSError as exc:
            raise storage_error(
                StorageErrorCode.IO_ERROR, str(exc), operation=operation, store_name=store_name, path=path
            ) from exc
        try:
            document = orjson.loads(raw)
        except orjson.JSONDecodeError as exc:
            raise storage_error(
                StorageErrorCode.SERIALIZATION_ERROR,
                f"Stored item is not valid JSON: {exc}",
                operation=operation,
                store_name=store_name,
                path=path,
            ) from exc
        if not isinstance(document, dict):
            raise storage_error(
                StorageErrorCode.SERIALIZATION_ERROR,
                "Stored item is not a JSON object",
                operation=operation,
                store_name=store_name,
                path=path,
            )
        return document


async def _write_atomic(path: Path, payload: bytes) -> None:
    target = anyio.Path(path)
    await target.parent.mkdir(parents=True, exist_ok=True)
    temp = anyio.Path(path.with_suffix(".json.tmp"))
    await temp.write_bytes(payload)
    await temp.replace(target)
