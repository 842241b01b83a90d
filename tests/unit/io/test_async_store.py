"""Unit tests for the filesystem async store."""

from __future__ import annotations

from pathlib import Path

import orjson
import pytest

from tome.errors import StorageError, StorageErrorCode
from tome.io.async_store import FileSystemAsyncStore

pytestmark = pytest.mark.anyio


async def test_save_and_load(async_store: FileSystemAsyncStore) -> None:
    """Saved documents load back unchanged."""
    document = {"Id": "goblin", "Name": "Goblin", "HP": {"Value": 7, "Notes": "(2d6)"}}

    await async_store.save("Creatures", "goblin", document)

    assert await async_store.load("Creatures", "goblin") == document
    assert (async_store.base_dir / "Creatures" / "goblin.json").exists()
    assert not (async_store.base_dir / "Creatures" / "goblin.json.tmp").exists()


async def test_load_missing_item_returns_none(async_store: FileSystemAsyncStore) -> None:
    """Absent items are not an error."""
    assert await async_store.load("Creatures", "nobody") is None
    assert await async_store.load_all_and_update_ids("Creatures") == []


async def test_load_all_assigns_missing_ids(async_store: FileSystemAsyncStore) -> None:
    """Documents stored without an Id are moved under a fresh one."""
    store_dir = async_store.base_dir / "Creatures"
    store_dir.mkdir(parents=True)
    (store_dir / "orphan.json").write_bytes(orjson.dumps({"Name": "Orphan"}))
    (store_dir / "kept.json").write_bytes(orjson.dumps({"Id": "kept", "Name": "Kept"}))

    documents = await async_store.load_all_and_update_ids("Creatures")

    assert [document["Name"] for document in documents] == ["Kept", "Orphan"]
    new_id = documents[1]["Id"]
    assert new_id
    assert not (store_dir / "orphan.json").exists()
    assert await async_store.load("Creatures", new_id) == documents[1]


async def test_delete_ignores_missing_items(async_store: FileSystemAsyncStore) -> None:
    """Deleting twice is harmless."""
    await async_store.save("Creatures", "goblin", {"Id": "goblin"})

    await async_store.delete("Creatures", "goblin")
    await async_store.delete("Creatures", "goblin")

    assert await async_store.load("Creatures", "goblin") is None


async def test_corrupt_file_raises_serialization_error(async_store: FileSystemAsyncStore) -> None:
    """Unparseable files are reported, not skipped."""
    store_dir = async_store.base_dir / "Creatures"
    store_dir.mkdir(parents=True)
    (store_dir / "broken.json").write_text("{not json", encoding="utf-8")

    with pytest.raises(StorageError) as exc_info:
        await async_store.load_all_and_update_ids("Creatures")

    assert exc_info.value.code == StorageErrorCode.SERIALIZATION_ERROR


async def test_non_object_document_raises_serialization_error(async_store: FileSystemAsyncStore) -> None:
    """Every stored item must be a JSON object."""
    store_dir = async_store.base_dir / "Creatures"
    store_dir.mkdir(parents=True)
    (store_dir / "list.json").write_bytes(orjson.dumps([1, 2, 3]))

    with pytest.raises(StorageError) as exc_info:
        await async_store.load("Creatures", "list")

    assert exc_info.value.code == StorageErrorCode.SERIALIZATION_ERROR


@pytest.mark.parametrize("item_id", ["", "..", "a/b", "a\\b"])
async def test_invalid_item_id_is_rejected(async_store: FileSystemAsyncStore, item_id: str) -> None:
    """Ids must be a single path segment."""
    with pytest.raises(StorageError) as exc_info:
        await async_store.save("Creatures", item_id, {"Id": item_id})

    assert exc_info.value.code == StorageErrorCode.VALIDATION_ERROR
    assert exc_info.value.info.details is not None
    assert exc_info.value.info.details.reason == "invalid_item_id"


async def test_unwritable_directory_raises_io_error(tmp_path: Path) -> None:
    """Write failures surface as IO errors."""
    blocker = tmp_path / "store"
    blocker.write_text("not a directory", encoding="utf-8")
    store = FileSystemAsyncStore(blocker)

    with pytest.raises(StorageError) as exc_info:
        await store.save("Creatures", "goblin", {"Id": "goblin"})

    assert exc_info.value.code == StorageErrorCode.IO_ERROR


async def test_load_all_moves_items_to_their_id(async_store: FileSystemAsyncStore) -> None:
    """A file named differently from its Id is moved so the item can be loaded and deleted by Id."""
    store_dir = async_store.base_dir / "Creatures"
    store_dir.mkdir(parents=True)
    (store_dir / "copied.json").write_bytes(orjson.dumps({"Id": "goblin", "Name": "Goblin"}))

    documents = await async_store.load_all_and_update_ids("Creatures")

    assert [document["Id"] for document in documents] == ["goblin"]
    assert not (store_dir / "copied.json").exists()
    assert await async_store.load("Creatures", "goblin") == documents[0]
    await async_store.delete("Creatures", "goblin")
    assert await async_store.load_all_and_update_ids("Creatures") == []


async def test_load_all_gives_duplicate_ids_a_fresh_id(async_store: FileSystemAsyncStore) -> None:
    """A misplaced copy of an Id that another file holds keeps both items."""
    store_dir = async_store.base_dir / "Creatures"
    store_dir.mkdir(parents=True)
    (store_dir / "goblin.json").write_bytes(orjson.dumps({"Id": "goblin", "Name": "Goblin"}))
    (store_dir / "copy.json").write_bytes(orjson.dumps({"Id": "goblin", "Name": "Goblin Copy"}))
    (store_dir / "bad.json").write_bytes(orjson.dumps({"Id": "../escape", "Name": "Escape"}))

    documents = await async_store.load_all_and_update_ids("Creatures")

    ids = [document["Id"] for document in documents]
    assert len(set(ids)) == 3
    assert "goblin" in ids
    assert "../escape" not in ids
    assert sorted(path.stem for path in store_dir.glob("*.json")) == sorted(ids)
    original = await async_store.load("Creatures", "goblin")
    assert original is not None
    assert original["Name"] == "Goblin"
