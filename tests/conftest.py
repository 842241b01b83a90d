"""Common pytest configuration and store fakes."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from tome.errors import FetchError, RemoteError
from tome.io.async_store import FileSystemAsyncStore
from tome.io.legacy_store import LegacyFileStore
from tome.library.library import Library
from tome.model.kind import ContentKind
from tome.model.stat_block import STAT_BLOCKS


class RecordingRemote:
    """In-memory account store that records every call."""

    def __init__(self, *, signed_in: bool = True, fail_saves: bool = False, fail_deletes: bool = False) -> None:
        self.signed_in = signed_in
        self.fail_saves = fail_saves
        self.fail_deletes = fail_deletes
        self.saved: list[tuple[str, dict[str, Any]]] = []
        self.deleted: list[tuple[str, str]] = []
        self.documents: dict[str, dict[str, Any]] = {}
        self.delete_gate: asyncio.Event | None = None

    async def account_save(self, account_route: str, item: dict[str, Any]) -> dict[str, Any] | None:
        if self.fail_saves:
            raise RemoteError("account save failed")
        if not self.signed_in:
            return None
        self.saved.append((account_route, item))
        link = f"/my/{account_route}/{item['Id']}"
        self.documents[link] = item
        return {"Id": item["Id"], "Name": item.get("Name", ""), "Link": link}

    async def account_delete(self, account_route: str, item_id: str) -> None:
        if self.delete_gate is not None:
            await self.delete_gate.wait()
        self.deleted.append((account_route, item_id))
        if self.fail_deletes:
            raise RemoteError("account delete failed")
        self.documents.pop(f"/my/{account_route}/{item_id}", None)

    async def fetch(self, link: str) -> dict[str, Any]:
        if link not in self.documents:
            raise FetchError(f"Nothing at {link}", link=link)
        return dict(self.documents[link])


@pytest.fixture
def anyio_backend() -> str:
    """Force asyncio backend for anyio-powered tests.

    Returns:
        str: The backend name.
    """
    return "asyncio"


@pytest.fixture
def async_store(tmp_path: Path) -> FileSystemAsyncStore:
    """Async store rooted in a temp directory.

    Returns:
        FileSystemAsyncStore: Empty store.
    """
    return FileSystemAsyncStore(tmp_path / "store")


@pytest.fixture
def legacy_store(tmp_path: Path) -> LegacyFileStore:
    """Legacy store rooted in a temp directory.

    Returns:
        LegacyFileStore: Empty store.
    """
    return LegacyFileStore(tmp_path / "legacy")


@pytest.fixture
def signed_out_remote() -> RecordingRemote:
    """Account store for a user who is not signed in.

    Returns:
        RecordingRemote: Remote whose saves return nothing.
    """
    return RecordingRemote(signed_in=False)


@pytest.fixture
def signed_in_remote() -> RecordingRemote:
    """Account store for a signed-in user.

    Returns:
        RecordingRemote: Remote whose saves succeed.
    """
    return RecordingRemote()


@pytest.fixture
def make_library(
    async_store: FileSystemAsyncStore, legacy_store: LegacyFileStore
) -> Callable[..., Library[Any]]:
    """Build libraries over the temp stores.

    Returns:
        Callable[..., Library[Any]]: Factory taking an optional remote and kind.
    """

    def _make(remote: Any = None, kind: ContentKind[Any] = STAT_BLOCKS, **kwargs: Any) -> Library[Any]:
        return Library(kind, async_store, legacy_store, remote, **kwargs)

    return _make
