"""Unit tests for the Libraries container."""

from __future__ import annotations

from pathlib import Path

import pytest
from conftest import RecordingRemote

from tome.config.settings import _Settings
from tome.io.account import AccountClient
from tome.io.async_store import FileSystemAsyncStore
from tome.io.legacy_store import LegacyFileStore
from tome.library.libraries import Libraries, LibraryType
from tome.model.persistent_character import PersistentCharacter
from tome.model.stat_block import StatBlock, ValueAndNotes

pytestmark = pytest.mark.anyio


def test_get_library_by_type(async_store: FileSystemAsyncStore, legacy_store: LegacyFileStore) -> None:
    """Every library type maps to its own store name; unknown names give None."""
    libraries = Libraries(async_store, legacy_store)

    assert libraries.get_library(LibraryType.STAT_BLOCKS) is libraries.stat_blocks
    assert libraries.get_library("Spells") is libraries.spells
    assert libraries.get_library("Maps") is None
    assert [library.store_name for library in libraries.all()] == [
        "Creatures",
        "PersistentCharacters",
        "SavedEncounters",
        "Spells",
    ]


def test_from_settings_uses_data_dir(tmp_path: Path) -> None:
    """Store locations and account sync come from settings."""
    settings = _Settings(TOME_DATA_DIR=tmp_path, TOME_ACCOUNT_TOKEN="secret")

    libraries = Libraries.from_settings(settings)

    remote = libraries.stat_blocks._remote
    assert isinstance(remote, AccountClient)
    assert remote.signed_in


async def test_load_reports_each_store(async_store: FileSystemAsyncStore, legacy_store: LegacyFileStore) -> None:
    """The loading callback fires once per library."""
    finished: list[str] = []
    libraries = Libraries(async_store, legacy_store, loading_finished=finished.append)

    await libraries.load()

    assert finished == ["Creatures", "PersistentCharacters", "SavedEncounters", "Spells"]


async def test_persistent_character_loads_from_legacy_store(
    async_store: FileSystemAsyncStore, legacy_store: LegacyFileStore
) -> None:
    """A character kept only in the legacy store is listed and loadable."""
    character = PersistentCharacter.initialize(StatBlock(name="Aria", hp=ValueAndNotes(value=12)))
    legacy_store.save("PersistentCharacters", character.id, character.to_document())
    libraries = Libraries(async_store, legacy_store)

    await libraries.load()

    listings = libraries.persistent_characters.get_all_listings()
    assert [listing.meta().name for listing in listings] == ["Aria"]
    loaded = await listings[0].get_with_template(PersistentCharacter.default())
    assert loaded.current_hp == 12


async def test_update_persistent_character_persists_fields(
    async_store: FileSystemAsyncStore, legacy_store: LegacyFileStore
) -> None:
    """A partial update is saved to the async store and the account."""
    remote = RecordingRemote()
    libraries = Libraries(async_store, legacy_store, remote)
    character = PersistentCharacter.initialize(StatBlock(name="Aria", hp=ValueAndNotes(value=12)))
    await libraries.persistent_characters.save_new_listing(character)

    listing = await libraries.update_persistent_character(character.id, {"current_hp": 0})

    assert listing.meta().id == character.id
    stored = await async_store.load("PersistentCharacters", character.id)
    assert stored is not None
    assert stored["CurrentHP"] == 0
    assert stored["StatBlock"]["Name"] == "Aria"
    assert remote.saved[-1][0] == "persistentcharacters"


async def test_update_unknown_persistent_character_raises(
    async_store: FileSystemAsyncStore, legacy_store: LegacyFileStore
) -> None:
    """Updating a character that is not listed raises KeyError."""
    libraries = Libraries(async_store, legacy_store)

    with pytest.raises(KeyError, match="Unknown persistent character id"):
        await libraries.update_persistent_character("missing", {"current_hp": 0})


async def test_updating_one_legacy_character_keeps_the_others(
    async_store: FileSystemAsyncStore, legacy_store: LegacyFileStore
) -> None:
    """A hit point change on one migrated character does not hide the rest."""
    aria = PersistentCharacter.initialize(StatBlock(name="Aria", hp=ValueAndNotes(value=12)))
    bram = PersistentCharacter.initialize(StatBlock(name="Bram", hp=ValueAndNotes(value=20)))
    legacy_store.save("PersistentCharacters", aria.id, aria.to_document())
    legacy_store.save("PersistentCharacters", bram.id, bram.to_document())
    libraries = Libraries(async_store, legacy_store)
    await libraries.load()

    await libraries.update_persistent_character(aria.id, {"current_hp": 3})

    reloaded = Libraries(async_store, legacy_store)
    await reloaded.load()
    names = sorted(listing.meta().name for listing in reloaded.persistent_characters.get_all_listings())
    assert names == ["Aria", "Bram"]
    aria_listing = reloaded.persistent_characters.get_listing(aria.id)
    assert aria_listing is not None
    assert (await aria_listing.get_with_template(PersistentCharacter.default())).current_hp == 3


async def test_listing_held_before_update_returns_latest_character(
    async_store: FileSystemAsyncStore, legacy_store: LegacyFileStore
) -> None:
    """A listing fetched before an update serves the updated character."""
    libraries = Libraries(async_store, legacy_store)
    character = PersistentCharacter.initialize(StatBlock(name="Aria", hp=ValueAndNotes(value=12)))
    await libraries.persistent_characters.save_new_listing(character)
    listing = libraries.persistent_characters.get_listing(character.id)
    assert listing is not None

    await libraries.update_persistent_character(character.id, {"current_hp": 5})

    latest = await listing.get_with_template(PersistentCharacter.default())
    assert latest.current_hp == 5
    assert latest.stat_block.hp.value == 12
