"""Libraries: one library per content type plus cross-type updates."""

from __future__ import annotations

from collections.abc import Callable
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from tome.io.account import AccountClient
from tome.io.async_store import FileSystemAsyncStore
from tome.io.legacy_store import LegacyFileStore
from tome.library.library import Library
from tome.library.listing import Listing
from tome.model.encounter import ENCOUNTERS, SavedEncounter
from tome.model.kind import ContentKind
from tome.model.persistent_character import PERSISTENT_CHARACTERS, PersistentCharacter
from tome.model.spell import SPELLS, Spell
from tome.model.stat_block import STAT_BLOCKS, StatBlock
from tome.ports.storage import AsyncLocalStoreProtocol, LegacyLocalStoreProtocol, RemoteAccountStoreProtocol
from tome.util.logging import get_logger

if TYPE_CHECKING:
    from tome.config.settings import _Settings

logger = get_logger(__name__)


class LibraryType(StrEnum):
    """Names of the libraries held by :class:`Libraries`."""

    STAT_BLOCKS = "StatBlocks"
    PERSISTENT_CHARACTERS = "PersistentCharacters"
    ENCOUNTERS = "Encounters"
    SPELLS = "Spells"


CONTENT_KINDS: dict[LibraryType, ContentKind[Any]] = {
    LibraryType.STAT_BLOCKS: STAT_BLOCKS,
    LibraryType.PERSISTENT_CHARACTERS: PERSISTENT_CHARACTERS,
    LibraryType.ENCOUNTERS: ENCOUNTERS,
    LibraryType.SPELLS: SPELLS,
}


class Libraries:
    """Owns the stat block, persistent character, encounter and spell libraries.

    All four share the same store handles; each uses its own store name.
    """

    def __init__(
        self,
        async_store: AsyncLocalStoreProtocol,
        legacy_store: LegacyLocalStoreProtocol,
        remote: RemoteAccountStoreProtocol | None = None,
        *,
        loading_finished: Callable[[str], None] | None = None,
    ) -> None:
        """Create the libraries. Call :meth:`load` to populate them.

        Args:
            async_store: Durable local store.
            legacy_store: Legacy store used for migration.
            remote: Account store; None disables remote sync.
            loading_finished: Called with each store name as its library finishes loading.
        """
        self.stat_blocks: Library[StatBlock] = Library(
            STAT_BLOCKS, async_store, legacy_store, remote, loading_finished=loading_finished
        )
        self.persistent_characters: Library[PersistentCharacter] = Library(
            PERSISTENT_CHARACTERS, async_store, legacy_store, remote, loading_finished=loading_finished
        )
        self.encounters: Library[SavedEncounter] = Library(
            ENCOUNTERS, async_store, legacy_store, remote, loading_finished=loading_finished
        )
        self.spells: Library[Spell] = Library(
            SPELLS, async_store, legacy_store, remote, loading_finished=loading_finished
        )

    @classmethod
    def from_settings(cls, settings: _Settings, *, loading_finished: Callable[[str], None] | None = None) -> Libraries:
        """Build libraries over the filesystem stores and account client named in *settings*.

        Returns:
            Libraries: Unloaded libraries.
        """
        return cls(
            FileSystemAsyncStore(settings.async_store_dir),
            LegacyFileStore(settings.legacy_store_dir),
            AccountClient.from_settings(settings),
            loading_finished=loading_finished,
        )

    def all(self) -> list[Library[Any]]:
        """Return every library in a fixed order."""
        return [self.stat_blocks, self.persistent_characters, self.encounters, self.spells]

    def get_library(self, library_type: LibraryType | str) -> Library[Any] | None:
        """Return the library for *library_type*, or None for an unknown type."""
        libraries: dict[str, Library[Any]] = {
            LibraryType.STAT_BLOCKS: self.stat_blocks,
            LibraryType.PERSISTENT_CHARACTERS: self.persistent_characters,
            LibraryType.ENCOUNTERS: self.encounters,
            LibraryType.SPELLS: self.spells,
        }
        return libraries.get(str(library_type))

    async def load(self) -> None:
        """Load every library from its stores.

        Raises:
            StorageError: If a store cannot be read.
        """
        for library in self.all():
            await library.load()

    async def update_persistent_character(
        self, character_id: str, fields: dict[str, Any]
    ) -> Listing[PersistentCharacter]:
        """Apply a partial update (e.g. ``{"current_hp": 0}``) to a stored character.

        Used when a combatant linked to a persistent character changes a
        tracked field. Skips the edit overwrite rules and runs only the save.

        Returns:
            Listing[PersistentCharacter]: The updated listing.

        Raises:
            KeyError: If no character has *character_id*.
            FetchError: If the stored character cannot be loaded.
            StorageError: If the save fails.
        """
        listing = self.persistent_characters.get_listing(character_id)
        if listing is None:
            message = f"Unknown persistent character id: {character_id}"
            raise KeyError(message)

        character = await listing.get_with_template(PersistentCharacter.default())
        updated = PersistentCharacter.model_validate({**character.model_dump(), **fields})
        logger.debug("Updating persistent character %s fields %s", character_id, sorted(fields))
        return await self.persistent_characters.update_listing(listing, updated)
