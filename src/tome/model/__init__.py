"""Data models for stored content and listing metadata."""

from tome.model.encounter import ENCOUNTERS, CombatantState, SavedEncounter
from tome.model.kind import ContentKind
from tome.model.listable import FilterDimensions, Listable, ListingMeta, Origin
from tome.model.persistent_character import PERSISTENT_CHARACTERS, PersistentCharacter
from tome.model.spell import SPELLS, Spell
from tome.model.stat_block import STAT_BLOCKS, StatBlock

__all__ = [
    "ENCOUNTERS",
    "PERSISTENT_CHARACTERS",
    "SPELLS",
    "STAT_BLOCKS",
    "CombatantState",
    "ContentKind",
    "FilterDimensions",
    "Listable",
    "ListingMeta",
    "Origin",
    "PersistentCharacter",
    "SavedEncounter",
    "Spell",
    "StatBlock",
]
