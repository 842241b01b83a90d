"""Saved encounter model."""

from __future__ import annotations

from pydantic import Field

from tome.model.base import StoredSchema
from tome.model.kind import ContentKind
from tome.model.listable import FilterDimensions, Listable
from tome.model.stat_block import StatBlock

ENCOUNTER_VERSION = "2.0.0"


class CombatantState(StoredSchema):
    """One combatant as stored inside an encounter."""

    id: str = ""
    stat_block: StatBlock = Field(default_factory=StatBlock)
    persistent_character_id: str | None = None
    max_hp: int = Field(default=1, alias="MaxHP")
    current_hp: int = Field(default=1, alias="CurrentHP")
    temporary_hp: int = Field(default=0, alias="TemporaryHP")
    initiative: int = 0
    alias: str = ""
    index_label: int | None = None
    tags: list[str] = Field(default_factory=list)
    hidden: bool = False
    revealed_ac: bool = Field(default=False, alias="RevealedAC")

    def display_name(self) -> str:
        """Alias if one was given, else the stat block name."""
        return self.alias or self.stat_block.name


class SavedEncounter(Listable):
    """A prepared or in-progress encounter."""

    version: str = ENCOUNTER_VERSION
    combatants: list[CombatantState] = Field(default_factory=list)
    active_combatant_id: str | None = None
    round_counter: int | None = None
    background_image_url: str | None = Field(default=None, alias="BackgroundImageUrl")

    @classmethod
    def default(cls) -> SavedEncounter:
        """Return an encounter without combatants."""
        return cls()


def get_search_hint(encounter: SavedEncounter) -> str:
    """Search by the names of the combatants."""
    return " ".join(combatant.display_name() for combatant in encounter.combatants)


def get_filter_dimensions(encounter: SavedEncounter) -> FilterDimensions:
    """Encounters have no filter dimensions."""
    return FilterDimensions()


ENCOUNTERS = ContentKind(
    store_name="SavedEncounters",
    account_route="encounters",
    model=SavedEncounter,
    create_empty=SavedEncounter.default,
    get_search_hint=get_search_hint,
    get_filter_dimensions=get_filter_dimensions,
)
