"""Creature stat block model."""

from __future__ import annotations

import re

from pydantic import Field

from tome.model.base import StoredSchema
from tome.model.kind import ContentKind
from tome.model.listable import FilterDimensions, Listable

STAT_BLOCK_VERSION = "3.0.0"


class ValueAndNotes(StoredSchema):
    """A numeric value with a free-text annotation, e.g. ``15 (natural armor)``."""

    value: int = 10
    notes: str = ""


class NameAndContent(StoredSchema):
    """A named block of rules text (trait, action, reaction)."""

    name: str = ""
    content: str = ""
    usage: str = ""


class NameAndModifier(StoredSchema):
    """A saving throw or skill bonus."""

    name: str = ""
    modifier: int = 0


class AbilityScores(StoredSchema):
    """The six ability scores."""

    strength: int = Field(default=10, alias="Str")
    dexterity: int = Field(default=10, alias="Dex")
    constitution: int = Field(default=10, alias="Con")
    intelligence: int = Field(default=10, alias="Int")
    wisdom: int = Field(default=10, alias="Wis")
    charisma: int = Field(default=10, alias="Cha")


class StatBlock(Listable):
    """Full creature or character statistics."""

    version: str = STAT_BLOCK_VERSION
    source: str = ""
    type: str = ""
    hp: ValueAndNotes = Field(default_factory=lambda: ValueAndNotes(value=1, notes="(1d1+0)"), alias="HP")
    ac: ValueAndNotes = Field(default_factory=lambda: ValueAndNotes(value=10), alias="AC")
    initiative_modifier: int = 0
    initiative_special_roll: str | None = None
    initiative_advantage: bool = False
    speed: list[str] = Field(default_factory=list)
    abilities: AbilityScores = Field(default_factory=AbilityScores)
    damage_vulnerabilities: list[str] = Field(default_factory=list)
    damage_resistances: list[str] = Field(default_factory=list)
    damage_immunities: list[str] = Field(default_factory=list)
    condition_immunities: list[str] = Field(default_factory=list)
    saves: list[NameAndModifier] = Field(default_factory=list)
    skills: list[NameAndModifier] = Field(default_factory=list)
    senses: list[str] = Field(default_factory=list)
    languages: list[str] = Field(default_factory=list)
    challenge: str = ""
    traits: list[NameAndContent] = Field(default_factory=list)
    actions: list[NameAndContent] = Field(default_factory=list)
    bonus_actions: list[NameAndContent] = Field(default_factory=list)
    reactions: list[NameAndContent] = Field(default_factory=list)
    legendary_actions: list[NameAndContent] = Field(default_factory=list)
    description: str = ""
    player: str = ""
    image_url: str = Field(default="", alias="ImageURL")

    @classmethod
    def default(cls) -> StatBlock:
        """Return an empty stat block with every field at its default."""
        return cls()


_NON_WORD = re.compile(r"[^\w\s]")


def get_search_hint(stat_block: StatBlock) -> str:
    """Search text for a stat block: its type, lowercased, punctuation removed."""
    return _NON_WORD.sub("", stat_block.type.lower())


def get_filter_dimensions(stat_block: StatBlock) -> FilterDimensions:
    """Filter by challenge, source and type."""
    return FilterDimensions(level=stat_block.challenge, source=stat_block.source, type=stat_block.type)


STAT_BLOCKS = ContentKind(
    store_name="Creatures",
    account_route="statblocks",
    model=StatBlock,
    create_empty=StatBlock.default,
    get_search_hint=get_search_hint,
    get_filter_dimensions=get_filter_dimensions,
)
