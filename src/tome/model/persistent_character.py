"""Persistent character model: a stat block whose state outlives encounters."""

from __future__ import annotations

import re

from pydantic import Field

from tome.model import stat_block as stat_blocks
from tome.model.kind import ContentKind
from tome.model.listable import FilterDimensions, Listable, now_ms, probably_unique_string
from tome.model.stat_block import StatBlock

PERSISTENT_CHARACTER_VERSION = "1.0.0"

_LEVEL_NUMBER = re.compile(r"\d+")


class PersistentCharacter(Listable):
    """A player character tracked across encounters."""

    version: str = PERSISTENT_CHARACTER_VERSION
    current_hp: int = Field(default=1, alias="CurrentHP")
    stat_block: StatBlock = Field(default_factory=StatBlock)
    notes: str = ""
    use_initiative_roll: bool = False

    @classmethod
    def initialize(cls, stat_block: StatBlock) -> PersistentCharacter:
        """Create a new character from *stat_block* at full hit points."""
        return cls(
            id=probably_unique_string(),
            name=stat_block.name,
            path=stat_block.path,
            current_hp=stat_block.hp.value,
            stat_block=stat_block.model_copy(deep=True),
            last_update_ms=now_ms(),
        )

    @classmethod
    def default(cls) -> PersistentCharacter:
        """Return a fresh character built from an empty stat block."""
        return cls.initialize(StatBlock.default())


def get_search_hint(character: PersistentCharacter) -> str:
    """Search text comes from the character's stat block."""
    return stat_blocks.get_search_hint(character.stat_block)


def get_filter_dimensions(character: PersistentCharacter) -> FilterDimensions:
    """Filter by total character level, source and type.

    The stat block challenge holds class levels for characters, e.g.
    ``"Fighter 5, Rogue 5"``; the level is the sum of every number in it.
    """
    numbers = _LEVEL_NUMBER.findall(character.stat_block.challenge)
    level = str(sum(int(number) for number in numbers)) if numbers else None
    return FilterDimensions(
        level=level,
        source=character.stat_block.source,
        type=character.stat_block.type,
    )


PERSISTENT_CHARACTERS = ContentKind(
    store_name="PersistentCharacters",
    account_route="persistentcharacters",
    model=PersistentCharacter,
    create_empty=PersistentCharacter.default,
    get_search_hint=get_search_hint,
    get_filter_dimensions=get_filter_dimensions,
)
