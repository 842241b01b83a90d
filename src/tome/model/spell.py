"""Spell model."""

from __future__ import annotations

import re

from pydantic import Field

from tome.model.kind import ContentKind
from tome.model.listable import FilterDimensions, Listable

SPELL_VERSION = "1.0.0"

_NON_WORD = re.compile(r"[^\w\s]")
_HINT_WORDS = 20


class Spell(Listable):
    """A spell description."""

    version: str = SPELL_VERSION
    source: str = ""
    level: int = Field(default=0, ge=0, le=9)
    school: str = ""
    casting_time: str = ""
    range: str = ""
    components: str = ""
    duration: str = ""
    classes: list[str] = Field(default_factory=list)
    description: str = ""
    ritual: bool = False

    @classmethod
    def default(cls) -> Spell:
        """Return an empty cantrip."""
        return cls()


def get_search_hint(spell: Spell) -> str:
    """Search by school, classes and the opening words of the description."""
    words = spell.description.split()[:_HINT_WORDS]
    text = " ".join([spell.school, *spell.classes, *words])
    return _NON_WORD.sub("", text.lower()).strip()


def get_filter_dimensions(spell: Spell) -> FilterDimensions:
    """Filter by spell level and source."""
    return FilterDimensions(level=str(spell.level), source=spell.source)


SPELLS = ContentKind(
    store_name="Spells",
    account_route="spells",
    model=Spell,
    create_empty=Spell.default,
    get_search_hint=get_search_hint,
    get_filter_dimensions=get_filter_dimensions,
)
