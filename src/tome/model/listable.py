"""Listing metadata and the base model shared by every stored item."""

from __future__ import annotations

import time
import uuid
from enum import StrEnum

from pydantic import Field

from tome.model.base import StoredSchema


class Origin(StrEnum):
    """Which backing store a listing currently reflects."""

    LOCAL_STORAGE = "localStorage"
    LOCAL_ASYNC = "localAsync"
    ACCOUNT = "account"
    SERVER = "server"


LOCAL_ORIGINS = frozenset({Origin.LOCAL_STORAGE, Origin.LOCAL_ASYNC})


def now_ms() -> int:
    """Current wall clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def probably_unique_string() -> str:
    """Return a new random identifier for fresh content."""
    return uuid.uuid4().hex


class FilterDimensions(StoredSchema):
    """Structured tags used to filter listings (level, source, type, ...)."""

    level: str | None = Field(default=None, description="Challenge rating, character or spell level.")
    source: str | None = Field(default=None, description="Publication or homebrew source.")
    type: str | None = Field(default=None, description="Creature or content type.")


class ListingMeta(StoredSchema):
    """Identity and search metadata for one listing, independent of the item body."""

    id: str = Field(..., description="Identifier, unique within a library.")
    name: str = Field(default="", description="Display name; half of the secondary identity key.")
    path: str = Field(default="", description="Folder path; half of the secondary identity key.")
    search_hint: str = Field(default="", description="Derived text used for fuzzy search.")
    filter_dimensions: FilterDimensions = Field(default_factory=FilterDimensions)
    link: str = Field(default="", description="Store name or route used to fetch the full item.")
    last_update_ms: int = Field(default=0, description="Epoch milliseconds of the last save.")

    def identity_key(self) -> tuple[str, str]:
        """Return the ``(path, name)`` secondary key."""
        return (self.path, self.name)


class Listable(StoredSchema):
    """Base model for content bodies stored in a library."""

    id: str = Field(default="", description="Identifier; empty for fresh content.")
    name: str = Field(default="", description="Display name.")
    path: str = Field(default="", description="Folder path within the library.")
    version: str = Field(default="", description="Schema version that wrote the item.")
    last_update_ms: int = Field(default=0, description="Epoch milliseconds of the last save.")
