"""Base schema configuration for tome Pydantic models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_pascal


class BaseSchema(BaseModel):
    """Base schema for internal records (errors, settings payloads)."""

    model_config = ConfigDict(
        extra="ignore",
        validate_assignment=True,
        str_strip_whitespace=True,
        use_enum_values=True,
    )


class StoredSchema(BaseModel):
    """Base for records that are persisted to stores or sent over the wire.

    Attributes are snake_case in Python and PascalCase on disk (``Id``,
    ``LastUpdateMs``) so documents written by earlier clients load as-is.
    Unknown keys are kept so that newer documents survive a save by this code.
    """

    model_config = ConfigDict(
        alias_generator=to_pascal,
        populate_by_name=True,
        extra="allow",
        validate_assignment=True,
    )

    def to_document(self) -> dict:
        """Return the JSON-compatible, alias-keyed document for storage."""
        return self.model_dump(mode="json", by_alias=True)
