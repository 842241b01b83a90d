"""Error types shared by the library core and its store adapters."""

from __future__ import annotations

from enum import StrEnum

from pydantic import Field

from tome.model.base import BaseSchema


class TomeError(Exception):
    """Base class for tome errors."""


class StorageErrorCode(StrEnum):
    """Categorized error codes for local storage operations."""

    NOT_FOUND = "not_found"
    IO_ERROR = "io_error"
    SERIALIZATION_ERROR = "serialization_error"
    VALIDATION_ERROR = "validation_error"


class StorageErrorDetails(BaseSchema):
    """Detailed storage error context."""

    operation: str | None = Field(None, description="Storage operation name")
    store_name: str | None = Field(None, description="Store namespace")
    item_id: str | None = Field(None, description="Item identifier")
    path: str | None = Field(None, description="Filesystem path")
    reason: str | None = Field(None, description="Additional error context")


class StorageErrorInfo(BaseSchema):
    """Structured storage error data."""

    code: StorageErrorCode = Field(..., description="Storage error code")
    message: str = Field(..., min_length=1, description="Error message")
    details: StorageErrorDetails | None = Field(None, description="Error details")


class StorageError(TomeError):
    """Local store unreachable or corrupt. Fatal to the operation in progress."""

    def __init__(self, info: StorageErrorInfo) -> None:
        """Initialize the storage error.

        Args:
            info: Structured storage error information.
        """
        super().__init__(info.message)
        self.info = info

    @property
    def code(self) -> StorageErrorCode:
        """Error code of the underlying failure."""
        return StorageErrorCode(self.info.code)


class RemoteError(TomeError):
    """Remote account save or delete failed (including "not signed in")."""


class FetchError(TomeError):
    """A listing body could not be fetched or was malformed."""

    def __init__(self, message: str, *, link: str | None = None, item_id: str | None = None) -> None:
        """Initialize the fetch error.

        Args:
            message: Human readable failure description.
            link: Resource address the fetch used.
            item_id: Identifier of the listing being fetched.
        """
        super().__init__(message)
        self.link = link
        self.item_id = item_id


class CatalogValidationError(TomeError):
    """A reference catalog record is missing required identity fields."""
