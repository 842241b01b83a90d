"""Helpers for building structured storage errors."""

from __future__ import annotations

from pathlib import Path

from tome.errors import StorageError, StorageErrorCode, StorageErrorDetails, StorageErrorInfo


def storage_error(
    code: StorageErrorCode,
    message: str,
    *,
    operation: str,
    store_name: str | None = None,
    item_id: str | None = None,
    path: Path | None = None,
    reason: str | None = None,
) -> StorageError:
    """Build a :class:`StorageError` with populated details.

    Returns:
        StorageError: Error ready to raise.
    """
    return StorageError(
        StorageErrorInfo(
            code=code,
            message=message or code.value,
            details=StorageErrorDetails(
                operation=operation,
                store_name=store_name,
                item_id=item_id,
                path=str(path) if path is not None else None,
                reason=reason,
            ),
        )
    )


def is_valid_key(value: object) -> bool:
    """Whether *value* can name a single path segment."""
    if not isinstance(value, str) or value in {"", ".", ".."}:
        return False
    return "/" not in value and "\\" not in value


def validate_key(value: str, *, operation: str, store_name: str, kind: str) -> None:
    """Reject store names and ids that cannot be used as a single path segment.

    Raises:
        StorageError: If *value* is empty or contains a path separator.
    """
    if not is_valid_key(value):
        raise storage_error(
            StorageErrorCode.VALIDATION_ERROR,
            f"Invalid {kind}: {value!r}",
            operation=operation,
            store_name=store_name,
            reason=f"invalid_{kind.replace(' ', '_')}",
        )
