"""Per-content-type capability bundle handed to a library."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

from tome.model.listable import FilterDimensions, Listable

ItemT = TypeVar("ItemT", bound=Listable)


@dataclass(frozen=True)
class ContentKind(Generic[ItemT]):
    """Everything a library needs to know about one content type.

    Content types are configuration values rather than library subclasses.
    """

    store_name: str
    account_route: str
    model: type[ItemT]
    create_empty: Callable[[], ItemT]
    get_search_hint: Callable[[ItemT], str]
    get_filter_dimensions: Callable[[ItemT], FilterDimensions]

    def account_link(self, item_id: str) -> str:
        """Return the account route for *item_id* (``/my/{route}/{id}``)."""
        return f"/my/{self.account_route}/{item_id}"
