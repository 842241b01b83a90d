"""HTTP client for the account-backed remote store."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

import httpx

from tome.errors import FetchError, RemoteError
from tome.ports.storage import Document, RemoteAccountStoreProtocol
from tome.util.logging import get_logger

if TYPE_CHECKING:
    from tome.config.settings import _Settings

logger = get_logger(__name__)


class AccountClient(RemoteAccountStoreProtocol):
    """Saves, deletes and fetches items on the user's account.

    Without a token the user is not signed in: saves return None and deletes
    do nothing, without touching the network. Fetching published content
    does not need a token.
    """

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        *,
        timeout: float = 10.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Server root, e.g. ``https://example.com``.
            token: Bearer token of the signed-in user, if any.
            timeout: Request timeout in seconds for clients created per call.
            http_client: Optional pre-configured HTTP client for dependency
                injection. If None, a client is created per request.
        """
        self.base_url = base_url.rstrip("/")
        self._token = token
        self._timeout = timeout
        self._http_client = http_client

    @classmethod
    def from_settings(cls, settings: _Settings, *, http_client: httpx.AsyncClient | None = None) -> AccountClient:
        """Build a client from runtime settings.

        Returns:
            AccountClient: Client configured with the account URL and token.
        """
        token = settings.account_token.get_secret_value() if settings.account_token else None
        return cls(
            settings.account_url,
            token,
            timeout=settings.account_timeout_seconds,
            http_client=http_client,
        )

    @property
    def signed_in(self) -> bool:
        """Whether account sync is available."""
        return bool(self._token)

    async def account_save(self, account_route: str, item: Document) -> Document | None:
        """POST *item* to ``/my/{account_route}``.

        Returns:
            Document | None: Listing data returned by the server, or None when
            not signed in or the server returned no body.

        Raises:
            RemoteError: On transport failure or a non-success status.
        """
        if not self.signed_in:
            return None
        url = self._url(f"/my/{account_route}")
        logger.debug("Saving %s to account", item.get("Id"))
        try:
            async with self._client() as client:
                response = await client.post(url, json=item, headers=self._auth_headers())
                response.raise_for_status()
        except httpx.HTTPError as exc:
            raise RemoteError(f"Account save to {url} failed: {exc}") from exc
        if not response.content:
            return None
        try:
            payload: Any = response.json()
        except ValueError as exc:
            raise RemoteError(f"Account save to {url} returned invalid JSON") from exc
        return payload if isinstance(payload, dict) and payload else None

    async def account_delete(self, account_route: str, item_id: str) -> None:
        """DELETE ``/my/{account_route}/{item_id}``.

        Raises:
            RemoteError: On transport failure or a non-success status.
        """
        if not self.signed_in:
            return
        url = self._url(f"/my/{account_route}/{item_id}")
        logger.debug("Deleting %s from account", item_id)
        try:
            async with self._client() as client:
                response = await client.delete(url, headers=self._auth_headers())
                response.raise_for_status()
        except httpx.HTTPError as exc:
            raise RemoteError(f"Account delete at {url} failed: {exc}") from exc

    async def fetch(self, link: str) -> Document:
        """GET the item at *link*.

        Returns:
            Document: The item payload.

        Raises:
            FetchError: If the request fails or the body is not a JSON object.
        """
        url = self._url(link)
        try:
            async with self._client() as client:
                response = await client.get(url, headers=self._auth_headers())
                response.raise_for_status()
        except httpx.HTTPError as exc:
            raise FetchError(f"Could not fetch {url}: {exc}", link=link) from exc
        try:
            payload: Any = response.json()
        except ValueError as exc:
            raise FetchError(f"Response from {url} is not valid JSON", link=link) from exc
        if not isinstance(payload, dict):
            raise FetchError(f"Response from {url} is not a JSON object", link=link)
        return payload

    def _url(self, link: str) -> str:
        if link.startswith(("http://", "https://")):
            return link
        return f"{self.base_url}/{link.lstrip('/')}"

    def _auth_headers(self) -> dict[str, str]:
        if not self._token:
            return {}
        return {"Authorization": f"Bearer {self._token}"}

    @asynccontextmanager
    async def _client(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._http_client is not None:
            yield self._http_client
            return
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            yield client
