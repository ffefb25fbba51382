"""
HTTP client for the alias store API.

Calls are not retried and not queued. Every failure (transport error, non-2xx
status, unexpected body) is raised as AliasServiceError so the call site can
decide how to surface it.
"""

from typing import Any

import httpx
import structlog

from sharenote.client.models import AliasListItem, AliasNoteData

logger = structlog.get_logger(__name__)

MASTER_KEY_HEADER = "X-Master-Key"


class AliasServiceError(Exception):
    """Alias store call failed."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class AliasClient:
    """
    Async client for the alias store.

    Usage:
        client = AliasClient("https://notes.example.com")
        url = await client.share("my-note", token, "My note")
        note = await client.get("my-note")
        await client.close()
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        master_key: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.master_key = master_key
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout, transport=self._transport)
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "AliasClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    def _auth_headers(self) -> dict[str, str]:
        if not self.master_key:
            raise AliasServiceError("Master key not configured")
        return {MASTER_KEY_HEADER: self.master_key}

    async def _request(self, method: str, path: str, **kwargs: Any) -> tuple[int, dict[str, Any]]:
        client = await self._get_client()
        logger.debug("alias_api_request", method=method, path=path)
        try:
            response = await client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("alias_api_unreachable", method=method, path=path, error=str(e))
            raise AliasServiceError(f"Alias store unreachable: {e}") from e

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        logger.debug("alias_api_response", method=method, path=path, status_code=response.status_code)
        return response.status_code, body

    @staticmethod
    def _raise_for_error(status_code: int, body: dict[str, Any]) -> None:
        if status_code >= 400 or body.get("success") is False:
            raise AliasServiceError(str(body.get("error") or f"HTTP {status_code}"), status_code)

    async def share(self, alias: str, token: str, title: str) -> str:
        """Store a token under an alias and return the relative short URL."""
        status_code, body = await self._request("POST", "/api/share", json={"alias": alias, "data": token, "title": title})
        self._raise_for_error(status_code, body)
        return str(body.get("url") or f"/{alias}")

    async def get(self, alias: str) -> AliasNoteData | None:
        """Fetch a shared note, or None when the alias does not exist."""
        status_code, body = await self._request("GET", f"/api/note/{alias}")
        if status_code == 404:
            return None
        self._raise_for_error(status_code, body)
        try:
            return AliasNoteData.model_validate(body)
        except ValueError as e:
            raise AliasServiceError(f"Unexpected alias store response: {e}", status_code) from e

    async def check_available(self, alias: str) -> bool:
        status_code, body = await self._request("GET", f"/api/check/{alias}")
        self._raise_for_error(status_code, body)
        return bool(body.get("available"))

    async def delete(self, alias: str) -> None:
        """Delete an alias (master key required)."""
        status_code, body = await self._request("DELETE", f"/api/note/{alias}", headers=self._auth_headers())
        self._raise_for_error(status_code, body)

    async def list_notes(self) -> list[AliasListItem]:
        """List all aliases on the server (master key required)."""
        status_code, body = await self._request("GET", "/api/list", headers=self._auth_headers())
        self._raise_for_error(status_code, body)
        try:
            return [AliasListItem.model_validate(item) for item in body.get("notes", [])]
        except ValueError as e:
            raise AliasServiceError(f"Unexpected alias store response: {e}", status_code) from e
