from __future__ import annotations

from typing import Any, Optional

import httpx

from iex.errors import TransportError

API_KEY_HEADER = "X-API-Key"

_ALLOWED_METHODS = frozenset({"GET"})


class WallexTransport:
    """
    Thin authenticated HTTP sender.

    Returns whatever status and body the server answered with; only failures to
    reach the server at all are raised, as `TransportError`.
    """

    def __init__(
        self,
        *,
        timeout_seconds: Optional[float] = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        client_kwargs: dict[str, Any] = {"transport": transport}
        if timeout_seconds is not None:
            client_kwargs["timeout"] = httpx.Timeout(timeout_seconds)
        self._client = httpx.AsyncClient(**client_kwargs)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def send(
        self,
        method: str,
        url: str,
        *,
        api_key: str,
        body: bytes | None = None,
    ) -> httpx.Response:
        method = method.upper()
        if method not in _ALLOWED_METHODS:
            raise ValueError(f"unsupported method: {method}")
        if httpx.URL(url).scheme != "https":
            raise ValueError(f"url must be an absolute https URL: {url}")
        if not api_key.strip():
            raise ValueError("api_key is required for authenticated endpoints")

        try:
            return await self._client.request(
                method,
                url,
                content=body,
                headers={API_KEY_HEADER: api_key},
            )
        except httpx.RequestError as e:
            # Also raised for bodies that cannot be read, e.g. a corrupt Content-Encoding.
            raise TransportError(method=method, url=url, reason=str(e) or type(e).__name__) from e
