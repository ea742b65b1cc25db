"""
HTTP transport for the REST pipeline.
"""

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Union

import httpx

from mixcord.shared.logging import get_logger


METHODS = frozenset({"GET", "POST", "PATCH", "DELETE", "PUT"})


@dataclass(frozen=True)
class TransportResponse:
    """An HTTP response, whatever its status."""
    status_code: int
    headers: httpx.Headers = field(default_factory=httpx.Headers)
    body: bytes = b""


@dataclass(frozen=True)
class TransportError:
    """The exchange failed before any HTTP response was obtained."""
    reason: str


TransportResult = Union[TransportResponse, TransportError]


class HttpTransport:
    """Sends requests to the API with a pooled httpx client.

    Network failures are returned as TransportError values rather than
    raised, so callers only deal with one result shape.
    """

    def __init__(self,
                 base_url: str,
                 timeout: float = 10.0,
                 user_agent: Optional[str] = None,
                 client: Optional[httpx.AsyncClient] = None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.user_agent = user_agent
        self.logger = get_logger("mixcord.rest.transport")
        self._client = client

    def _get_client(self) -> httpx.AsyncClient:
        """Get the pooled HTTP client."""
        if self._client is None:
            headers = {"User-Agent": self.user_agent} if self.user_agent else None
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=headers
            )
        return self._client

    async def send(self,
                   method: str,
                   route: str,
                   body: Optional[Any] = None,
                   headers: Optional[Mapping[str, str]] = None) -> TransportResult:
        """Perform one HTTP exchange."""
        method = method.upper()
        if method not in METHODS:
            raise ValueError(f"Unsupported HTTP method: {method}")

        client = self._get_client()
        try:
            response = await client.request(
                method,
                route,
                json=body,
                headers=headers
            )
        except httpx.HTTPError as e:
            reason = str(e) or type(e).__name__
            self.logger.warning(
                "Transport error",
                method=method,
                route=route,
                error_type=type(e).__name__,
                error=reason
            )
            return TransportError(reason=reason)

        self.logger.debug(
            "Response received",
            method=method,
            route=route,
            status_code=response.status_code
        )
        return TransportResponse(
            status_code=response.status_code,
            headers=response.headers,
            body=response.content
        )

    async def close(self):
        """Close the pooled HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
