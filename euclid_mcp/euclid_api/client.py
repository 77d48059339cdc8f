"""
Shared plumbing for the Euclid upstream clients.

Each client wraps exactly one upstream and maps every failure (transport,
HTTP status, malformed payload) to an ``EuclidApiError`` that the tool layer
turns into an in-band error result.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from euclid_mcp.config import EuclidConfig, default_config

logger = logging.getLogger(__name__)


class EuclidApiError(Exception):
    """Base exception for upstream API errors."""

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class UpstreamUnreachableError(EuclidApiError):
    """Raised when the upstream cannot be reached."""


class GraphQLError(EuclidApiError):
    """Raised when the GraphQL upstream reports errors in its response."""


class BaseEuclidClient:
    """Owns (or borrows) one ``httpx.AsyncClient`` for a single upstream."""

    def __init__(
        self,
        config: EuclidConfig | None = None,
        *,
        async_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.config = config or default_config
        self._client: Optional[httpx.AsyncClient] = async_client
        self._owns_client = async_client is None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.config.timeout)
            self._owns_client = True
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def _post(
        self,
        url: str,
        *,
        json_body: Any,
        params: Optional[dict[str, Any]] = None,
    ) -> Any:
        """POST a JSON body and return the decoded JSON response."""
        client = await self._get_client()
        try:
            response = await client.post(
                url,
                params=params,
                json=json_body,
                headers={"Content-Type": "application/json"},
            )
        except httpx.RequestError as exc:
            logger.warning("Upstream unreachable url=%s error=%s", url, exc)
            raise UpstreamUnreachableError(f"Upstream unreachable: {exc}") from exc

        if response.status_code >= 400:
            raise EuclidApiError(
                f"HTTP {response.status_code}: {response.text}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as exc:
            raise EuclidApiError(
                "Unexpected non-JSON response from upstream.",
                status_code=response.status_code,
            ) from exc
