"""REST client for the Euclid swap-routing upstream."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from euclid_mcp.euclid_api.client import BaseEuclidClient, EuclidApiError
from euclid_mcp.models import RoutesRequest, RoutesResponse

logger = logging.getLogger(__name__)


class RoutesClient(BaseEuclidClient):
    """Async client for the routes endpoint."""

    async def fetch_routes(
        self,
        token_in: str,
        token_out: str,
        amount_in: str,
        *,
        limit: Optional[int] = None,
    ) -> RoutesResponse:
        """Request swap routes for ``amount_in`` of ``token_in`` into ``token_out``."""
        request = RoutesRequest(token_in=token_in, token_out=token_out, amount_in=amount_in, limit=limit)
        params: Dict[str, Any] = {}
        if limit is not None:
            params["limit"] = limit
        logger.debug("Fetching routes %s -> %s amount_in=%s limit=%s", token_in, token_out, amount_in, limit)
        try:
            body = await self._post(
                self.config.rest_endpoint,
                json_body={"token_in": token_in, "token_out": token_out, "amount_in": amount_in},
                params=params or None,
            )
            if not isinstance(body, dict):
                raise EuclidApiError("Unexpected response from routes upstream.")
        except EuclidApiError as exc:
            logger.warning("Error fetching routes: %s", exc)
            raise type(exc)(f"Failed to fetch routes: {exc}", status_code=exc.status_code) from exc

        logger.info("Fetched routes for %s -> %s", token_in, token_out)
        return RoutesResponse.from_payload(body, request=request)
