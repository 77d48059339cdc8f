"""GraphQL client for the Euclid token-metadata upstream."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from euclid_mcp.euclid_api.client import BaseEuclidClient, EuclidApiError, GraphQLError
from euclid_mcp.models import TokenMetadata

logger = logging.getLogger(__name__)

_TOKEN_FIELDS = """
        coinDecimal
        displayName
        tokenId
        description
        image
        price
        price_change_24h
        price_change_7d
        dex
        chain_uids
        total_volume
        total_volume_24h
        tags
        min_swap_value
        social
        is_verified
"""

TOKEN_METADATAS_QUERY = f"""
query Token_metadatas($limit: Int, $offset: Int, $search: String) {{
  token {{
    token_metadatas(limit: $limit, offset: $offset, search: $search) {{{_TOKEN_FIELDS}    }}
  }}
}}
"""

TOKEN_METADATA_BY_ID_QUERY = f"""
query Token_metadata_by_id($tokenId: String!) {{
  token {{
    token_metadata_by_id(token_id: $tokenId) {{{_TOKEN_FIELDS}    }}
  }}
}}
"""


class TokenMetadataClient(BaseEuclidClient):
    """Async client for the token-metadata GraphQL API."""

    async def _query(self, query: str, variables: Dict[str, Any]) -> Dict[str, Any]:
        body = await self._post(
            self.config.graphql_endpoint,
            json_body={"query": query, "variables": variables},
        )
        if not isinstance(body, dict):
            raise EuclidApiError("Unexpected response from GraphQL upstream.")
        errors = body.get("errors")
        if errors:
            messages = [
                str(err.get("message")) if isinstance(err, dict) else str(err)
                for err in errors
            ]
            raise GraphQLError("; ".join(messages))
        data = body.get("data")
        token = data.get("token") if isinstance(data, dict) else None
        if not isinstance(token, dict):
            raise EuclidApiError("Unexpected response from GraphQL upstream.")
        return token

    async def fetch_token_metadatas(
        self,
        *,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        search: Optional[str] = None,
    ) -> List[TokenMetadata]:
        """List token metadata, optionally paginated and filtered by search text."""
        variables: Dict[str, Any] = {}
        if limit is not None:
            variables["limit"] = limit
        if offset is not None:
            variables["offset"] = offset
        if search:
            variables["search"] = search
        logger.debug("Fetching token metadatas variables=%s", variables)
        try:
            token = await self._query(TOKEN_METADATAS_QUERY, variables)
        except EuclidApiError as exc:
            logger.warning("Error fetching token metadatas: %s", exc)
            raise type(exc)(
                f"Failed to fetch token metadatas: {exc}", status_code=exc.status_code
            ) from exc

        raw_tokens = token.get("token_metadatas") or []
        tokens = [TokenMetadata.from_payload(entry) for entry in raw_tokens if isinstance(entry, dict)]
        logger.info("Fetched %d token metadatas", len(tokens))
        return tokens

    async def fetch_token_metadata_by_id(self, token_id: str) -> Optional[TokenMetadata]:
        """Fetch one token's metadata; ``None`` when the upstream has no such token."""
        logger.debug("Fetching token metadata by ID token_id=%s", token_id)
        try:
            token = await self._query(TOKEN_METADATA_BY_ID_QUERY, {"tokenId": token_id})
        except EuclidApiError as exc:
            logger.warning("Error fetching token metadata by ID: %s", exc)
            raise type(exc)(
                f"Failed to fetch token metadata by ID: {exc}", status_code=exc.status_code
            ) from exc

        raw = token.get("token_metadata_by_id")
        if not isinstance(raw, dict):
            logger.info("No token metadata found for ID: %s", token_id)
            return None
        logger.info("Fetched token metadata for ID: %s", token_id)
        return TokenMetadata.from_payload(raw)
