"""Minimal live sanity checks for the Euclid MCP tools against the configured upstreams."""

from __future__ import annotations

import asyncio
import os
import sys

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from euclid_mcp.config import default_config  # noqa: E402
from euclid_mcp.euclid_api import RoutesClient, TokenMetadataClient  # noqa: E402
from euclid_mcp.tools import get_routes, get_token_metadata  # noqa: E402

# Sample swap; override via env.
SAMPLE_TOKEN_IN = os.getenv("EUCLID_SAMPLE_TOKEN_IN", "stars")
SAMPLE_TOKEN_OUT = os.getenv("EUCLID_SAMPLE_TOKEN_OUT", "usdc")
SAMPLE_AMOUNT_IN = os.getenv("EUCLID_SAMPLE_AMOUNT_IN", "1000000")
# Optional token id for single lookup; falls back to first listed token if unset.
SAMPLE_TOKEN_ID = os.getenv("EUCLID_SAMPLE_TOKEN_ID")


async def main() -> None:
    graphql_client = TokenMetadataClient(default_config)
    rest_client = RoutesClient(default_config)
    try:
        listing = await get_token_metadata({"limit": 3}, client=graphql_client)
        print("Token metadata (limit 3):", listing.to_dict())

        token_id = SAMPLE_TOKEN_ID
        if not token_id and listing.ok:
            tokens = listing.result.get("tokens") or []
            if tokens:
                token_id = tokens[0]["id"]
        if token_id:
            single = await get_token_metadata({"tokenId": token_id}, client=graphql_client)
            print("Token metadata by id:", single.to_dict())

        routes = await get_routes(
            {"token_in": SAMPLE_TOKEN_IN, "token_out": SAMPLE_TOKEN_OUT, "amount_in": SAMPLE_AMOUNT_IN, "limit": 3},
            client=rest_client,
        )
        print("Routes:", routes.to_dict())
    finally:
        await graphql_client.aclose()
        await rest_client.aclose()


if __name__ == "__main__":
    asyncio.run(main())
