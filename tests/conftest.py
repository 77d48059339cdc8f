import os
import sys

import pytest

# Ensure repository root is on sys.path before importing project modules.
repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if repo_root not in sys.path:
    sys.path.insert(0, repo_root)

from euclid_mcp.models import RoutesResponse, TokenMetadata  # noqa: E402


@pytest.fixture
def token_payload():
    return {
        "coinDecimal": 6,
        "displayName": "Stargaze",
        "tokenId": "stars",
        "description": "Stargaze token",
        "image": "https://example.com/stars.png",
        "price": 1.23456789,
        "price_change_24h": -3.2,
        "price_change_7d": 2.5,
        "dex": "osmosis",
        "chain_uids": ["stargaze", "osmosis"],
        "total_volume": 2500000,
        "total_volume_24h": 1500,
        "tags": ["nft"],
        "min_swap_value": 999,
        "social": {"twitter": "https://twitter.com/stargazezone"},
        "is_verified": True,
    }


@pytest.fixture
def routes_payload():
    return {
        "token_in": "stars",
        "token_out": "usdc",
        "amount_in": "1000000",
        "routes": [
            {
                "path": ["stars", "osmo", "usdc"],
                "amount_out": "2500000",
                "price_impact": "0.5",
                "fee": "0.3",
                "estimated_gas": 150000,
                "hops": 2,
            },
            {
                "token_path": ["stars", "usdc"],
                "amount_out": 1200,
                "price_impact": 0,
            },
        ],
        "request_id": "abc",
    }


class StubTokenClient:
    """Stands in for TokenMetadataClient; records calls."""

    def __init__(self, tokens=None, single=None, exc=None):
        self.tokens = tokens or []
        self.single = single
        self.exc = exc
        self.calls = []

    async def fetch_token_metadatas(self, *, limit=None, offset=None, search=None):
        self.calls.append(("list", {"limit": limit, "offset": offset, "search": search}))
        if self.exc:
            raise self.exc
        return [TokenMetadata.from_payload(t) for t in self.tokens]

    async def fetch_token_metadata_by_id(self, token_id):
        self.calls.append(("by_id", {"token_id": token_id}))
        if self.exc:
            raise self.exc
        return TokenMetadata.from_payload(self.single) if self.single else None

    async def aclose(self):
        return None


class StubRoutesClient:
    """Stands in for RoutesClient; records calls."""

    def __init__(self, payload=None, exc=None):
        self.payload = payload or {"routes": []}
        self.exc = exc
        self.calls = []

    async def fetch_routes(self, token_in, token_out, amount_in, *, limit=None):
        self.calls.append(
            {"token_in": token_in, "token_out": token_out, "amount_in": amount_in, "limit": limit}
        )
        if self.exc:
            raise self.exc
        return RoutesResponse.from_payload(self.payload)

    async def aclose(self):
        return None


@pytest.fixture
def stub_token_client_cls():
    return StubTokenClient


@pytest.fixture
def stub_routes_client_cls():
    return StubRoutesClient
