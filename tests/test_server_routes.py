import json

import pytest
from fastapi.testclient import TestClient

from euclid_mcp.config import EuclidConfig
from euclid_mcp.server import app as default_app
from euclid_mcp.server import create_app
from euclid_mcp.streaming import CHUNKED_HTTP, SSE, decode_stream


@pytest.fixture
def upstreams(stub_token_client_cls, stub_routes_client_cls, token_payload, routes_payload):
    return stub_token_client_cls(tokens=[token_payload], single=token_payload), stub_routes_client_cls(
        payload=routes_payload
    )


@pytest.fixture
def client(upstreams):
    token_client, routes_client = upstreams
    app = create_app(EuclidConfig(), graphql_client=token_client, rest_client=routes_client)
    return TestClient(app)


def _chunks(resp, transport):
    return list(decode_stream(resp.text.splitlines(), transport))


def test_health_route(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert body["timestamp"].endswith("Z")
    assert resp.headers.get("X-Request-ID")


def test_default_app_health():
    resp = TestClient(default_app).get("/health")
    assert resp.status_code == 200


def test_sse_get_token_metadata(client, upstreams):
    resp = client.get("/mcp/sse", params={"limit": "5", "search": "sta"})
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/event-stream")
    assert resp.headers["cache-control"] == "no-cache"
    assert resp.headers["access-control-allow-origin"] == "*"
    assert resp.headers.get("X-Request-ID")
    assert resp.text.startswith("data: ")
    assert resp.text.endswith("\n\n")

    chunks = _chunks(resp, SSE)
    assert [c["type"] for c in chunks] == ["progress", "result"]
    assert chunks[1]["data"]["tokens"][0]["id"] == "stars"
    token_client, _ = upstreams
    assert token_client.calls == [("list", {"limit": 5, "offset": None, "search": "sta"})]


def test_sse_get_without_params_falls_back_to_token_metadata(client):
    resp = client.get("/mcp/sse")
    chunks = _chunks(resp, SSE)
    assert [c["tool"] for c in chunks] == ["getTokenMetadata", "getTokenMetadata"]


def test_sse_get_by_token_id(client):
    chunks = _chunks(client.get("/mcp/sse", params={"tokenId": "stars"}), SSE)
    assert chunks[-1]["data"]["token"]["price"]["current"] == "$1.234568"


def test_sse_post_routes(client, upstreams):
    resp = client.post(
        "/mcp/sse",
        params={"tokenId": "ignored"},
        json={"token_in": "stars", "token_out": "usdc", "amount_in": "1000000"},
    )
    chunks = _chunks(resp, SSE)
    assert [c["type"] for c in chunks] == ["progress", "result"]
    assert chunks[1]["tool"] == "getRoutes"
    assert chunks[1]["data"]["summary"]["amountIn"] == "1.00M"
    _, routes_client = upstreams
    assert routes_client.calls[0]["limit"] == 100


def test_http_post_routes_missing_fields(client, upstreams):
    resp = client.post("/mcp/http", json={"token_in": "stars"})
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("application/json")
    lines = [line for line in resp.text.split("\n") if line]
    assert len(lines) == 1
    chunk = json.loads(lines[0])
    assert chunk["error"]["code"] == "VALIDATION_ERROR"
    _, routes_client = upstreams
    assert routes_client.calls == []


def test_http_get_token_metadata_ndjson(client):
    resp = client.get("/mcp/http", params={"offset": "0"})
    assert resp.text.endswith("\n")
    assert not resp.text.startswith("data:")
    chunks = _chunks(resp, CHUNKED_HTTP)
    assert [c["type"] for c in chunks] == ["progress", "result"]


def test_http_post_without_anything_is_invalid(client):
    chunks = _chunks(client.post("/mcp/http"), CHUNKED_HTTP)
    assert chunks == [
        {
            "type": "error",
            "tool": "unknown",
            "error": {
                "code": "INVALID_REQUEST",
                "message": "Invalid request. Provide either token metadata query params (GET) "
                "or routes body params (POST)",
            },
        }
    ]


def test_http_post_malformed_json(client):
    resp = client.post("/mcp/http", content=b"{bad", headers={"Content-Type": "application/json"})
    chunks = _chunks(resp, CHUNKED_HTTP)
    assert len(chunks) == 1
    assert chunks[0]["error"]["code"] == "HANDLER_ERROR"


def test_unknown_route_returns_not_found(client):
    resp = client.get("/nope")
    assert resp.status_code == 404
    assert resp.json() == {"error": {"code": "NOT_FOUND", "message": "Route GET /nope not found"}}


def test_repeat_requests_are_structurally_identical(client):
    def strip(value):
        if isinstance(value, dict):
            return {k: strip(v) for k, v in value.items() if k != "timestamp"}
        if isinstance(value, list):
            return [strip(v) for v in value]
        return value

    first = _chunks(client.get("/mcp/http", params={"tokenId": "stars"}), CHUNKED_HTTP)
    second = _chunks(client.get("/mcp/http", params={"tokenId": "stars"}), CHUNKED_HTTP)
    assert strip(first) == strip(second)
