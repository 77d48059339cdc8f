"""
Request disambiguation and chunk production.

Both streaming endpoints accept either a token-metadata query (query string)
or a routes query (request body). The request shape decides which tool runs:

1. a body with ``token_in`` or ``token_out`` is a routes request;
2. otherwise ``tokenId`` / ``search`` / ``limit`` / ``offset`` in the query,
   or any GET, is a token-metadata request;
3. anything else is rejected with ``INVALID_REQUEST``.

Every request yields at most one progress chunk followed by exactly one
terminal (result or error) chunk.
"""

from __future__ import annotations

import json
import logging
import re
from enum import Enum
from typing import Any, AsyncIterator, Dict, Mapping, Optional
from urllib.parse import parse_qsl

from euclid_mcp.config import DEFAULT_ROUTES_LIMIT
from euclid_mcp.euclid_api import RoutesClient, TokenMetadataClient
from euclid_mcp.models import (
    HANDLER_ERROR,
    INVALID_REQUEST,
    ROUTES_TOOL,
    TOKEN_METADATA_TOOL,
    UNKNOWN_TOOL,
    VALIDATION_ERROR,
    StreamChunk,
    ToolResult,
)
from euclid_mcp.tools import get_routes, get_token_metadata

logger = logging.getLogger(__name__)

TOKEN_METADATA_QUERY_KEYS = ("tokenId", "search", "limit", "offset")
ROUTES_REQUIRED_FIELDS = ("token_in", "token_out", "amount_in")

MISSING_ROUTES_FIELDS_MESSAGE = "Missing required fields: token_in, token_out, amount_in"
INVALID_REQUEST_MESSAGE = (
    "Invalid request. Provide either token metadata query params (GET) "
    "or routes body params (POST)"
)


class RequestKind(str, Enum):
    ROUTES = "routes"
    TOKEN_METADATA = "token_metadata"
    INVALID = "invalid"


def parse_body(raw_body: bytes, content_type: str = "") -> Dict[str, Any]:
    """
    Decode a JSON or form-encoded request body into a field mapping.

    Bodies of other content types, and JSON documents that are not objects,
    carry no fields. Malformed JSON raises ``ValueError``.
    """
    if not raw_body or not raw_body.strip():
        return {}
    content_type = (content_type or "").lower()
    if "application/x-www-form-urlencoded" in content_type:
        return dict(parse_qsl(raw_body.decode("utf-8"), keep_blank_values=True))
    if "json" not in content_type:
        return {}
    try:
        decoded = json.loads(raw_body)
    except ValueError as exc:
        raise ValueError(f"Invalid JSON body: {exc}") from exc
    return decoded if isinstance(decoded, dict) else {}


def classify_request(method: str, query: Mapping[str, Any], body: Mapping[str, Any]) -> RequestKind:
    if body.get("token_in") or body.get("token_out"):
        return RequestKind.ROUTES
    if any(query.get(key) for key in TOKEN_METADATA_QUERY_KEYS) or method.upper() == "GET":
        return RequestKind.TOKEN_METADATA
    return RequestKind.INVALID


def _query_int(value: Any) -> Any:
    """Parse integer-looking query values; leave anything else for validation to reject."""
    if value is None or value == "":
        return None
    text = str(value).strip()
    if re.fullmatch(r"-?\d+", text, re.ASCII):
        return int(text)
    return value


def _optional_int(value: Any) -> Optional[int]:
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def token_metadata_params(query: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        "limit": _query_int(query.get("limit")),
        "offset": _query_int(query.get("offset")),
        "search": query.get("search") or None,
        "tokenId": query.get("tokenId") or None,
    }


def routes_params(body: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        "token_in": body.get("token_in"),
        "token_out": body.get("token_out"),
        "amount_in": body.get("amount_in"),
        "limit": _optional_int(body.get("limit")),
    }


def _log_tool_result(result: ToolResult, request_id: Optional[str] = None) -> None:
    if result.error is not None:
        logger.warning(
            "tool=%s outcome=error error=%s request_id=%s",
            result.tool,
            result.error.code,
            request_id,
            extra={"tool": result.tool, "request_id": request_id, "error": result.error.code},
        )
    else:
        logger.info(
            "tool=%s outcome=success request_id=%s",
            result.tool,
            request_id,
            extra={"tool": result.tool, "request_id": request_id},
        )


async def dispatch_request(
    *,
    method: str,
    query: Mapping[str, Any],
    raw_body: bytes,
    content_type: str,
    graphql_client: TokenMetadataClient,
    rest_client: RoutesClient,
    default_routes_limit: int = DEFAULT_ROUTES_LIMIT,
    request_id: Optional[str] = None,
) -> AsyncIterator[StreamChunk]:
    """Classify one request, run the matching tool and yield its chunks."""
    try:
        body = parse_body(raw_body, content_type)
        kind = classify_request(method, query, body)

        if kind is RequestKind.ROUTES:
            logger.info("Stream request for routes request_id=%s", request_id, extra={"request_id": request_id})
            params = routes_params(body)
            if not all(params[name] for name in ROUTES_REQUIRED_FIELDS):
                yield StreamChunk.failure(ROUTES_TOOL, VALIDATION_ERROR, MISSING_ROUTES_FIELDS_MESSAGE)
                return
            yield StreamChunk.progress(ROUTES_TOOL, "Fetching routes...")
            result = await get_routes(params, client=rest_client, default_limit=default_routes_limit)
        elif kind is RequestKind.TOKEN_METADATA:
            logger.info(
                "Stream request for token metadata request_id=%s", request_id, extra={"request_id": request_id}
            )
            yield StreamChunk.progress(TOKEN_METADATA_TOOL, "Fetching token metadata...")
            result = await get_token_metadata(token_metadata_params(query), client=graphql_client)
        else:
            yield StreamChunk.failure(UNKNOWN_TOOL, INVALID_REQUEST, INVALID_REQUEST_MESSAGE)
            return

        _log_tool_result(result, request_id)
        yield StreamChunk.from_tool_result(result)
    except Exception as exc:
        logger.exception("Error in stream handler request_id=%s", request_id, extra={"request_id": request_id})
        yield StreamChunk.failure(UNKNOWN_TOOL, HANDLER_ERROR, str(exc) or "Internal server error")
