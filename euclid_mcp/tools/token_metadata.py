"""Token metadata tool."""

from __future__ import annotations

import logging
from typing import Any, Dict

from euclid_mcp.euclid_api import EuclidApiError, TokenMetadataClient
from euclid_mcp.models import (
    EXECUTION_ERROR,
    INVALID_PARAMS,
    NOT_FOUND,
    TOKEN_METADATA_TOOL,
    ToolResult,
)
from euclid_mcp.tools.formatters import format_single_token, format_token_list
from euclid_mcp.tools.validators import validate_token_metadata_params

logger = logging.getLogger(__name__)


async def get_token_metadata(params: Dict[str, Any], *, client: TokenMetadataClient) -> ToolResult:
    """
    Fetch one token by id, or a (filtered, paginated) list of tokens.

    Args:
        params: Any of ``limit``, ``offset``, ``search`` and ``tokenId``.
        client: Token metadata GraphQL client.

    Returns:
        ToolResult wrapping the formatted payload or an error. Never raises.
    """
    limit = params.get("limit")
    offset = params.get("offset")
    search = params.get("search")
    token_id = params.get("tokenId")
    logger.info("Executing getTokenMetadata tool params=%s", params, extra={"tool": TOKEN_METADATA_TOOL})

    problem = validate_token_metadata_params(limit=limit, offset=offset, search=search, token_id=token_id)
    if problem:
        return ToolResult.failure(TOKEN_METADATA_TOOL, INVALID_PARAMS, problem)

    try:
        if token_id:
            token = await client.fetch_token_metadata_by_id(token_id)
            if token is None:
                return ToolResult.failure(TOKEN_METADATA_TOOL, NOT_FOUND, f"Token with ID {token_id} not found")
            return ToolResult.success(TOKEN_METADATA_TOOL, format_single_token(token))

        tokens = await client.fetch_token_metadatas(limit=limit, offset=offset, search=search)
        return ToolResult.success(TOKEN_METADATA_TOOL, format_token_list(tokens))
    except EuclidApiError as exc:
        return ToolResult.failure(TOKEN_METADATA_TOOL, EXECUTION_ERROR, str(exc) or "Failed to get token metadata")
    except Exception as exc:
        logger.exception("Unexpected error in getTokenMetadata tool")
        return ToolResult.failure(TOKEN_METADATA_TOOL, EXECUTION_ERROR, str(exc) or "Failed to get token metadata")
