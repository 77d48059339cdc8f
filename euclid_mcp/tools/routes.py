"""Swap routes tool."""

from __future__ import annotations

import logging
from typing import Any, Dict

from euclid_mcp.config import DEFAULT_ROUTES_LIMIT
from euclid_mcp.euclid_api import EuclidApiError, RoutesClient
from euclid_mcp.models import EXECUTION_ERROR, INVALID_PARAMS, ROUTES_TOOL, ToolResult
from euclid_mcp.tools.formatters import format_routes
from euclid_mcp.tools.validators import validate_routes_params

logger = logging.getLogger(__name__)


async def get_routes(
    params: Dict[str, Any],
    *,
    client: RoutesClient,
    default_limit: int = DEFAULT_ROUTES_LIMIT,
) -> ToolResult:
    """
    Fetch and format swap routes.

    ``params`` holds ``token_in``, ``token_out``, ``amount_in`` and an optional
    integer ``limit`` (falls back to ``default_limit`` when unset or zero).
    """
    token_in = params.get("token_in")
    token_out = params.get("token_out")
    amount_in = params.get("amount_in")
    logger.info("Executing getRoutes tool params=%s", params, extra={"tool": ROUTES_TOOL})

    problem = validate_routes_params(token_in, token_out, amount_in)
    if problem:
        return ToolResult.failure(ROUTES_TOOL, INVALID_PARAMS, problem)

    try:
        response = await client.fetch_routes(
            token_in,
            token_out,
            amount_in,
            limit=params.get("limit") or default_limit,
        )
        return ToolResult.success(ROUTES_TOOL, format_routes(response))
    except EuclidApiError as exc:
        return ToolResult.failure(ROUTES_TOOL, EXECUTION_ERROR, str(exc) or "Failed to get routes")
    except Exception as exc:
        logger.exception("Unexpected error in getRoutes tool")
        return ToolResult.failure(ROUTES_TOOL, EXECUTION_ERROR, str(exc) or "Failed to get routes")
