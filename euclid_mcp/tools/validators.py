"""Shared validation helpers for Euclid MCP tools.

Each validator returns ``None`` when the parameters are acceptable, otherwise a
message suitable for an ``INVALID_PARAMS`` error.
"""

from __future__ import annotations

from typing import Any, Optional


def _is_non_negative_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def validate_token_metadata_params(
    limit: Any = None,
    offset: Any = None,
    search: Any = None,
    token_id: Any = None,
) -> Optional[str]:
    """Check optional pagination, search and token id parameters."""
    if limit is not None and not _is_non_negative_int(limit):
        return "limit must be a non-negative integer"
    if offset is not None and not _is_non_negative_int(offset):
        return "offset must be a non-negative integer"
    if token_id is not None and not isinstance(token_id, str):
        return "tokenId must be a string"
    if search is not None and not isinstance(search, str):
        return "search must be a string"
    return None


def validate_routes_params(token_in: Any, token_out: Any, amount_in: Any) -> Optional[str]:
    """All three routing fields are required non-empty strings."""
    for name, value in (("token_in", token_in), ("token_out", token_out), ("amount_in", amount_in)):
        if not value or not isinstance(value, str):
            return f"{name} is required and must be a string"
    return None
