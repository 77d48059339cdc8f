"""
Display formatting for upstream payloads.

Every formatter keeps the untouched upstream record under ``raw`` so callers
that need exact values never have to re-query.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Optional

from euclid_mcp.models import Route, RoutesResponse, TokenMetadata

_THRESHOLDS = (
    (1e12, "T"),
    (1e9, "B"),
    (1e6, "M"),
    (1e3, "K"),
)


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision, ``Z`` suffixed."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _to_fixed(number: float, places: int) -> str:
    """Fixed-point text with halves rounded away from zero."""
    if not math.isfinite(number):
        return f"{number:.{places}f}"
    quantized = Decimal(number).quantize(Decimal(10) ** -places, rounding=ROUND_HALF_UP)
    return f"{quantized:f}"


def format_large_number(value: Any) -> str:
    """Abbreviate a number with K/M/B/T suffixes; ``"0"`` when not numeric."""
    if isinstance(value, bool):
        return "0"
    try:
        number = float(value)
    except (TypeError, ValueError):
        return "0"
    if math.isnan(number):
        return "0"
    for threshold, suffix in _THRESHOLDS:
        if number >= threshold:
            return f"{_to_fixed(number / threshold, 2)}{suffix}"
    return _to_fixed(number, 2)


def format_price(price: Optional[float]) -> str:
    if price is None:
        return "N/A"
    return f"${_to_fixed(price, 6)}"


def format_percent_change(change: Optional[float]) -> str:
    if change is None:
        return "N/A"
    if change == 0:
        change = 0.0
    sign = "+" if change > 0 else ""
    return f"{sign}{_to_fixed(change, 2)}%"


def _format_volume(volume: Optional[float]) -> str:
    if volume is None:
        return "N/A"
    return f"${format_large_number(volume)}"


def _format_min_swap(value: Optional[float]) -> Optional[str]:
    if value is None:
        return None
    return format_large_number(value)


def _format_change(change: Optional[float]) -> Optional[Dict[str, Any]]:
    if change is None:
        return None
    return {"percentage": format_percent_change(change), "value": change}


def format_token_list(tokens: List[TokenMetadata]) -> Dict[str, Any]:
    """Shape a list of tokens into a summary plus one display entry per token."""
    return {
        "summary": {
            "total": len(tokens),
            "timestamp": utc_timestamp(),
        },
        "tokens": [
            {
                "id": token.token_id,
                "name": token.display_name,
                "price": format_price(token.price),
                "priceChange24h": format_percent_change(token.price_change_24h),
                "priceChange7d": format_percent_change(token.price_change_7d),
                "volume24h": _format_volume(token.total_volume_24h),
                "totalVolume": _format_volume(token.total_volume),
                "decimals": token.coin_decimal,
                "verified": token.is_verified,
                "chains": list(token.chain_uids or []),
                "tags": list(token.tags or []),
                "minSwapValue": _format_min_swap(token.min_swap_value),
                "image": token.image,
                "description": token.description,
                "social": token.social,
                "raw": token.raw,
            }
            for token in tokens
        ],
    }


def format_single_token(token: TokenMetadata) -> Dict[str, Any]:
    """Shape one token into price / volume / details / metadata sections."""
    return {
        "summary": {
            "id": token.token_id,
            "name": token.display_name,
            "timestamp": utc_timestamp(),
        },
        "token": {
            "id": token.token_id,
            "name": token.display_name,
            "price": {
                "current": format_price(token.price),
                "value": token.price,
                "change24h": _format_change(token.price_change_24h),
                "change7d": _format_change(token.price_change_7d),
            },
            "volume": {
                "total24h": _format_volume(token.total_volume_24h),
                "total": _format_volume(token.total_volume),
                "raw24h": token.total_volume_24h,
                "rawTotal": token.total_volume,
            },
            "details": {
                "decimals": token.coin_decimal,
                "verified": token.is_verified,
                "chains": list(token.chain_uids or []),
                "tags": list(token.tags or []),
                "minSwapValue": _format_min_swap(token.min_swap_value),
                "dex": token.dex,
            },
            "metadata": {
                "image": token.image,
                "description": token.description,
                "social": token.social,
            },
            "raw": token.raw,
        },
    }


def _format_route(index: int, route: Route) -> Dict[str, Any]:
    entry: Dict[str, Any] = {
        "index": index,
        "path": route.path,
        "amountOut": format_large_number(route.amount_out) if route.amount_out else "N/A",
        "amountOutRaw": route.amount_out,
        "data": route.raw,
    }
    # Optional fields only appear when upstream sent a truthy value.
    if route.price_impact:
        entry["priceImpact"] = f"{route.price_impact}%"
    if route.fee:
        entry["fee"] = route.fee
    if route.exchange_rate:
        entry["exchangeRate"] = route.exchange_rate
    if route.estimated_gas:
        entry["estimatedGas"] = format_large_number(route.estimated_gas)
    return entry


def format_routes(response: RoutesResponse) -> Dict[str, Any]:
    """Summarize a routes response and number each route from 1."""
    return {
        "summary": {
            "tokenIn": response.token_in,
            "tokenOut": response.token_out,
            "amountIn": format_large_number(response.amount_in),
            "amountInRaw": response.amount_in,
            "totalRoutes": len(response.routes),
            "timestamp": utc_timestamp(),
        },
        "routes": [_format_route(i, route) for i, route in enumerate(response.routes, start=1)],
        "raw": response.raw,
    }
