"""Typed records passed between the upstream clients, tools and stream writer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

# Tool names as they appear on the wire.
TOKEN_METADATA_TOOL = "getTokenMetadata"
ROUTES_TOOL = "getRoutes"
UNKNOWN_TOOL = "unknown"

# Error codes carried in ToolResult / StreamChunk errors.
VALIDATION_ERROR = "VALIDATION_ERROR"
INVALID_PARAMS = "INVALID_PARAMS"
NOT_FOUND = "NOT_FOUND"
EXECUTION_ERROR = "EXECUTION_ERROR"
HANDLER_ERROR = "HANDLER_ERROR"
INVALID_REQUEST = "INVALID_REQUEST"

CHUNK_PROGRESS = "progress"
CHUNK_RESULT = "result"
CHUNK_ERROR = "error"
CHUNK_TYPES = (CHUNK_PROGRESS, CHUNK_RESULT, CHUNK_ERROR)


def _to_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _to_str_list(value: Any) -> Optional[List[str]]:
    if not isinstance(value, list):
        return None
    return [str(item) for item in value]


@dataclass(slots=True, frozen=True)
class TokenMetadata:
    """Snapshot of one token's metadata as served by the GraphQL upstream."""

    token_id: str
    display_name: str
    coin_decimal: Optional[int] = None
    description: Optional[str] = None
    image: Optional[str] = None
    price: Optional[float] = None
    price_change_24h: Optional[float] = None
    price_change_7d: Optional[float] = None
    dex: Optional[str] = None
    chain_uids: Optional[List[str]] = None
    total_volume: Optional[float] = None
    total_volume_24h: Optional[float] = None
    tags: Optional[List[str]] = None
    min_swap_value: Optional[float] = None
    social: Optional[Dict[str, str]] = None
    is_verified: bool = False
    raw: Dict[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "TokenMetadata":
        coin_decimal = payload.get("coinDecimal")
        social = payload.get("social")
        return cls(
            token_id=str(payload.get("tokenId") or ""),
            display_name=str(payload.get("displayName") or ""),
            coin_decimal=coin_decimal if isinstance(coin_decimal, int) else None,
            description=payload.get("description"),
            image=payload.get("image"),
            price=_to_float(payload.get("price")),
            price_change_24h=_to_float(payload.get("price_change_24h")),
            price_change_7d=_to_float(payload.get("price_change_7d")),
            dex=payload.get("dex"),
            chain_uids=_to_str_list(payload.get("chain_uids")),
            total_volume=_to_float(payload.get("total_volume")),
            total_volume_24h=_to_float(payload.get("total_volume_24h")),
            tags=_to_str_list(payload.get("tags")),
            min_swap_value=_to_float(payload.get("min_swap_value")),
            social=social if isinstance(social, dict) else None,
            is_verified=bool(payload.get("is_verified")),
            raw=dict(payload),
        )


@dataclass(slots=True, frozen=True)
class RoutesRequest:
    token_in: str
    token_out: str
    amount_in: str
    limit: Optional[int] = None


_ROUTE_FIELDS = {
    "path",
    "token_path",
    "amount_out",
    "fee",
    "price_impact",
    "exchange_rate",
    "estimated_gas",
}


@dataclass(slots=True)
class Route:
    """
    One swap route.

    Known fields are typed; anything else the upstream sends lands in ``extra``
    and the untouched upstream record is kept in ``raw`` for passthrough.
    """

    path: List[str] = field(default_factory=list)
    amount_out: Any = None
    fee: Any = None
    price_impact: Any = None
    exchange_rate: Any = None
    estimated_gas: Any = None
    extra: Dict[str, Any] = field(default_factory=dict)
    raw: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "Route":
        path = payload.get("path") or payload.get("token_path") or []
        return cls(
            path=list(path) if isinstance(path, (list, tuple)) else [],
            amount_out=payload.get("amount_out"),
            fee=payload.get("fee"),
            price_impact=payload.get("price_impact"),
            exchange_rate=payload.get("exchange_rate"),
            estimated_gas=payload.get("estimated_gas"),
            extra={k: v for k, v in payload.items() if k not in _ROUTE_FIELDS},
            raw=dict(payload),
        )


@dataclass(slots=True)
class RoutesResponse:
    """Routes returned by the REST upstream plus the echoed request fields."""

    token_in: Optional[str] = None
    token_out: Optional[str] = None
    amount_in: Optional[str] = None
    routes: List[Route] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)
    raw: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(
        cls, payload: Dict[str, Any], request: Optional[RoutesRequest] = None
    ) -> "RoutesResponse":
        raw_routes = payload.get("routes")
        routes = [
            Route.from_payload(entry)
            for entry in (raw_routes if isinstance(raw_routes, list) else [])
            if isinstance(entry, dict)
        ]
        known = {"token_in", "token_out", "amount_in", "routes"}
        return cls(
            token_in=payload.get("token_in") or (request.token_in if request else None),
            token_out=payload.get("token_out") or (request.token_out if request else None),
            amount_in=payload.get("amount_in") or (request.amount_in if request else None),
            routes=routes,
            extra={k: v for k, v in payload.items() if k not in known},
            raw=dict(payload),
        )


@dataclass(slots=True, frozen=True)
class ToolError:
    code: str
    message: str
    data: Any = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            payload["data"] = self.data
        return payload


@dataclass(slots=True, frozen=True)
class ToolResult:
    """Outcome of a tool call: exactly one of ``result`` / ``error`` is set."""

    tool: str
    result: Any = None
    error: Optional[ToolError] = None

    def __post_init__(self) -> None:
        if (self.result is None) == (self.error is None):
            raise ValueError("ToolResult requires exactly one of result or error")

    @classmethod
    def success(cls, tool: str, result: Any) -> "ToolResult":
        return cls(tool=tool, result=result)

    @classmethod
    def failure(cls, tool: str, code: str, message: str, data: Any = None) -> "ToolResult":
        return cls(tool=tool, error=ToolError(code=code, message=message, data=data))

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Any]:
        if self.error is not None:
            return {"tool": self.tool, "error": self.error.to_dict()}
        return {"tool": self.tool, "result": self.result}


@dataclass(slots=True, frozen=True)
class StreamChunk:
    """One unit of a streamed response."""

    type: str
    tool: str
    data: Any = None
    error: Optional[ToolError] = None

    def __post_init__(self) -> None:
        if self.type not in CHUNK_TYPES:
            raise ValueError(f"Unknown chunk type: {self.type}")
        if self.type == CHUNK_ERROR:
            if self.error is None or self.data is not None:
                raise ValueError("error chunks carry error and no data")
        elif self.data is None or self.error is not None:
            raise ValueError(f"{self.type} chunks carry data and no error")

    @classmethod
    def progress(cls, tool: str, message: str) -> "StreamChunk":
        return cls(type=CHUNK_PROGRESS, tool=tool, data={"message": message})

    @classmethod
    def failure(cls, tool: str, code: str, message: str, data: Any = None) -> "StreamChunk":
        return cls(type=CHUNK_ERROR, tool=tool, error=ToolError(code, message, data))

    @classmethod
    def from_tool_result(cls, result: ToolResult) -> "StreamChunk":
        if result.error is not None:
            return cls(type=CHUNK_ERROR, tool=result.tool, error=result.error)
        return cls(type=CHUNK_RESULT, tool=result.tool, data=result.result)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"type": self.type, "tool": self.tool}
        if self.data is not None:
            payload["data"] = self.data
        if self.error is not None:
            payload["error"] = self.error.to_dict()
        return payload
