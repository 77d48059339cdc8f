"""
Wire framing for streamed chunk sequences.

Two transports share one chunk shape and differ only in framing:

* ``sse``:  ``data: <json>\\n\\n`` with ``text/event-stream``
* ``http``: ``<json>\\n`` (newline-delimited JSON) with ``application/json``
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Callable, Dict, Iterable, Iterator

from euclid_mcp.models import StreamChunk

_SSE_PREFIX = "data:"


def _dumps(chunk: StreamChunk) -> str:
    return json.dumps(chunk.to_dict(), separators=(",", ":"), ensure_ascii=False)


def format_sse_chunk(chunk: StreamChunk) -> str:
    return f"data: {_dumps(chunk)}\n\n"


def format_http_chunk(chunk: StreamChunk) -> str:
    return f"{_dumps(chunk)}\n"


@dataclass(frozen=True)
class Transport:
    name: str
    media_type: str
    headers: Dict[str, str] = field(default_factory=dict)
    encode: Callable[[StreamChunk], str] = format_http_chunk


SSE = Transport(
    name="sse",
    media_type="text/event-stream",
    headers={
        "Cache-Control": "no-cache",
        "Connection": "keep-alive",
        "Access-Control-Allow-Origin": "*",
    },
    encode=format_sse_chunk,
)

CHUNKED_HTTP = Transport(
    name="http",
    media_type="application/json",
    headers={
        "Cache-Control": "no-cache",
        "Access-Control-Allow-Origin": "*",
    },
    encode=format_http_chunk,
)

TRANSPORTS = {SSE.name: SSE, CHUNKED_HTTP.name: CHUNKED_HTTP}


async def encode_stream(chunks: AsyncIterator[StreamChunk], transport: Transport) -> AsyncIterator[str]:
    """Frame each chunk as soon as it is produced."""
    async for chunk in chunks:
        yield transport.encode(chunk)


def decode_stream(lines: Iterable[str], transport: Transport) -> Iterator[Dict[str, Any]]:
    """
    Parse a framed response back into chunk dictionaries.

    ``lines`` are text lines without trailing newlines (as produced by
    ``httpx.Response.iter_lines``). Blank lines and, for SSE, non-``data``
    fields are skipped.
    """
    for line in lines:
        text = line.strip()
        if not text:
            continue
        if transport.name == SSE.name:
            if not text.startswith(_SSE_PREFIX):
                continue
            text = text[len(_SSE_PREFIX):].strip()
        yield json.loads(text)
