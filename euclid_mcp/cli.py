"""Command-line client that streams a request from a running server and prints each chunk."""

from __future__ import annotations

import argparse
import json
import os
import sys
from typing import Any, Dict, List, Optional

import httpx

from euclid_mcp.streaming import TRANSPORTS, decode_stream

DEFAULT_SERVER_URL = os.getenv("SERVER_URL", "http://localhost:3000")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="euclid-mcp-client",
        description="Stream token metadata or swap routes from a Euclid MCP server.",
    )
    parser.add_argument("--server", default=DEFAULT_SERVER_URL, help="Server base URL")
    parser.add_argument("--transport", choices=sorted(TRANSPORTS), default="http", help="Wire framing")
    parser.add_argument("--timeout", type=float, default=60.0, help="Request timeout in seconds")
    subparsers = parser.add_subparsers(dest="command", required=True)

    metadata = subparsers.add_parser("metadata", help="Fetch token metadata (GET)")
    metadata.add_argument("--limit", type=int)
    metadata.add_argument("--offset", type=int)
    metadata.add_argument("--search")
    metadata.add_argument("--token-id", dest="token_id")

    routes = subparsers.add_parser("routes", help="Fetch swap routes (POST)")
    routes.add_argument("--token-in", dest="token_in", required=True)
    routes.add_argument("--token-out", dest="token_out", required=True)
    routes.add_argument("--amount-in", dest="amount_in", required=True)
    routes.add_argument("--limit", type=int)
    return parser


def build_request(args: argparse.Namespace) -> Dict[str, Any]:
    """Translate parsed arguments into ``httpx`` request keyword arguments."""
    url = f"{args.server.rstrip('/')}/mcp/{args.transport}"
    if args.command == "metadata":
        params = {
            key: value
            for key, value in (
                ("limit", args.limit),
                ("offset", args.offset),
                ("search", args.search),
                ("tokenId", args.token_id),
            )
            if value is not None
        }
        return {"method": "GET", "url": url, "params": params}
    body: Dict[str, Any] = {
        "token_in": args.token_in,
        "token_out": args.token_out,
        "amount_in": args.amount_in,
    }
    if args.limit is not None:
        body["limit"] = args.limit
    return {"method": "POST", "url": url, "json": body}


def render_chunk(chunk: Dict[str, Any]) -> str:
    kind = chunk.get("type")
    tool = chunk.get("tool")
    if kind == "progress":
        message = (chunk.get("data") or {}).get("message", "")
        return f"[{tool}] ... {message}"
    if kind == "error":
        error = chunk.get("error") or {}
        return f"[{tool}] ERROR {error.get('code')}: {error.get('message')}"
    return f"[{tool}] result:\n{json.dumps(chunk.get('data'), indent=2)}"


def run(args: argparse.Namespace) -> int:
    transport = TRANSPORTS[args.transport]
    request = build_request(args)
    exit_code = 0
    with httpx.Client(timeout=args.timeout) as client:
        with client.stream(**request) as response:
            print(f"Streaming from: {response.url} ({response.status_code})")
            for chunk in decode_stream(response.iter_lines(), transport):
                print(render_chunk(chunk))
                if chunk.get("type") == "error":
                    exit_code = 1
    return exit_code


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return run(args)
    except httpx.HTTPError as exc:
        print(f"Request failed: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
