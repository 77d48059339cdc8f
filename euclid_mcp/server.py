"""FastAPI application wiring the Euclid tools to streaming HTTP routes."""

from __future__ import annotations

import json
import logging
import uuid
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, StreamingResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from euclid_mcp import __version__
from euclid_mcp.config import EuclidConfig, default_config
from euclid_mcp.dispatch import dispatch_request
from euclid_mcp.euclid_api import RoutesClient, TokenMetadataClient
from euclid_mcp.streaming import CHUNKED_HTTP, SSE, Transport, encode_stream
from euclid_mcp.tools.formatters import utc_timestamp

logger = logging.getLogger(__name__)

APP_VERSION = __version__
STREAM_ROUTES = (
    ("/mcp/sse", SSE),
    ("/mcp/http", CHUNKED_HTTP),
)


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "level": record.levelname,
            "message": record.getMessage(),
            "name": record.name,
        }
        for key in ("tool", "request_id", "error"):
            if hasattr(record, key):
                payload[key] = getattr(record, key)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def configure_logging(config: EuclidConfig = default_config) -> None:
    level = getattr(logging, config.log_level.upper(), logging.INFO)
    if config.log_format.lower() == "json":
        handler = logging.StreamHandler()
        handler.setFormatter(JsonFormatter())
        logging.basicConfig(level=level, handlers=[handler])
    else:
        logging.basicConfig(level=level, format="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s")


def create_app(
    config: EuclidConfig | None = None,
    *,
    graphql_client: Optional[TokenMetadataClient] = None,
    rest_client: Optional[RoutesClient] = None,
) -> FastAPI:
    """
    Build the application with explicitly constructed upstream clients.

    Clients default to ones built from ``config``; tests inject stubs.
    """
    config = config or default_config

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        logger.info("Euclid MCP server starting on port %s", config.port)
        logger.info("GraphQL endpoint: %s", config.graphql_endpoint)
        logger.info("REST endpoint: %s", config.rest_endpoint)
        for path, transport in STREAM_ROUTES:
            logger.info("  GET/POST %s - token metadata or routes (%s)", path, transport.name)
        yield
        # Shutdown
        await app.state.graphql_client.aclose()
        await app.state.rest_client.aclose()

    app = FastAPI(
        title="Euclid MCP Server",
        description="Streams Euclid token metadata and swap routes over SSE or chunked HTTP.",
        version=APP_VERSION,
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.graphql_client = graphql_client or TokenMetadataClient(config)
    app.state.rest_client = rest_client or RoutesClient(config)

    @app.middleware("http")
    async def add_request_context(request: Request, call_next):
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id
        logger.info(
            "%s %s request_id=%s",
            request.method,
            request.url.path,
            request_id,
            extra={"request_id": request_id},
        )
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code == 404:
            message = f"Route {request.method} {request.url.path} not found"
            return JSONResponse(status_code=404, content={"error": {"code": "NOT_FOUND", "message": message}})
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": {"code": "HTTP_ERROR", "message": str(exc.detail)}},
        )

    @app.exception_handler(Exception)
    async def unhandled_error(_request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error")
        return JSONResponse(
            status_code=500,
            content={"error": {"code": "INTERNAL_ERROR", "message": str(exc) or "Internal server error"}},
        )

    @app.get("/health")
    async def health() -> JSONResponse:
        """Lightweight health endpoint for monitoring."""
        return JSONResponse(content={"status": "ok", "timestamp": utc_timestamp()})

    for path, transport in STREAM_ROUTES:
        app.add_api_route(
            path,
            _stream_endpoint(transport),
            methods=["GET", "POST"],
            name=f"stream_{transport.name}",
        )

    return app


def _stream_endpoint(transport: Transport):
    async def endpoint(request: Request) -> StreamingResponse:
        # Read the body before streaming starts; the response owns the receive channel afterwards.
        raw_body = await request.body()
        chunks = dispatch_request(
            method=request.method,
            query=request.query_params,
            raw_body=raw_body,
            content_type=request.headers.get("content-type", ""),
            graphql_client=request.app.state.graphql_client,
            rest_client=request.app.state.rest_client,
            default_routes_limit=request.app.state.config.default_routes_limit,
            request_id=getattr(request.state, "request_id", None),
        )
        return StreamingResponse(
            encode_stream(chunks, transport),
            media_type=transport.media_type,
            headers=dict(transport.headers),
        )

    endpoint.__doc__ = f"Unified {transport.name} stream: token metadata (query) or routes (body)."
    return endpoint


configure_logging(default_config)
app = create_app(default_config)


def main() -> None:
    """Run the server with uvicorn on the configured host and port."""
    uvicorn.run(app, host=default_config.host, port=default_config.port)


# Run with: uvicorn euclid_mcp.server:app --reload
if __name__ == "__main__":
    main()
