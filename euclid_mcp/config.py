"""
Configuration helpers for the Euclid MCP server.

This module centralizes upstream endpoint selection, listen address, default
timeouts and logging options. Everything is read from the environment with
fixed testnet defaults; nothing here is mutated after startup.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

# Upstream endpoints
DEFAULT_GRAPHQL_ENDPOINT = os.getenv(
    "EUCLID_GRAPHQL_ENDPOINT", "https://testnet.api.euclidprotocol.com/graphql"
)
DEFAULT_REST_ENDPOINT = os.getenv(
    "EUCLID_REST_ENDPOINT", "https://testnet.api.euclidprotocol.com/api/v1/routes"
)

# Listen address
DEFAULT_HOST = os.getenv("EUCLID_MCP_HOST", "0.0.0.0")


def _load_port() -> int:
    raw_port = os.getenv("PORT")
    if raw_port:
        try:
            return int(raw_port)
        except ValueError:
            return 3000
    return 3000


def _load_timeout() -> float:
    raw_timeout = os.getenv("EUCLID_HTTP_TIMEOUT")
    if raw_timeout:
        try:
            return float(raw_timeout)
        except ValueError:
            return 30.0
    return 30.0


DEFAULT_PORT = _load_port()
DEFAULT_TIMEOUT = _load_timeout()

# Tool defaults
DEFAULT_ROUTES_LIMIT = 100

LOG_LEVEL = os.getenv("EUCLID_MCP_LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("EUCLID_MCP_LOG_FORMAT", "json")  # json or plain


@dataclass(slots=True)
class EuclidConfig:
    """Runtime configuration for upstream access and the HTTP listener."""

    graphql_endpoint: str = DEFAULT_GRAPHQL_ENDPOINT
    rest_endpoint: str = DEFAULT_REST_ENDPOINT
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    timeout: float = DEFAULT_TIMEOUT
    default_routes_limit: int = DEFAULT_ROUTES_LIMIT
    log_level: str = LOG_LEVEL
    log_format: str = LOG_FORMAT


default_config = EuclidConfig()
