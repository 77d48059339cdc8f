"""Tool implementations: validate, call one upstream, format."""

from .token_metadata import get_token_metadata
from .routes import get_routes
from . import formatters, validators

__all__ = [
    "get_token_metadata",
    "get_routes",
    "formatters",
    "validators",
]
