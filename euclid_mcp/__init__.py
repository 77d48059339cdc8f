"""
Euclid MCP server package.

Streams Euclid token metadata (GraphQL upstream) and swap routes (REST
upstream) over server-sent events or chunked HTTP. See DESIGN.md for details.
"""

__version__ = "0.1.0"
