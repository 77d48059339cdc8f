"""HTTP client wrappers for the Euclid upstream APIs."""

from .client import (
    BaseEuclidClient,
    EuclidApiError,
    GraphQLError,
    UpstreamUnreachableError,
)
from .graphql import TokenMetadataClient
from .rest import RoutesClient

__all__ = [
    "BaseEuclidClient",
    "EuclidApiError",
    "GraphQLError",
    "UpstreamUnreachableError",
    "TokenMetadataClient",
    "RoutesClient",
]
