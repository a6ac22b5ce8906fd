"""RootData upstream client.

The analysis engine depends only on ``UpstreamClient``; ``RootDataClient``
is the HTTP implementation used in production.
"""

from .base import (
    UpstreamApplicationError,
    UpstreamClient,
    UpstreamConfigurationError,
    UpstreamError,
    UpstreamResponse,
    UpstreamTransportError,
)
from .http_client import RootDataClient, create_client

__all__ = [
    "RootDataClient",
    "UpstreamApplicationError",
    "UpstreamClient",
    "UpstreamConfigurationError",
    "UpstreamError",
    "UpstreamResponse",
    "UpstreamTransportError",
    "create_client",
]
