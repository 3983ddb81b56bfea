"""Typed clients for the New Relic REST v2 and NerdGraph APIs."""

from __future__ import annotations

__version__ = "0.1.0"

from .clients import AlertsClient, ApiAccessClient, NerdStorageClient, WorkloadsClient
from .config import ClientConfig
from .errors import (
    ApiAccessKeyMutationError,
    ConfigError,
    GraphQLError,
    HttpError,
    NotFoundError,
    NrClientError,
)

__all__ = [
    "AlertsClient",
    "ApiAccessClient",
    "ApiAccessKeyMutationError",
    "ClientConfig",
    "ConfigError",
    "GraphQLError",
    "HttpError",
    "NerdStorageClient",
    "NotFoundError",
    "NrClientError",
    "WorkloadsClient",
    "__version__",
]
