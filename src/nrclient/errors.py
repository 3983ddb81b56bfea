from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Optional


class NrClientError(Exception):
    """Base error for nrclient."""


class ConfigError(NrClientError):
    pass


class NotFoundError(NrClientError):
    pass


class HttpError(NrClientError):
    def __init__(self, status_code: int, message: str, *, details: Optional[Any] = None) -> None:
        super().__init__(f"HTTP {status_code}: {message}")
        self.status_code = status_code
        self.details = details


def _describe_graphql_error(entry: Mapping[str, Any]) -> str:
    message = str(entry.get("message") or "unknown error")
    path = entry.get("path")
    if isinstance(path, list) and path:
        message = f"{'.'.join(str(part) for part in path)}: {message}"
    extensions = entry.get("extensions")
    if isinstance(extensions, Mapping):
        error_class = extensions.get("errorClass") or extensions.get("code")
        if error_class:
            message = f"{message} ({error_class})"
    return message


class GraphQLError(NrClientError):
    """Raised when a NerdGraph response body carries an ``errors`` array."""

    def __init__(self, errors: Iterable[Mapping[str, Any]]) -> None:
        self.errors = [dict(entry) for entry in errors]
        summary = "; ".join(_describe_graphql_error(entry) for entry in self.errors)
        super().__init__(f"NerdGraph error: {summary}" if summary else "NerdGraph error")


class ApiAccessKeyMutationError(NrClientError):
    """Aggregated errors reported by an API access key mutation."""

    def __init__(self, errors: Iterable[Any]) -> None:
        self.errors = list(errors)
        lines = [f"{_field(entry, 'type')}: {_field(entry, 'message')}" for entry in self.errors]
        super().__init__("\n".join(lines))


def _field(entry: Any, name: str) -> Any:
    if isinstance(entry, Mapping):
        return entry.get(name)
    return getattr(entry, name, None)
