"""Minimal NerdGraph (GraphQL) transport built on :class:`HttpClient`."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import TracebackType
from typing import Any, cast

from .config import ClientConfig
from .errors import GraphQLError, HttpError
from .http_client import HttpClient

logger = logging.getLogger(__name__)


def dig(data: Any, *keys: str) -> Any:
    """Walk nested mappings, returning ``None`` as soon as a level is missing.

    >>> dig({"actor": {"account": {"id": 1}}}, "actor", "account", "id")
    1
    >>> dig({"actor": None}, "actor", "account")
    """

    current = data
    for key in keys:
        if not isinstance(current, Mapping):
            return None
        current = current.get(key)
    return current


class NerdGraphClient:
    """Post GraphQL documents to the NerdGraph endpoint and unwrap ``data``."""

    def __init__(self, config: ClientConfig, *, http: HttpClient | None = None) -> None:
        self.config = config
        self.http = http or HttpClient(
            config.nerdgraph_endpoint(),
            default_headers=config.nerdgraph_headers(),
            timeout=config.timeout,
            max_retries=config.max_retries,
        )

    def query(
        self,
        query: str,
        variables: Mapping[str, Any] | None = None,
        *,
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Execute ``query`` with ``variables`` and return the ``data`` object.

        Raises:
            GraphQLError: The response body contained a non-empty ``errors`` array.
            HttpError: Transport failure or non-JSON body.
        """

        body = {"query": query, "variables": dict(variables or {})}
        resp = self.http.post("", json=body, headers=headers)
        try:
            payload = resp.json()
        except ValueError as exc:
            raise HttpError(resp.status_code, "NerdGraph returned a non-JSON body", details=resp.text) from exc
        if not isinstance(payload, dict):
            raise HttpError(resp.status_code, "Unexpected NerdGraph payload", details=payload)

        errors = payload.get("errors")
        if errors:
            logger.debug("NerdGraph returned %d error(s)", len(errors))
            raise GraphQLError(errors)
        data = payload.get("data")
        return cast(dict[str, Any], data) if isinstance(data, dict) else {}

    def close(self) -> None:
        self.http.close()

    def __enter__(self) -> NerdGraphClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


__all__ = ["NerdGraphClient", "dig"]
