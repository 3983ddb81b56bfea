from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from types import TracebackType
from typing import Any

import httpx

from .errors import HttpError

logger = logging.getLogger(__name__)


class HttpClient:
    """Thin httpx wrapper that injects API key headers and handles errors + basic retry."""

    def __init__(
        self,
        base_url: str,
        default_headers: dict[str, str] | None = None,
        timeout: float = 60.0,
        max_retries: int = 2,
        retry_statuses: Iterable[int] | None = None,
        backoff_factor: float = 0.5,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = httpx.Client(timeout=timeout)
        self._default_headers = default_headers or {}
        self._max_retries = max_retries
        self._retry_statuses: set[int] = set(retry_statuses or {429, 500, 502, 503, 504})
        self._backoff_factor = backoff_factor

    def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        if path.startswith(("http://", "https://")):
            url = path
        elif path:
            url = f"{self.base_url}/{path.lstrip('/')}"
        else:
            url = self.base_url
        merged_headers = {**self._default_headers, **(headers or {})}
        attempt = 0
        while True:
            request_kwargs: dict[str, Any] = {"params": params, "headers": merged_headers}
            if json is not None:
                request_kwargs["json"] = json
            logger.debug("%s %s (attempt %d)", method, url, attempt + 1)
            try:
                resp = self._client.request(method, url, **request_kwargs)
            except httpx.TransportError as e:
                if attempt < self._max_retries:
                    logger.warning("Transport error on %s %s, retrying: %s", method, url, e)
                    time.sleep(self._backoff_factor * (2**attempt))
                    attempt += 1
                    continue
                raise HttpError(0, f"Transport error: {e}") from e

            if resp.status_code in self._retry_statuses and attempt < self._max_retries:
                ra = resp.headers.get("Retry-After")
                delay = float(ra) if ra and ra.isdigit() else self._backoff_factor * (2**attempt)
                logger.warning(
                    "HTTP %d from %s %s, retrying in %.1fs", resp.status_code, method, url, delay
                )
                time.sleep(delay)
                attempt += 1
                continue

            if resp.status_code >= 400:
                try:
                    detail = resp.json()
                except ValueError:
                    detail = resp.text
                raise HttpError(resp.status_code, resp.reason_phrase, details=detail)
            return resp

    def get(self, path: str, **kwargs: Any) -> httpx.Response:
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs: Any) -> httpx.Response:
        return self.request("POST", path, **kwargs)

    def put(self, path: str, **kwargs: Any) -> httpx.Response:
        return self.request("PUT", path, **kwargs)

    def patch(self, path: str, **kwargs: Any) -> httpx.Response:
        return self.request("PATCH", path, **kwargs)

    def delete(self, path: str, **kwargs: Any) -> httpx.Response:
        return self.request("DELETE", path, **kwargs)

    def close(self) -> None:
        """Close the underlying :class:`httpx.Client`."""

        self._client.close()

    def __enter__(self) -> HttpClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
