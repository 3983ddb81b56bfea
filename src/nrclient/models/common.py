"""Helpers shared by the typed models."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, cast

from pydantic import BaseModel


def epoch_millis_to_datetime(value: Any) -> Any:
    """Convert epoch milliseconds to an aware UTC datetime, passing other values through."""

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    return value


def datetime_to_epoch_millis(value: datetime | None) -> int | None:
    if value is None:
        return None
    return int(value.timestamp() * 1000)


def dump_payload(obj: Any) -> dict[str, Any]:
    """Serialise a model (or pass through a dict) as a camelCase JSON payload."""

    if isinstance(obj, BaseModel):
        return cast(dict[str, Any], obj.model_dump(by_alias=True, exclude_none=True, mode="json"))
    if isinstance(obj, dict):
        return obj
    raise TypeError(f"Unsupported payload type: {type(obj)!r}")
