from __future__ import annotations

import math
from typing import Any

from ...core.memory import PLACEHOLDER_DESCRIPTION, MemoryUpload


def parse_finite_float(value: Any, *, field: str) -> float:
    if value is None:
        raise ValueError(f"Missing {field}")
    if isinstance(value, bool):
        raise ValueError(f"Invalid {field}")
    try:
        v = float(value)
    except (TypeError, ValueError) as ex:
        raise ValueError(f"Invalid {field}") from ex
    if not math.isfinite(v):
        raise ValueError(f"{field} must be finite")
    return v


def parse_int(value: Any, *, field: str) -> int:
    if value is None:
        raise ValueError(f"Missing {field}")
    if isinstance(value, bool):
        raise ValueError(f"Invalid {field}")
    try:
        return int(value)
    except (TypeError, ValueError) as ex:
        raise ValueError(f"Invalid {field}") from ex


def _optional_float(body: dict[str, Any], key: str) -> float | None:
    if body.get(key) is None:
        return None
    return parse_finite_float(body.get(key), field=key)


def parse_upload(body: Any) -> MemoryUpload:
    """One upload, either a bare url string or `{url, timestamp?, scale?, rotation?, description?}`."""

    if isinstance(body, str):
        body = {"url": body}
    if not isinstance(body, dict):
        raise ValueError("Each upload must be a url string or an object")
    url = str(body.get("url") or "").strip()
    if not url:
        raise ValueError("url is required")
    description = body.get("description")
    return MemoryUpload(
        url=url,
        timestamp=_optional_float(body, "timestamp"),
        scale=_optional_float(body, "scale"),
        rotation=_optional_float(body, "rotation"),
        description=str(description) if description is not None else PLACEHOLDER_DESCRIPTION,
    )


def parse_uploads(body: Any) -> list[MemoryUpload]:
    if isinstance(body, dict) and "uploads" in body:
        items = body.get("uploads")
    else:
        items = [body]
    if not isinstance(items, list) or not items:
        raise ValueError("uploads must be a non-empty list")
    return [parse_upload(item) for item in items]
