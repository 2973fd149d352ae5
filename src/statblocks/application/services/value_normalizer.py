from __future__ import annotations

import math
from typing import Any, List


_TRUE_STRINGS = {"true", "yes", "1"}
_FALSE_STRINGS = {"false", "no", "0"}


def _integral(value: float) -> int | float:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def to_number(value: Any) -> int | float | None:
    """Parse a loosely-typed number; ``None`` when nothing numeric is there."""

    if value is None:
        return None
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return None
        return _integral(value)
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text or "_" in text:
        return None
    try:
        return int(text)
    except ValueError:
        pass
    try:
        parsed = float(text)
    except ValueError:
        return None
    if not math.isfinite(parsed):
        return None
    return _integral(parsed)


def js_truthy(value: Any) -> bool:
    if value is None or value is False:
        return False
    if isinstance(value, (int, float)):
        return value != 0 and not (isinstance(value, float) and math.isnan(value))
    if isinstance(value, str):
        return value != ""
    return True


def to_boolean(value: Any, fallback: bool) -> bool:
    if value is None:
        return fallback
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in _TRUE_STRINGS:
            return True
        if normalized in _FALSE_STRINGS:
            return False
    return js_truthy(value)


def js_string(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return str(_integral(value))
    if isinstance(value, (list, tuple)):
        return ",".join(js_string(item) for item in value)
    return str(value)


def flatten(value: Any, depth: int | None = None) -> List[Any]:
    """Flatten nested lists ``depth`` levels deep (fully when ``depth`` is None)."""

    if not isinstance(value, (list, tuple)):
        return [value]
    flat: List[Any] = []
    for item in value:
        if isinstance(item, (list, tuple)) and (depth is None or depth > 0):
            flat.extend(flatten(item, None if depth is None else depth - 1))
        else:
            flat.append(item)
    return flat


def join_image(value: Any) -> Any:
    if not isinstance(value, (list, tuple)):
        return value
    return "".join(js_string(item) for item in flatten(value, 2))


def append_values(existing: Any, extra: Any) -> Any:
    """Concatenate a field with its additive counterpart without mutating either."""

    if isinstance(existing, list) and isinstance(extra, list):
        return [*existing, *extra]
    if isinstance(existing, str) and isinstance(extra, str):
        return existing + extra
    if isinstance(existing, list):
        return [*existing, extra]
    if isinstance(extra, list):
        return [existing, *extra]
    return [existing, extra]
