import math
from datetime import datetime, timezone
from typing import Any, Dict, Optional


def as_number(x: Any) -> float:
    """Coerce a stored value to a float; None, NaN and garbage become 0."""
    if isinstance(x, bool):
        return float(x)
    try:
        v = float(x)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(v) or math.isinf(v):
        return 0.0
    return v


def as_int(x: Any) -> int:
    return int(as_number(x))


def as_count(x: Any) -> int:
    """Non-negative integer, e.g. stock."""
    return max(0, as_int(x))


def as_price(x: Any) -> float:
    """Non-negative currency amount."""
    return max(0.0, as_number(x))


def sanitize(record: Dict[str, Any]) -> Dict[str, Any]:
    """Replace undefined values with explicit None before a write."""
    out: Dict[str, Any] = {}
    for k, v in (record or {}).items():
        if isinstance(v, dict):
            out[k] = sanitize(v)
        elif isinstance(v, (list, tuple)):
            out[k] = [sanitize(i) if isinstance(i, dict) else i for i in v]
        elif isinstance(v, float) and math.isnan(v):
            out[k] = None
        else:
            out[k] = v
    return out


def as_naive_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Timestamps are stored naive; aware values are converted to UTC first."""
    if dt is None or dt.tzinfo is None:
        return dt
    return dt.astimezone(timezone.utc).replace(tzinfo=None)
