"""Display helpers matching the de-DE formats of the web client."""

from datetime import datetime
from typing import Optional, Union

from core.converters import as_number

Timestamp = Union[datetime, str, None]


def format_currency(num) -> str:
    s = f"{as_number(num):,.2f}"
    s = s.replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{s} €"


def _parse(ts: Timestamp) -> Optional[datetime]:
    if isinstance(ts, datetime):
        return ts
    if not ts:
        return None
    try:
        return datetime.fromisoformat(str(ts))
    except ValueError:
        return None


def format_date(ts: Timestamp) -> str:
    dt = _parse(ts)
    return dt.strftime("%d.%m.%Y") if dt else "---"


def format_time(ts: Timestamp) -> str:
    dt = _parse(ts)
    return dt.strftime("%H:%M") if dt else "--:--"


def short_ref(event_id: Optional[str]) -> str:
    return (event_id or "")[-6:]
