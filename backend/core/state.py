"""
Client view of the four live collections.

Snapshots arrive per collection, whole, in any order. ``apply_snapshot`` is
the reducer: it replaces one collection and keeps the other three, parsing
records through the schemas so missing fields take their defaults.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Dict, Iterable, List, Sequence, Tuple

from schemas.bundles import BundleTemplate
from schemas.events import EventRecord
from schemas.inventory import InventoryItemRead
from schemas.users import UserAccount, UserRead

COLLECTIONS = ("events", "inventory", "users", "bundles")

_SCHEMAS = {
    "events": EventRecord,
    "inventory": InventoryItemRead,
    "users": UserAccount,
    "bundles": BundleTemplate,
}


@dataclass(frozen=True)
class Snapshot:
    collection: str
    records: Sequence[Dict[str, Any]]


@dataclass(frozen=True)
class AppState:
    events: Tuple[EventRecord, ...] = ()
    inventory: Tuple[InventoryItemRead, ...] = ()
    users: Tuple[UserAccount, ...] = ()
    bundles: Tuple[BundleTemplate, ...] = ()


def _start_key(event: EventRecord):
    # missing starts sort last; drop tzinfo so naive and aware values compare
    start = event.event_start
    if start is None:
        return (1, datetime.max)
    return (0, start.replace(tzinfo=None))


def sort_timeline(events: Iterable[EventRecord]) -> List[EventRecord]:
    return sorted(events, key=_start_key)


def parse_records(collection: str, records: Iterable[Dict[str, Any]]) -> list:
    schema = _SCHEMAS[collection]
    parsed = [schema(**(r or {})) for r in records]
    if collection == "events":
        parsed = sort_timeline(parsed)
    return parsed


def apply_snapshot(state: AppState, snapshot: Snapshot) -> AppState:
    if snapshot.collection not in _SCHEMAS:
        raise KeyError(f"Unknown collection: {snapshot.collection}")
    parsed = tuple(parse_records(snapshot.collection, snapshot.records))
    return replace(state, **{snapshot.collection: parsed})


def dump_collection(state: AppState, collection: str) -> List[Dict[str, Any]]:
    """JSON-ready records for one collection. Passwords never leave the server."""
    items = getattr(state, collection)
    if collection == "users":
        return [UserRead.from_account(u).model_dump(mode="json") for u in items]
    return [i.model_dump(mode="json") for i in items]
