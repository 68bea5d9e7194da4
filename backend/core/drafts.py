"""
Event draft lifecycle.

A draft moves EMPTY -> EDITING -> SAVED | ABANDONED. Every change goes through
``reduce_draft(draft, action)`` which returns a new draft; SAVED and ABANDONED
are terminal and ignore further actions.

The editor is a two step wizard: step 1 holds title, location, schedule and
crew, step 2 holds materiel and the final save. Leaving step 1 needs a title,
and saving re-checks the title independently.
"""

import logging
import time
import uuid
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel

from core.config import settings
from core.converters import as_naive_utc
from core.ledger import compute_total, decrement, increment, merge_bundle, normalize
from schemas.bundles import BundleTemplate
from schemas.events import TIMESTAMP_FIELDS, EventRecord
from schemas.inventory import InventoryItemRead
from schemas.ledger import BookedLine

logger = logging.getLogger(__name__)

FIRST_STEP = 1
LAST_STEP = 2
EDITABLE_FIELDS = ("title", "location") + TIMESTAMP_FIELDS


class DraftState(str, Enum):
    EMPTY = "EMPTY"
    EDITING = "EDITING"
    SAVED = "SAVED"
    ABANDONED = "ABANDONED"


class EventDraft(BaseModel):
    id: Optional[str] = None
    title: str = ""
    location: str = ""
    setup_start: Optional[datetime] = None
    event_start: Optional[datetime] = None
    event_end: Optional[datetime] = None
    teardown_end: Optional[datetime] = None
    assigned_users: List[str] = []
    booked_items: List[BookedLine] = []
    state: DraftState = DraftState.EMPTY
    step: int = FIRST_STEP

    @property
    def is_new(self) -> bool:
        return self.id is None

    @property
    def total_price(self) -> float:
        return compute_total(self.booked_items)

    @property
    def is_closed(self) -> bool:
        return self.state in (DraftState.SAVED, DraftState.ABANDONED)


# Actions

@dataclass(frozen=True)
class SetField:
    field: str
    value: Any


@dataclass(frozen=True)
class ToggleUser:
    user_id: str


@dataclass(frozen=True)
class Increment:
    item: InventoryItemRead


@dataclass(frozen=True)
class Decrement:
    name: str


@dataclass(frozen=True)
class MergeBundle:
    bundle: BundleTemplate
    stock_by_name: Optional[Mapping[str, int]] = None


@dataclass(frozen=True)
class NextStep:
    pass


@dataclass(frozen=True)
class PreviousStep:
    pass


@dataclass(frozen=True)
class Abandon:
    pass


@dataclass(frozen=True)
class MarkSaved:
    event_id: str


DraftAction = Union[
    SetField, ToggleUser, Increment, Decrement, MergeBundle,
    NextStep, PreviousStep, Abandon, MarkSaved,
]


def new_draft() -> EventDraft:
    return EventDraft()


def load_draft(event: EventRecord) -> EventDraft:
    """Fresh editing draft for a saved event; the identity is kept."""
    return EventDraft(
        id=event.id,
        title=event.title,
        location=event.location,
        setup_start=event.setup_start,
        event_start=event.event_start,
        event_end=event.event_end,
        teardown_end=event.teardown_end,
        assigned_users=list(event.assigned_users),
        booked_items=normalize(event.booked_items),
        state=DraftState.EDITING,
    )


def can_advance(draft: EventDraft) -> bool:
    return draft.step < LAST_STEP and bool(draft.title.strip())


def can_save(draft: EventDraft) -> bool:
    return not draft.is_closed and bool(draft.title.strip())


def schedule_in_order(event: Union[EventDraft, EventRecord]) -> bool:
    """True when the timestamps that are set run setup <= start <= end <= teardown."""
    present = [getattr(event, f) for f in TIMESTAMP_FIELDS if getattr(event, f) is not None]
    try:
        return all(a <= b for a, b in zip(present, present[1:]))
    except TypeError:
        # naive and aware datetimes mixed
        return False


def _edited(draft: EventDraft, **update) -> EventDraft:
    update["state"] = DraftState.EDITING
    return draft.model_copy(update=update)


def _set_field(draft: EventDraft, field: str, value: Any) -> EventDraft:
    if field not in EDITABLE_FIELDS:
        logger.warning("[drafts] ignoring unknown field %r", field)
        return draft
    # validate through the record schema: text is coerced, timestamps parsed
    value = getattr(EventRecord(**{field: value}), field)
    if field == "title":
        value = value.upper()
    return _edited(draft, **{field: value})


def reduce_draft(draft: EventDraft, action: DraftAction) -> EventDraft:
    if draft.is_closed:
        return draft

    if isinstance(action, SetField):
        return _set_field(draft, action.field, action.value)

    if isinstance(action, ToggleUser):
        users = list(draft.assigned_users)
        if action.user_id in users:
            users.remove(action.user_id)
        else:
            users.append(action.user_id)
        return _edited(draft, assigned_users=users)

    if isinstance(action, Increment):
        return _edited(draft, booked_items=increment(draft.booked_items, action.item))

    if isinstance(action, Decrement):
        return _edited(draft, booked_items=decrement(draft.booked_items, action.name))

    if isinstance(action, MergeBundle):
        return _edited(
            draft,
            booked_items=merge_bundle(draft.booked_items, action.bundle, action.stock_by_name),
        )

    if isinstance(action, NextStep):
        if not can_advance(draft):
            return draft
        return draft.model_copy(update={"step": draft.step + 1})

    if isinstance(action, PreviousStep):
        return draft.model_copy(update={"step": max(FIRST_STEP, draft.step - 1)})

    if isinstance(action, Abandon):
        return draft.model_copy(update={"state": DraftState.ABANDONED})

    if isinstance(action, MarkSaved):
        return draft.model_copy(update={"id": action.event_id, "state": DraftState.SAVED})

    raise TypeError(f"Unknown draft action: {action!r}")


def to_record(draft: EventDraft) -> Dict[str, Any]:
    """Record written to the events collection.

    The ledger is normalized and the total recomputed from it here.
    """
    lines = normalize(draft.booked_items)
    record: Dict[str, Any] = {
        "title": draft.title.strip().upper(),
        "location": draft.location,
        "assigned_users": list(draft.assigned_users),
        "booked_items": [line.model_dump() for line in lines],
        "total_price": compute_total(lines),
    }
    for f in TIMESTAMP_FIELDS:
        record[f] = as_naive_utc(getattr(draft, f))
    return record


def prepare_save(draft: EventDraft) -> Optional[Dict[str, Any]]:
    """The record to write, or None while the draft cannot be saved."""
    if not can_save(draft):
        logger.info("[drafts] save refused: title is empty")
        return None
    return to_record(draft)


class DraftRegistry:
    """Open drafts by key. Drafts are never persisted; they live until saved,
    abandoned, or left idle for longer than ``max_idle`` seconds.

    Idle drafts are pruned whenever a new draft is opened.
    """

    def __init__(self, max_idle: Optional[float] = None, clock: Callable[[], float] = time.monotonic) -> None:
        self.max_idle = max_idle
        self._clock = clock
        self._drafts: Dict[str, EventDraft] = {}
        self._touched: Dict[str, float] = {}

    def _expired(self, key: str) -> bool:
        if self.max_idle is None:
            return False
        return self._clock() - self._touched.get(key, 0.0) > self.max_idle

    def prune(self) -> int:
        stale = [key for key in self._drafts if self._expired(key)]
        for key in stale:
            self.discard(key)
        if stale:
            logger.info("[drafts] dropped %d idle drafts", len(stale))
        return len(stale)

    def open(self, draft: EventDraft) -> str:
        self.prune()
        key = uuid.uuid4().hex
        self._drafts[key] = draft
        self._touched[key] = self._clock()
        return key

    def get(self, key: str) -> Optional[EventDraft]:
        if key in self._drafts and self._expired(key):
            self.discard(key)
        return self._drafts.get(key)

    def put(self, key: str, draft: EventDraft) -> None:
        if draft.is_closed:
            self.discard(key)
        else:
            self._drafts[key] = draft
            self._touched[key] = self._clock()

    def discard(self, key: str) -> bool:
        self._touched.pop(key, None)
        return self._drafts.pop(key, None) is not None

    def __len__(self) -> int:
        return len(self._drafts)


registry = DraftRegistry(max_idle=settings.draft_idle_minutes * 60)
