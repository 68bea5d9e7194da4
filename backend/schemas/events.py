from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, field_validator

from core.converters import as_price
from schemas.ledger import BookedLine


TIMESTAMP_FIELDS = ("setup_start", "event_start", "event_end", "teardown_end")


def _blank_to_none(v):
    if isinstance(v, str) and not v.strip():
        return None
    return v


class EventRecord(BaseModel):
    """A persisted event as read back from the store."""

    id: Optional[str] = None
    title: str = ""
    location: str = ""
    setup_start: Optional[datetime] = None
    event_start: Optional[datetime] = None
    event_end: Optional[datetime] = None
    teardown_end: Optional[datetime] = None
    assigned_users: List[str] = []
    booked_items: List[BookedLine] = []
    total_price: float = 0.0

    @field_validator("title", "location", mode="before")
    @classmethod
    def _text(cls, v) -> str:
        return "" if v is None else str(v)

    @field_validator(*TIMESTAMP_FIELDS, mode="before")
    @classmethod
    def _timestamps(cls, v):
        return _blank_to_none(v)

    @field_validator("assigned_users", "booked_items", mode="before")
    @classmethod
    def _lists(cls, v):
        return list(v or [])

    @field_validator("total_price", mode="before")
    @classmethod
    def _total(cls, v) -> float:
        return as_price(v)


class EventRead(EventRecord):
    short_ref: str = ""
    schedule_in_order: bool = True


class EventSave(BaseModel):
    """Full event payload for create and save-in-place.

    ``total_price`` is not accepted; it is always derived from the booked items.
    """

    title: str = ""
    location: str = ""
    setup_start: Optional[datetime] = None
    event_start: Optional[datetime] = None
    event_end: Optional[datetime] = None
    teardown_end: Optional[datetime] = None
    assigned_users: List[str] = []
    booked_items: List[BookedLine] = []

    @field_validator("title", "location", mode="before")
    @classmethod
    def _text(cls, v) -> str:
        return "" if v is None else str(v)

    @field_validator(*TIMESTAMP_FIELDS, mode="before")
    @classmethod
    def _timestamps(cls, v):
        return _blank_to_none(v)
