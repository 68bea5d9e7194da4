import logging
from datetime import datetime
from typing import Any, List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, ValidationError

from core.auth import current_owner
from core.config import settings
from core.drafts import (
    Abandon,
    DraftState,
    EventDraft,
    Decrement,
    Increment,
    MergeBundle,
    NextStep,
    PreviousStep,
    SetField,
    ToggleUser,
    can_advance,
    can_save,
    load_draft,
    new_draft,
    reduce_draft,
    registry,
    schedule_in_order,
)
from core.ledger import booked_quantity, over_capacity
from db.store import DocumentStore, get_store
from routers.events import save_event_draft
from schemas.bundles import BundleTemplate
from schemas.events import EventRecord
from schemas.inventory import InventoryItemRead
from schemas.ledger import BookedLineRead
from schemas.users import UserAccount

logger = logging.getLogger(__name__)

router = APIRouter()


class DraftOpen(BaseModel):
    event_id: Optional[str] = None


class DraftActionRequest(BaseModel):
    type: Literal[
        "set_field", "toggle_user", "increment", "decrement",
        "merge_bundle", "next_step", "previous_step",
    ]
    field: Optional[str] = None
    value: Any = None
    user_id: Optional[str] = None
    inventory_item_id: Optional[str] = None
    name: Optional[str] = None
    bundle_id: Optional[str] = None


class DraftRead(BaseModel):
    key: str
    event_id: Optional[str] = None
    state: DraftState
    step: int
    title: str
    location: str
    setup_start: Optional[datetime] = None
    event_start: Optional[datetime] = None
    event_end: Optional[datetime] = None
    teardown_end: Optional[datetime] = None
    assigned_users: List[str]
    booked_items: List[BookedLineRead]
    total_price: float
    can_advance: bool
    can_save: bool
    schedule_in_order: bool
    over_capacity: List[str]


def _serialize_draft(key: str, draft: EventDraft, inventory: List[InventoryItemRead]) -> DraftRead:
    stock = {i.name: i.stock for i in inventory}
    lines = []
    for line in draft.booked_items:
        s = stock.get(line.name)
        lines.append(
            BookedLineRead(
                **line.model_dump(),
                stock=s,
                at_max=s is not None and booked_quantity(draft.booked_items, line.name) >= s,
            )
        )
    return DraftRead(
        key=key,
        event_id=draft.id,
        state=draft.state,
        step=draft.step,
        title=draft.title,
        location=draft.location,
        setup_start=draft.setup_start,
        event_start=draft.event_start,
        event_end=draft.event_end,
        teardown_end=draft.teardown_end,
        assigned_users=draft.assigned_users,
        booked_items=lines,
        total_price=draft.total_price,
        can_advance=can_advance(draft),
        can_save=can_save(draft),
        schedule_in_order=schedule_in_order(draft),
        over_capacity=over_capacity(draft.booked_items, inventory),
    )


async def _inventory(store: DocumentStore) -> List[InventoryItemRead]:
    return [InventoryItemRead(**i) for i in await store.list("inventory")]


def _get_draft(key: str) -> EventDraft:
    draft = registry.get(key)
    if draft is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Draft not found")
    return draft


def _require(value: Optional[str], what: str) -> str:
    if not value:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"{what} is required")
    return value


async def _to_action(payload: DraftActionRequest, store: DocumentStore):
    if payload.type == "set_field":
        return SetField(_require(payload.field, "field"), payload.value)
    if payload.type == "toggle_user":
        return ToggleUser(_require(payload.user_id, "user_id"))
    if payload.type == "increment":
        data = await store.get("inventory", _require(payload.inventory_item_id, "inventory_item_id"))
        if data is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Item not found")
        return Increment(InventoryItemRead(**data))
    if payload.type == "decrement":
        return Decrement(_require(payload.name, "name"))
    if payload.type == "merge_bundle":
        data = await store.get("bundles", _require(payload.bundle_id, "bundle_id"))
        if data is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Bundle not found")
        stock_by_name = None
        if settings.bundle_respects_stock:
            stock_by_name = {i.name: i.stock for i in await _inventory(store)}
        return MergeBundle(BundleTemplate(**data), stock_by_name)
    if payload.type == "next_step":
        return NextStep()
    return PreviousStep()


@router.post("/", response_model=DraftRead, status_code=status.HTTP_201_CREATED)
async def open_draft(
    payload: DraftOpen,
    store: DocumentStore = Depends(get_store),
    user: UserAccount = Depends(current_owner),
):
    """Open an empty draft, or a draft of a saved event for editing."""
    if payload.event_id:
        data = await store.get("events", payload.event_id)
        if data is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Event not found")
        draft = load_draft(EventRecord(**data))
    else:
        draft = new_draft()
    key = registry.open(draft)
    return _serialize_draft(key, draft, await _inventory(store))


@router.get("/{key}", response_model=DraftRead)
async def get_draft(
    key: str,
    store: DocumentStore = Depends(get_store),
    user: UserAccount = Depends(current_owner),
):
    return _serialize_draft(key, _get_draft(key), await _inventory(store))


@router.post("/{key}/actions", response_model=DraftRead)
async def apply_draft_action(
    key: str,
    payload: DraftActionRequest,
    store: DocumentStore = Depends(get_store),
    user: UserAccount = Depends(current_owner),
):
    draft = _get_draft(key)
    action = await _to_action(payload, store)
    try:
        draft = reduce_draft(draft, action)
    except ValidationError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid value for {payload.field}")
    registry.put(key, draft)
    return _serialize_draft(key, draft, await _inventory(store))


@router.post("/{key}/save", response_model=DraftRead)
async def save_draft(
    key: str,
    store: DocumentStore = Depends(get_store),
    user: UserAccount = Depends(current_owner),
):
    """Persist the draft and discard it. Refused with 400 while the title is empty."""
    saved = await save_event_draft(store, _get_draft(key))
    registry.put(key, saved)
    logger.info("[drafts] %s saved as event %s", key, saved.id)
    return _serialize_draft(key, saved, await _inventory(store))


@router.delete("/{key}", status_code=status.HTTP_204_NO_CONTENT)
async def abandon_draft(key: str, user: UserAccount = Depends(current_owner)):
    registry.put(key, reduce_draft(_get_draft(key), Abandon()))
    return None
