import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from core.auth import current_owner, current_user
from core.drafts import EventDraft, MarkSaved, prepare_save, reduce_draft, schedule_in_order
from core.errors import ValidationRefusal
from core.formatting import short_ref
from core.state import sort_timeline
from db.store import DocumentStore, get_store
from schemas.events import EventRead, EventRecord, EventSave
from schemas.users import UserAccount

logger = logging.getLogger(__name__)

router = APIRouter()


def _serialize_event(record: EventRecord) -> EventRead:
    return EventRead(
        **record.model_dump(),
        short_ref=short_ref(record.id),
        schedule_in_order=schedule_in_order(record),
    )


def _draft_from_payload(payload: EventSave, event_id: str | None = None) -> EventDraft:
    return EventDraft(id=event_id, **payload.model_dump())


async def save_event_draft(store: DocumentStore, draft: EventDraft) -> EventDraft:
    """Write a draft: update in place when it has an identity, create otherwise.

    Returns the draft marked SAVED. Raises ValidationRefusal while the title is empty.
    """
    record = prepare_save(draft)
    if record is None:
        raise ValidationRefusal("title is required")

    if draft.is_new:
        event_id = await store.create("events", record)
    else:
        if await store.get("events", draft.id) is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Event not found")
        await store.update("events", draft.id, record)
        event_id = draft.id
    return reduce_draft(draft, MarkSaved(event_id))


async def _read_event(store: DocumentStore, event_id: str) -> EventRead:
    data = await store.get("events", event_id)
    if data is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Event not found")
    return _serialize_event(EventRecord(**data))


@router.get("/", response_model=List[EventRead])
async def list_events(
    store: DocumentStore = Depends(get_store),
    user: UserAccount = Depends(current_user),
):
    """Timeline, ordered by event start."""
    events = sort_timeline(EventRecord(**e) for e in await store.list("events"))
    return [_serialize_event(e) for e in events]


@router.get("/{event_id}", response_model=EventRead)
async def get_event(
    event_id: str,
    store: DocumentStore = Depends(get_store),
    user: UserAccount = Depends(current_user),
):
    return await _read_event(store, event_id)


@router.post("/", response_model=EventRead, status_code=status.HTTP_201_CREATED)
async def create_event(
    payload: EventSave,
    store: DocumentStore = Depends(get_store),
    user: UserAccount = Depends(current_owner),
):
    saved = await save_event_draft(store, _draft_from_payload(payload))
    return await _read_event(store, saved.id)


@router.put("/{event_id}", response_model=EventRead)
async def save_event(
    event_id: str,
    payload: EventSave,
    store: DocumentStore = Depends(get_store),
    user: UserAccount = Depends(current_owner),
):
    """Save in place; the event keeps its identity."""
    saved = await save_event_draft(store, _draft_from_payload(payload, event_id))
    return await _read_event(store, saved.id)


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event(
    event_id: str,
    store: DocumentStore = Depends(get_store),
    user: UserAccount = Depends(current_owner),
):
    if await store.get("events", event_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Event not found")
    await store.delete("events", event_id)
    logger.info("[events] %s deleted by %s", event_id, user.username)
    return None
