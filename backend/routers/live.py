import asyncio
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status

from core.auth import login, parse_basic_header
from core.errors import AuthFailure
from core.hub import hub
from core.state import COLLECTIONS, AppState, Snapshot, apply_snapshot, dump_collection
from db.database import async_session_maker
from db.store import DocumentStore

logger = logging.getLogger(__name__)

router = APIRouter()


async def _authorized(websocket: WebSocket) -> bool:
    creds = parse_basic_header(websocket.headers.get("authorization"))
    if creds is None:
        return False
    async with async_session_maker() as db:
        try:
            await login(DocumentStore(db), *creds)
        except AuthFailure:
            return False
    return True


@router.websocket("/ws/{collection}")
async def stream_collection(websocket: WebSocket, collection: str):
    """Push the full collection on connect and again after every write."""
    if collection not in COLLECTIONS or not await _authorized(websocket):
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    sub = hub.subscribe(collection)
    state = AppState()

    async def send(records) -> AppState:
        new_state = apply_snapshot(state, Snapshot(collection, records))
        await websocket.send_json({"collection": collection, "records": dump_collection(new_state, collection)})
        return new_state

    receiver = getter = None
    try:
        async with async_session_maker() as db:
            initial = await DocumentStore(db).list(collection)
        state = await send(initial)

        receiver = asyncio.ensure_future(websocket.receive_text())
        getter = asyncio.ensure_future(sub.get())
        while True:
            done, _ = await asyncio.wait({receiver, getter}, return_when=asyncio.FIRST_COMPLETED)
            if getter in done:
                state = await send(getter.result())
                getter = asyncio.ensure_future(sub.get())
            if receiver in done:
                # clients do not send anything; this surfaces the disconnect
                receiver.result()
                receiver = asyncio.ensure_future(websocket.receive_text())
    except WebSocketDisconnect:
        logger.debug("[live] %s subscriber disconnected", collection)
    finally:
        for task in (receiver, getter):
            if task is not None:
                task.cancel()
        sub.close()
