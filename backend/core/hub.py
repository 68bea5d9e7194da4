import asyncio
import logging
from typing import Any, Dict, List, Sequence, Set

from core.state import COLLECTIONS

logger = logging.getLogger(__name__)

Records = Sequence[Dict[str, Any]]


class Subscription:
    """Receives full snapshots of one collection.

    Only the newest snapshot is kept: a slow reader skips intermediate ones.
    """

    def __init__(self, hub: "SnapshotHub", collection: str) -> None:
        self._hub = hub
        self.collection = collection
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=1)

    def push(self, records: Records) -> None:
        if self._queue.full():
            self._queue.get_nowait()
        self._queue.put_nowait(list(records))

    async def get(self) -> List[Dict[str, Any]]:
        return await self._queue.get()

    def close(self) -> None:
        self._hub._remove(self)


class SnapshotHub:
    def __init__(self) -> None:
        self._subs: Dict[str, Set[Subscription]] = {c: set() for c in COLLECTIONS}

    def subscribe(self, collection: str) -> Subscription:
        if collection not in self._subs:
            raise KeyError(f"Unknown collection: {collection}")
        sub = Subscription(self, collection)
        self._subs[collection].add(sub)
        return sub

    def _remove(self, sub: Subscription) -> None:
        self._subs.get(sub.collection, set()).discard(sub)

    def subscriber_count(self, collection: str) -> int:
        return len(self._subs.get(collection, ()))

    def publish(self, collection: str, records: Records) -> int:
        subs = list(self._subs.get(collection, ()))
        for sub in subs:
            sub.push(records)
        logger.debug("[hub] %s snapshot (%d records) -> %d subscribers", collection, len(records), len(subs))
        return len(subs)


hub = SnapshotHub()
