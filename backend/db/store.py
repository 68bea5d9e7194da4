"""
Generic document store over the four collections.

list / get / create / update / delete work on plain dicts. After each
committed write the full collection is pushed to the snapshot hub, so
subscribers never need read-after-write from the writer.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.converters import sanitize
from core.errors import NotFound, StoreFailure
from core.hub import SnapshotHub, hub as default_hub
from db.database import (
    get_async_session,
    Bundle as BundleModel,
    Event as EventModel,
    InventoryItem as InventoryItemModel,
    User as UserModel,
)

logger = logging.getLogger(__name__)

MODELS = {
    "events": EventModel,
    "inventory": InventoryItemModel,
    "bundles": BundleModel,
    "users": UserModel,
}


def _model_for(collection: str):
    try:
        return MODELS[collection]
    except KeyError:
        raise KeyError(f"Unknown collection: {collection}") from None


def _writable(model, record: Dict[str, Any]) -> Dict[str, Any]:
    columns = {c.key for c in model.__table__.columns} - {"id", "created_at", "updated_at"}
    return {k: v for k, v in sanitize(record).items() if k in columns}


class DocumentStore:
    def __init__(self, db: AsyncSession, hub: Optional[SnapshotHub] = None) -> None:
        self.db = db
        self.hub = hub

    async def list(self, collection: str) -> List[Dict[str, Any]]:
        model = _model_for(collection)
        try:
            res = await self.db.execute(select(model))
        except SQLAlchemyError as e:
            logger.exception("[store] list %s failed", collection)
            raise StoreFailure() from e
        return [m.to_schema for m in res.scalars().all()]

    async def get(self, collection: str, record_id: str) -> Optional[Dict[str, Any]]:
        m = await self._load(collection, record_id)
        return m.to_schema if m is not None else None

    async def create(self, collection: str, record: Dict[str, Any]) -> str:
        model = _model_for(collection)
        m = model(**_writable(model, record))
        self.db.add(m)
        await self._commit(collection, "create")
        logger.info("[store] created %s/%s", collection, m.id)
        return m.id

    async def update(self, collection: str, record_id: str, partial: Dict[str, Any]) -> Dict[str, Any]:
        model = _model_for(collection)
        m = await self._load(collection, record_id)
        if m is None:
            raise NotFound(f"{collection} record not found")
        for key, value in _writable(model, partial).items():
            setattr(m, key, value)
        await self._commit(collection, "update")
        logger.info("[store] updated %s/%s", collection, record_id)
        return m.to_schema

    async def delete(self, collection: str, record_id: str) -> None:
        m = await self._load(collection, record_id)
        if m is None:
            raise NotFound(f"{collection} record not found")
        await self.db.delete(m)
        await self._commit(collection, "delete")
        logger.info("[store] deleted %s/%s", collection, record_id)

    async def _load(self, collection: str, record_id: str):
        model = _model_for(collection)
        try:
            return await self.db.get(model, record_id)
        except SQLAlchemyError as e:
            logger.exception("[store] get %s/%s failed", collection, record_id)
            raise StoreFailure() from e

    async def _commit(self, collection: str, op: str) -> None:
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.exception("[store] %s on %s failed", op, collection)
            raise StoreFailure() from e
        await self._publish(collection)

    async def _publish(self, collection: str) -> None:
        if self.hub is None or not self.hub.subscriber_count(collection):
            return
        # the write is committed; a failed re-read only skips this snapshot
        try:
            records = await self.list(collection)
        except StoreFailure:
            logger.warning("[store] %s snapshot skipped after write", collection)
            return
        self.hub.publish(collection, records)


async def get_store(db: AsyncSession = Depends(get_async_session)) -> DocumentStore:
    return DocumentStore(db, default_hub)
