"""Tests for the SQLAlchemy-backed document store.

Run with: pytest backend/tests/test_store.py -v
"""

import asyncio
from datetime import datetime

import pytest
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.drafts import SetField, Increment, new_draft, reduce_draft, to_record
from core.errors import NotFound, StoreFailure
from db.store import DocumentStore
from schemas.events import EventRecord


class TestDocumentStore:
    async def test_create_and_get(self, store):
        item_id = await store.create("inventory", {"name": "MIXER", "rent_price": 80, "stock": 2})

        assert await store.get("inventory", item_id) == {
            "id": item_id, "name": "MIXER", "rent_price": 80, "stock": 2,
        }
        assert [i["id"] for i in await store.list("inventory")] == [item_id]

    async def test_unknown_keys_are_ignored(self, store):
        item_id = await store.create("inventory", {"name": "FOG", "colour": "blue", "id": "mine"})

        record = await store.get("inventory", item_id)
        assert item_id != "mine"
        assert "colour" not in record

    async def test_update_is_partial(self, store):
        item_id = await store.create("inventory", {"name": "PAR", "rent_price": 5, "stock": 10})

        updated = await store.update("inventory", item_id, {"stock": 4})

        assert updated["stock"] == 4
        assert updated["rent_price"] == 5

    async def test_missing_record(self, store):
        assert await store.get("events", "nope") is None
        with pytest.raises(NotFound):
            await store.update("events", "nope", {"title": "X"})
        with pytest.raises(NotFound):
            await store.delete("events", "nope")

    async def test_delete(self, store):
        user_id = await store.create("users", {"username": "tom", "password": "pw"})
        await store.delete("users", user_id)
        assert await store.list("users") == []

    async def test_unknown_collection(self, store):
        with pytest.raises(KeyError):
            await store.list("orders")

    async def test_event_round_trip(self, store, speaker):
        draft = new_draft()
        draft = reduce_draft(draft, SetField("title", "gala"))
        draft = reduce_draft(draft, SetField("event_start", "2025-06-01T18:00"))
        draft = reduce_draft(draft, Increment(speaker))

        event_id = await store.create("events", to_record(draft))
        event = EventRecord(**await store.get("events", event_id))

        assert event.title == "GALA"
        assert event.event_start == datetime(2025, 6, 1, 18, 0)
        assert [(l.name, l.quantity, l.price) for l in event.booked_items] == [("PA-Speaker", 1, 50)]
        assert event.total_price == 50


class TestPublishing:
    async def test_write_pushes_full_collection(self, store, hub):
        sub = hub.subscribe("bundles")

        await store.create("bundles", {"name": "DJ", "items": []})
        await store.create("bundles", {"name": "BAND", "items": []})

        records = await asyncio.wait_for(sub.get(), 1)
        assert sorted(b["name"] for b in records) == ["BAND", "DJ"]

    async def test_other_collections_are_not_pushed(self, store, hub):
        sub = hub.subscribe("events")

        await store.create("inventory", {"name": "MIXER"})

        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(sub.get(), 0.05)


async def _failing_commit(self):
    raise SQLAlchemyError("disk full")


class TestFailures:
    async def test_failed_commit_rolls_back(self, store, hub, monkeypatch):
        await store.create("inventory", {"name": "MIXER"})
        sub = hub.subscribe("inventory")
        monkeypatch.setattr(AsyncSession, "commit", _failing_commit)

        with pytest.raises(StoreFailure):
            await store.create("inventory", {"name": "FOG"})

        assert [i["name"] for i in await store.list("inventory")] == ["MIXER"]
        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(sub.get(), 0.05)

    async def test_failed_snapshot_read_keeps_the_write(self, store, hub, monkeypatch):
        async def failing_list(self, collection):
            raise StoreFailure()

        hub.subscribe("inventory")
        monkeypatch.setattr(DocumentStore, "list", failing_list)

        item_id = await store.create("inventory", {"name": "FOG"})

        assert (await store.get("inventory", item_id))["name"] == "FOG"
