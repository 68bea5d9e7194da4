"""
Delete ALL events from the database. Inventory, bundles and users are kept.

Run from backend/:
  python scripts/reset_events.py
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

# Allow running from repo root by ensuring `backend/` is on sys.path
BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from sqlalchemy import delete

from core.formatting import format_currency, format_date, short_ref
from db.database import async_session_maker, Event
from db.store import DocumentStore
from schemas.events import EventRecord


async def main() -> None:
    async with async_session_maker() as db:
        for data in await DocumentStore(db).list("events"):
            ev = EventRecord(**data)
            print(f"[reset_events] {short_ref(ev.id)}  {format_date(ev.event_start)}  {ev.title}  {format_currency(ev.total_price)}")

        res = await db.execute(delete(Event))
        await db.commit()

        events_n = int(getattr(res, "rowcount", 0) or 0)
        print(f"Deleted events: {events_n}")


if __name__ == "__main__":
    asyncio.run(main())
