"""
Seed demo data (inventory, bundles, crew) into the configured database.

This script can be run from either:
- backend/: `python scripts/seed_demo_data.py`
- repo root: `python backend/scripts/seed_demo_data.py`

Existing records with the same name are left untouched.
"""

import asyncio
import sys
from pathlib import Path

# Allow running from repo root by ensuring `backend/` is on sys.path
BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from core.bundles import create_bundle
from db.database import async_session_maker, create_db_and_tables
from db.store import DocumentStore
from schemas.inventory import InventoryItemRead


INVENTORY = [
    {"name": "PA-SPEAKER", "rent_price": 50.0, "stock": 8},
    {"name": "SUBWOOFER", "rent_price": 70.0, "stock": 4},
    {"name": "MIXER", "rent_price": 80.0, "stock": 3},
    {"name": "WIRELESS MIC", "rent_price": 25.0, "stock": 6},
    {"name": "MOVING HEAD", "rent_price": 45.0, "stock": 12},
    {"name": "TRUSS 2M", "rent_price": 15.0, "stock": 20},
]

BUNDLES = [
    ("BASIC DJ", [("MIXER", 1), ("PA-SPEAKER", 2)]),
    ("HOCHZEIT TON BASIS", [("PA-SPEAKER", 2), ("WIRELESS MIC", 2), ("MIXER", 1)]),
    ("CLUB LIGHT", [("MOVING HEAD", 8), ("TRUSS 2M", 4)]),
]

CREW = [
    {"username": "lena", "password": "lena", "role": "ProjectLead"},
    {"username": "tom", "password": "tom", "role": "Technician"},
    {"username": "mia", "password": "mia", "role": "Logistics"},
]


async def seed() -> None:
    await create_db_and_tables()
    async with async_session_maker() as session:
        store = DocumentStore(session)

        existing = {i["name"]: i for i in await store.list("inventory")}
        for item in INVENTORY:
            if item["name"] not in existing:
                await store.create("inventory", item)
        inventory = {i["name"]: InventoryItemRead(**i) for i in await store.list("inventory")}

        bundle_names = {b["name"] for b in await store.list("bundles")}
        for name, picks in BUNDLES:
            if name in bundle_names:
                continue
            bundle = create_bundle(name, [(inventory[n], q) for n, q in picks])
            await store.create("bundles", bundle.model_dump(exclude={"id", "item_count"}))

        usernames = {(u["username"] or "").lower() for u in await store.list("users")}
        for user in CREW:
            if user["username"] not in usernames:
                await store.create("users", user)

        print(
            f"[seed_demo_data] inventory={len(inventory)} "
            f"bundles={len(await store.list('bundles'))} users={len(await store.list('users'))}"
        )


if __name__ == "__main__":
    asyncio.run(seed())
