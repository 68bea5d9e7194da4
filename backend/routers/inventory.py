from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from core.auth import current_owner, current_user
from db.store import DocumentStore, get_store
from schemas.inventory import InventoryItemCreate, InventoryItemRead, InventoryItemUpdate
from schemas.users import UserAccount

router = APIRouter()


async def _name_taken(store: DocumentStore, name: str, exclude_id: str | None = None) -> bool:
    for item in await store.list("inventory"):
        if item["id"] != exclude_id and (item.get("name") or "").upper() == name.upper():
            return True
    return False


@router.get("/", response_model=List[InventoryItemRead])
async def list_inventory(
    store: DocumentStore = Depends(get_store),
    user: UserAccount = Depends(current_user),
):
    return [InventoryItemRead(**i) for i in await store.list("inventory")]


@router.post("/", response_model=InventoryItemRead, status_code=status.HTTP_201_CREATED)
async def create_inventory_item(
    payload: InventoryItemCreate,
    store: DocumentStore = Depends(get_store),
    user: UserAccount = Depends(current_owner),
):
    if await _name_taken(store, payload.name):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Item already exists")
    item_id = await store.create("inventory", payload.model_dump())
    return InventoryItemRead(**await store.get("inventory", item_id))


@router.patch("/{item_id}", response_model=InventoryItemRead)
async def update_inventory_item(
    item_id: str,
    payload: InventoryItemUpdate,
    store: DocumentStore = Depends(get_store),
    user: UserAccount = Depends(current_owner),
):
    if await store.get("inventory", item_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Item not found")

    data = {k: v for k, v in payload.model_dump(exclude_unset=True).items() if v is not None}
    if "name" in data and await _name_taken(store, data["name"], exclude_id=item_id):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Item already exists")

    return InventoryItemRead(**await store.update("inventory", item_id, data))


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_inventory_item(
    item_id: str,
    store: DocumentStore = Depends(get_store),
    user: UserAccount = Depends(current_owner),
):
    if await store.get("inventory", item_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Item not found")
    # booked lines and bundles keep their snapshotted name and price
    await store.delete("inventory", item_id)
    return None
