from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from core.auth import current_owner, current_user
from core.bundles import create_bundle
from core.errors import ValidationRefusal
from db.store import DocumentStore, get_store
from schemas.bundles import BundleCreate, BundleTemplate
from schemas.inventory import InventoryItemRead
from schemas.users import UserAccount

router = APIRouter()


@router.get("/", response_model=List[BundleTemplate])
async def list_bundles(
    store: DocumentStore = Depends(get_store),
    user: UserAccount = Depends(current_user),
):
    return [BundleTemplate(**b) for b in await store.list("bundles")]


@router.post("/", response_model=BundleTemplate, status_code=status.HTTP_201_CREATED)
async def create_bundle_from_inventory(
    payload: BundleCreate,
    store: DocumentStore = Depends(get_store),
    user: UserAccount = Depends(current_owner),
):
    """Create a bundle; prices are copied from the items' current rent price."""
    inventory = {i["id"]: InventoryItemRead(**i) for i in await store.list("inventory")}
    missing = [s.inventory_item_id for s in payload.items if s.inventory_item_id not in inventory]
    if missing:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Unknown items: {', '.join(missing)}")

    bundle = create_bundle(
        payload.name,
        [(inventory[s.inventory_item_id], s.quantity) for s in payload.items],
    )
    if bundle is None:
        raise ValidationRefusal("name and at least one item are required")

    bundle_id = await store.create("bundles", bundle.model_dump(exclude={"id", "item_count"}))
    return BundleTemplate(**await store.get("bundles", bundle_id))


@router.delete("/{bundle_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_bundle(
    bundle_id: str,
    store: DocumentStore = Depends(get_store),
    user: UserAccount = Depends(current_owner),
):
    if await store.get("bundles", bundle_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Bundle not found")
    await store.delete("bundles", bundle_id)
    return None
