from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from core.auth import ADMIN_ACCOUNT_ID, current_owner, current_user
from db.store import DocumentStore, get_store
from schemas.users import UserAccount, UserCreate, UserRead

router = APIRouter()


@router.get("/", response_model=List[UserRead])
async def list_users(
    store: DocumentStore = Depends(get_store),
    user: UserAccount = Depends(current_user),
):
    return [UserRead.from_account(UserAccount(**u)) for u in await store.list("users")]


@router.get("/me", response_model=UserRead)
async def read_me(user: UserAccount = Depends(current_user)):
    return UserRead.from_account(user)


@router.post("/", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def create_user(
    payload: UserCreate,
    store: DocumentStore = Depends(get_store),
    user: UserAccount = Depends(current_owner),
):
    # usernames are matched case-insensitively at login
    name = payload.username.lower()
    for existing in await store.list("users"):
        if (existing.get("username") or "").lower() == name:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username already exists")

    record = {"username": payload.username, "password": payload.password, "role": payload.role.value}
    user_id = await store.create("users", record)
    return UserRead.from_account(UserAccount(**await store.get("users", user_id)))


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: str,
    store: DocumentStore = Depends(get_store),
    user: UserAccount = Depends(current_owner),
):
    if user_id == ADMIN_ACCOUNT_ID or await store.get("users", user_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    await store.delete("users", user_id)
    return None
