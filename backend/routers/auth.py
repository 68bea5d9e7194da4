from fastapi import APIRouter, Depends, HTTPException, status

from core.auth import login
from core.errors import AuthFailure
from db.store import DocumentStore, get_store
from schemas.users import LoginRequest, UserRead

router = APIRouter()


@router.post("/login", response_model=UserRead)
async def login_user(payload: LoginRequest, store: DocumentStore = Depends(get_store)):
    """Check credentials and return the account (never its password)."""
    try:
        account = await login(store, payload.username, payload.password)
    except AuthFailure as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=e.message)
    return UserRead.from_account(account)
