"""
Login check against the users collection.

Passwords are compared as plaintext and a configured bypass pair always maps
to an Owner account. Both are inherited behaviour of the rental tool and are
not a model for anything security sensitive.
"""

import base64
import binascii
import logging
from typing import Iterable, Optional, Tuple

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from core.config import settings
from core.errors import AuthFailure
from db.store import DocumentStore, get_store
from schemas.users import Role, UserAccount

logger = logging.getLogger(__name__)

ADMIN_ACCOUNT_ID = "ADMIN"

security = HTTPBasic(auto_error=False)


def bypass_account() -> UserAccount:
    return UserAccount(id=ADMIN_ACCOUNT_ID, username="Administrator", role=Role.OWNER)


def authenticate(
    users: Iterable[UserAccount],
    username: str,
    password: str,
    admin_username: Optional[str] = None,
    admin_password: Optional[str] = None,
) -> Optional[UserAccount]:
    admin_username = settings.admin_username if admin_username is None else admin_username
    admin_password = settings.admin_password if admin_password is None else admin_password
    name = (username or "").lower()

    if admin_username and name == admin_username.lower() and password == admin_password:
        return bypass_account()

    for user in users:
        if user.username and user.username.lower() == name and user.password == password:
            return user
    return None


async def login(store: DocumentStore, username: str, password: str) -> UserAccount:
    users = [UserAccount(**u) for u in await store.list("users")]
    account = authenticate(users, username, password)
    if account is None:
        logger.info("[auth] denied login for %r", username)
        raise AuthFailure()
    return account


def parse_basic_header(header: Optional[str]) -> Optional[Tuple[str, str]]:
    """(username, password) from an ``Authorization: Basic`` header value."""
    scheme, _, param = (header or "").partition(" ")
    if scheme.lower() != "basic" or not param:
        return None
    try:
        decoded = base64.b64decode(param).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None
    username, sep, password = decoded.partition(":")
    if not sep:
        return None
    return username, password


def _denied() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=AuthFailure.message,
        headers={"WWW-Authenticate": "Basic"},
    )


async def current_user(
    credentials: Optional[HTTPBasicCredentials] = Depends(security),
    store: DocumentStore = Depends(get_store),
) -> UserAccount:
    if credentials is None:
        raise _denied() from None
    try:
        return await login(store, credentials.username, credentials.password)
    except AuthFailure:
        raise _denied() from None


async def current_owner(user: UserAccount = Depends(current_user)) -> UserAccount:
    if not user.is_owner:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the owner may change this",
        )
    return user
