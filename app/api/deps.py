from typing import Optional

from fastapi import Cookie, Depends, HTTPException, Request, status

from app.config import Settings
from app.errors import PersistenceError
from app.schemas.auth import User
from app.services.auth import SESSION_COOKIE, decode_session_token
from app.services.response_store import ResponseStore
from app.services.storage import Storage
from app.services.user_store import UserStore


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_storage(request: Request) -> Storage:
    return request.app.state.storage


def get_user_store(storage: Storage = Depends(get_storage)) -> UserStore:
    return storage.users


def get_response_store(storage: Storage = Depends(get_storage)) -> ResponseStore:
    return storage.responses


def get_current_user(
    token: Optional[str] = Cookie(None, alias=SESSION_COOKIE),
    settings: Settings = Depends(get_app_settings),
    users: UserStore = Depends(get_user_store),
) -> User:
    """Resolve the session cookie to a user, or fail with 401."""
    unauthorized = HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")

    if not token:
        raise unauthorized
    claims = decode_session_token(token, settings)
    if claims is None:
        raise unauthorized

    try:
        user = users.get_by_id(claims["sub"])
    except PersistenceError:
        raise HTTPException(status_code=500, detail="Session lookup failed")
    if user is None:
        raise unauthorized
    return user
