import logging

from fastapi import APIRouter, Depends, HTTPException, Response

from app.api.deps import get_app_settings, get_current_user, get_user_store
from app.config import Settings
from app.errors import DuplicateEmailError, PersistenceError
from app.schemas.auth import LoginRequest, OkResponse, RegisterRequest, User, UserOut
from app.services.auth import SESSION_COOKIE, create_session_token, hash_password, verify_password
from app.services.user_store import UserStore

log = logging.getLogger(__name__)

router = APIRouter()


@router.post("/register", response_model=OkResponse)
def register(payload: RegisterRequest, users: UserStore = Depends(get_user_store)):
    if not payload.name or not payload.email or not payload.password:
        raise HTTPException(status_code=400, detail="Missing fields")

    try:
        if users.get_by_email(payload.email):
            raise HTTPException(status_code=409, detail="Email already in use")
        user = users.create(payload.name, payload.email, hash_password(payload.password))
    except DuplicateEmailError:
        raise HTTPException(status_code=409, detail="Email already in use")
    except PersistenceError:
        raise HTTPException(status_code=500, detail="Registration failed")

    log.info("Registered user %s", user.id)
    return OkResponse()


@router.post("/login", response_model=OkResponse)
def login(
    payload: LoginRequest,
    response: Response,
    users: UserStore = Depends(get_user_store),
    settings: Settings = Depends(get_app_settings),
):
    if not payload.email or not payload.password:
        raise HTTPException(status_code=400, detail="Missing fields")

    try:
        user = users.get_by_email(payload.email)
    except PersistenceError:
        raise HTTPException(status_code=500, detail="Login failed")

    if user is None or not verify_password(payload.password, user.password_hash):
        log.warning("Failed login for %s", payload.email)
        raise HTTPException(status_code=401, detail="Invalid credentials")

    response.set_cookie(
        SESSION_COOKIE,
        create_session_token(user, settings),
        max_age=settings.session_ttl_days * 24 * 60 * 60,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.cookie_secure,
    )
    return OkResponse()


@router.post("/logout", response_model=OkResponse)
def logout(response: Response, settings: Settings = Depends(get_app_settings)):
    response.delete_cookie(
        SESSION_COOKIE,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.cookie_secure,
    )
    response.headers["Cache-Control"] = "no-cache, no-store, must-revalidate"
    response.headers["Pragma"] = "no-cache"
    response.headers["Expires"] = "0"
    return OkResponse()


@router.get("/me", response_model=UserOut)
def me(user: User = Depends(get_current_user)):
    return UserOut.model_validate(user)
