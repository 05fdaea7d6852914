import logging

from fastapi import APIRouter, Depends, Response

from app.core.config import Settings
from app.db.models import User
from app.schemas.auth import LoginRequest, Token
from app.schemas.user import UserOut
from app.services.authing import AuthingService
from app.utils.auth import create_access_token
from app.utils.deps import get_authing, get_current_user, get_settings

log = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _set_auth_cookie(response: Response, settings: Settings, access_token: str) -> None:
    response.set_cookie(
        key=settings.ACCESS_TOKEN_COOKIE_NAME,
        value=access_token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=settings.ACCESS_TOKEN_HTTPONLY,
        secure=settings.COOKIE_SECURE,
        samesite=settings.COOKIE_SAMESITE,
        domain=settings.COOKIE_DOMAIN,
        path="/",
    )


def _clear_auth_cookie(response: Response, settings: Settings) -> None:
    response.set_cookie(
        key=settings.ACCESS_TOKEN_COOKIE_NAME,
        value="",
        max_age=0,
        httponly=settings.ACCESS_TOKEN_HTTPONLY,
        secure=settings.COOKIE_SECURE,
        samesite=settings.COOKIE_SAMESITE,
        domain=settings.COOKIE_DOMAIN,
        path="/",
    )


@router.post("/login", response_model=Token)
async def login(
    data: LoginRequest,
    response: Response,
    settings: Settings = Depends(get_settings),
    authing: AuthingService = Depends(get_authing),
):
    user = await authing.authenticate(data.username, data.password)
    access_token = create_access_token(user.id, settings)
    _set_auth_cookie(response, settings, access_token)
    log.info("Logged in: %s", user.username)
    return Token(access_token=access_token)


@router.post("/logout")
async def logout(response: Response, settings: Settings = Depends(get_settings)) -> dict:
    _clear_auth_cookie(response, settings)
    return {"ok": True, "message": "Logged out"}


@router.get("/session", response_model=UserOut)
async def get_session_user(user: User = Depends(get_current_user)):
    return UserOut.model_validate(user)
