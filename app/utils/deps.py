from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer

from app.core.config import Settings
from app.core.errors import NotFound
from app.db.models import User
from app.engagement import Engagement, FavoritingEngine, FriendingEngine, RemixingEngine
from app.engagement.refs import UserRef
from app.services.authing import AuthingService
from app.services.posting import PostingService
from app.utils.auth import decode_subject

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login", auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_engagement(request: Request) -> Engagement:
    return request.app.state.engagement


def get_friending(engagement: Engagement = Depends(get_engagement)) -> FriendingEngine:
    return engagement.friending


def get_favoriting(engagement: Engagement = Depends(get_engagement)) -> FavoritingEngine:
    return engagement.favoriting


def get_remixing(engagement: Engagement = Depends(get_engagement)) -> RemixingEngine:
    return engagement.remixing


def get_authing(request: Request) -> AuthingService:
    return request.app.state.authing


def get_posting(request: Request) -> PostingService:
    return request.app.state.posting


async def get_current_user(
    request: Request,
    token: str | None = Depends(oauth2_scheme),
    settings: Settings = Depends(get_settings),
    authing: AuthingService = Depends(get_authing),
) -> User:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    token_value = token or request.cookies.get(settings.ACCESS_TOKEN_COOKIE_NAME)
    if not token_value:
        raise credentials_exception

    user_id = decode_subject(token_value, settings)
    if user_id is None:
        raise credentials_exception

    try:
        return await authing.get_by_id(UserRef(user_id))
    except NotFound:
        raise credentials_exception
