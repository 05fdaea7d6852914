from fastapi import APIRouter, Depends, Response

from app.core.config import Settings
from app.db.models import User
from app.schemas.user import PasswordUpdate, UserCreate, UsernameUpdate, UserOut
from app.services.authing import AuthingService
from app.utils.deps import get_authing, get_current_user, get_settings

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=list[UserOut])
async def get_users(authing: AuthingService = Depends(get_authing)):
    return [UserOut.model_validate(u) for u in await authing.get_users()]


@router.post("", response_model=UserOut, status_code=201)
async def create_user(data: UserCreate, authing: AuthingService = Depends(get_authing)):
    user = await authing.create(data.username, data.password)
    return UserOut.model_validate(user)


@router.patch("/username", response_model=UserOut)
async def update_username(
    data: UsernameUpdate,
    user: User = Depends(get_current_user),
    authing: AuthingService = Depends(get_authing),
):
    updated = await authing.update_username(user.ref, data.username)
    return UserOut.model_validate(updated)


@router.patch("/password")
async def update_password(
    data: PasswordUpdate,
    user: User = Depends(get_current_user),
    authing: AuthingService = Depends(get_authing),
):
    await authing.update_password(user.ref, data.current_password, data.new_password)
    return {"ok": True, "message": "Password updated successfully!"}


@router.delete("")
async def delete_user(
    response: Response,
    user: User = Depends(get_current_user),
    authing: AuthingService = Depends(get_authing),
    settings: Settings = Depends(get_settings),
):
    await authing.delete(user.ref)
    response.delete_cookie(settings.ACCESS_TOKEN_COOKIE_NAME, path="/", domain=settings.COOKIE_DOMAIN)
    return {"ok": True, "message": "User deleted"}


@router.get("/{username}", response_model=UserOut)
async def get_user(username: str, authing: AuthingService = Depends(get_authing)):
    return UserOut.model_validate(await authing.get_by_username(username))
