from fastapi import APIRouter, FastAPI

from app.api import auth, favorites, friends, health, posts, remixes, users

ROUTERS: tuple[APIRouter, ...] = (
    health.router,
    auth.router,
    users.router,
    posts.router,
    friends.router,
    favorites.router,
    remixes.router,
)


def include_routers(app: FastAPI) -> None:
    for router in ROUTERS:
        app.include_router(router)
