import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.errors import register_error_handlers
from app.api.router import include_routers
from app.core.config import Settings, settings as default_settings
from app.db.session import create_engine, create_session_factory, create_tables
from app.engagement import build_engagement, build_store
from app.engagement.retirement import RetirementHub
from app.services.authing import AuthingService
from app.services.posting import PostingService

log = logging.getLogger("engagement")


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or default_settings

    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        engine = create_engine(settings.DB_URL)
        await create_tables(engine)
        sessions = create_session_factory(engine)

        retirement = RetirementHub()
        posting = PostingService(sessions, retirement)
        authing = AuthingService(sessions, retirement)
        engagement = build_engagement(build_store(settings), catalog=posting, retirement=retirement)
        # a deleted user's posts are retired after their own friendships and favorites
        retirement.on_identity(posting.delete_by_author)

        app.state.settings = settings
        app.state.posting = posting
        app.state.authing = authing
        app.state.engagement = engagement
        log.info("Engagement service started (store=%s)", settings.RELATION_STORE)
        try:
            yield
        finally:
            await engagement.close()
            await engine.dispose()
            log.info("Engagement service stopped")

    app = FastAPI(lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)
    include_routers(app)
    return app


app = create_app()
