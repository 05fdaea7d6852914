from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine, AsyncSession
from sqlalchemy.pool import StaticPool

from app.db.models import Base


def create_engine(db_url: str) -> AsyncEngine:
    url = db_url.replace("psycopg2", "asyncpg")
    if url.startswith("sqlite") and (url.endswith("://") or ":memory:" in url):
        # one shared connection, otherwise every session sees an empty database
        return create_async_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_async_engine(url)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


async def create_tables(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
