"""
Redis client factory for the shared relation store.

Each application instance owns one client and its connection pool; the
pool is created with the application and closed on shutdown.
"""

import logging

import redis.asyncio as redis
from redis.asyncio.retry import Retry
from redis.backoff import ExponentialBackoff
from redis.exceptions import (
    BusyLoadingError,
    ConnectionError,
    TimeoutError,
)

log = logging.getLogger(__name__)

HEALTH_CHECK_INTERVAL = 30
RETRY_ATTEMPTS = 3
TRANSIENT_ERRORS = (ConnectionError, TimeoutError, BusyLoadingError)


def _create_retry() -> Retry:
    """
    Exponential backoff (cap=0.5s) for recoverable transport errors only.

    Relation writes re-check membership inside their Lua scripts, so a
    replayed command cannot create a duplicate fact.
    """
    return Retry(
        retries=RETRY_ATTEMPTS,
        backoff=ExponentialBackoff(cap=0.5, base=0.1),
        supported_errors=TRANSIENT_ERRORS,
    )


def create_redis(url: str, max_connections: int = 50, socket_timeout: float = 5.0) -> redis.Redis:
    """Client with a dedicated pool; responses are decoded to ``str``."""
    pool = redis.ConnectionPool.from_url(
        url,
        max_connections=max_connections,
        socket_timeout=socket_timeout,
        socket_connect_timeout=socket_timeout,
        health_check_interval=HEALTH_CHECK_INTERVAL,
        decode_responses=True,
    )
    log.info("Redis pool for %s (max_connections=%d)", pool.connection_kwargs.get("host"), max_connections)
    return redis.Redis(
        connection_pool=pool,
        retry=_create_retry(),
        retry_on_error=list(TRANSIENT_ERRORS),
    )


async def close_redis(client: redis.Redis) -> None:
    await client.aclose()
    await client.connection_pool.disconnect()
    log.info("Redis connection pool closed")
