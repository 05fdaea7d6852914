"""
Cross-process mutual exclusion on top of Redis.

Used by the Redis relation store so that check-then-write sequences in the
engines (a friend request and its reverse, the one-original rule for a
remix) hold across every application instance sharing the store.
"""

import asyncio
import logging
import uuid
from typing import Optional
from contextlib import asynccontextmanager

import redis.asyncio as redis

from app.core.errors import ConcurrencyConflict

log = logging.getLogger(__name__)


LOCK_PREFIX = "lock"
MAX_RETRY_DELAY = 0.1

# Only the holder's token may delete the key.
RELEASE_SCRIPT = """
if redis.call("get", KEYS[1]) == ARGV[1] then
    return redis.call("del", KEYS[1])
end
return 0
"""


class AdvisoryLock:
    """
    A ``SET NX EX`` lock with a random owner token.

    The expiry bounds how long a crashed holder can block a key. Acquisition
    keeps polling, backing off up to ``MAX_RETRY_DELAY``, until
    ``wait_timeout`` seconds have passed; it always makes at least one attempt.
    Contending callers on a live key therefore queue instead of failing.
    """

    def __init__(
        self,
        client: redis.Redis,
        name: str,
        timeout: int = 10,
        wait_timeout: float = 5.0,
        retry_delay: float = 0.01,
    ):
        self.redis = client
        self.name = f"{LOCK_PREFIX}:{name}"
        self.timeout = timeout
        self.wait_timeout = wait_timeout
        self.retry_delay = retry_delay
        self.token: Optional[str] = None
        self._release = client.register_script(RELEASE_SCRIPT)

    async def acquire(self) -> bool:
        token = uuid.uuid4().hex
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.wait_timeout
        delay = self.retry_delay
        attempts = 0

        while True:
            attempts += 1
            if await self.redis.set(self.name, token, nx=True, ex=self.timeout):
                self.token = token
                log.debug("Lock acquired: %s (attempts=%d)", self.name, attempts)
                return True

            remaining = deadline - loop.time()
            if remaining <= 0:
                break
            await asyncio.sleep(min(delay, remaining))
            delay = min(delay * 2, MAX_RETRY_DELAY)

        log.warning("Lock %s still held after %.2fs (%d attempts)", self.name, self.wait_timeout, attempts)
        return False

    async def release(self) -> None:
        if not self.token:
            return

        try:
            await self._release(keys=[self.name], args=[self.token])
            log.debug("Lock released: %s", self.name)
        except redis.RedisError as e:
            # the key expires on its own
            log.error("Failed to release lock %s: %s", self.name, e)
        finally:
            self.token = None


@asynccontextmanager
async def advisory_lock(
    client: redis.Redis,
    name: str,
    timeout: int = 10,
    wait_timeout: float = 5.0,
    retry_delay: float = 0.01,
):
    """Hold ``name`` for the block; raise ``ConcurrencyConflict`` if it stays taken."""
    lock = AdvisoryLock(client, name, timeout, wait_timeout, retry_delay)

    if not await lock.acquire():
        raise ConcurrencyConflict(f"Operation on '{name}' in progress. Please wait and retry.")
    try:
        yield lock
    finally:
        await lock.release()
