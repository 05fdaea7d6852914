"""
Infrastructure helpers shared by the API and the Redis relation store.

- auth: JWT creation and decoding
- deps: FastAPI dependencies resolving services from application state
- concurrency: Redis advisory locks
- redis_pool: Redis client factory
"""
