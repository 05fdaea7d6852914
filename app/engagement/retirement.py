import logging
from typing import Awaitable, Callable

from .refs import ContentRef, UserRef

log = logging.getLogger(__name__)

ContentHandler = Callable[[ContentRef], Awaitable[None]]
IdentityHandler = Callable[[UserRef], Awaitable[None]]


class RetirementHub:
    """
    Single call site for cascading deletes.

    The authoring collaborator calls ``retire_content`` and the identity
    collaborator calls ``retire_identity`` before removing a record; every
    engine that keeps facts about that record subscribes here. Handlers
    run in subscription order and their errors propagate to the caller.
    """

    def __init__(self):
        self._content_handlers: list[ContentHandler] = []
        self._identity_handlers: list[IdentityHandler] = []

    def on_content(self, handler: ContentHandler) -> ContentHandler:
        self._content_handlers.append(handler)
        return handler

    def on_identity(self, handler: IdentityHandler) -> IdentityHandler:
        self._identity_handlers.append(handler)
        return handler

    async def retire_content(self, content: ContentRef) -> None:
        log.info("Retiring content %s (%d subscribers)", content, len(self._content_handlers))
        for handler in self._content_handlers:
            await handler(content)

    async def retire_identity(self, user: UserRef) -> None:
        log.info("Retiring identity %s (%d subscribers)", user, len(self._identity_handlers))
        for handler in self._identity_handlers:
            await handler(user)
