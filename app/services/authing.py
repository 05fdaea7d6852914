import logging
from typing import Sequence

from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.errors import AlreadyExists, InvalidOperation, NotAllowed, NotFound, Unauthenticated
from app.db.models import User
from app.engagement.refs import UserRef
from app.engagement.retirement import RetirementHub

log = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

DELETED_USER = "DELETED_USER"


def _clean_username(username: str) -> str:
    username = (username or "").strip()
    if not username:
        raise InvalidOperation("Username must be non-empty")
    return username


class AuthingService:
    """Identity collaborator: user accounts and credential checks."""

    def __init__(self, sessions: async_sessionmaker[AsyncSession], retirement: RetirementHub):
        self._sessions = sessions
        self._retirement = retirement

    async def create(self, username: str, password: str) -> User:
        username = _clean_username(username)
        if not password:
            raise InvalidOperation("Password must be non-empty")

        user = User(username=username, password_hash=pwd_context.hash(password))
        async with self._sessions() as db:
            db.add(user)
            try:
                await db.commit()
            except IntegrityError:
                await db.rollback()
                raise AlreadyExists(f"Username '{username}' is already taken")
            await db.refresh(user)

        log.info("User created: %s (%s)", user.username, user.id)
        return user

    async def authenticate(self, username: str, password: str) -> User:
        async with self._sessions() as db:
            user = await db.scalar(select(User).where(User.username == username))

        if not user or not pwd_context.verify(password, user.password_hash):
            raise Unauthenticated("Username or password is incorrect")
        return user

    async def get_by_id(self, ref: UserRef) -> User:
        async with self._sessions() as db:
            user = await db.get(User, ref.value)
        if user is None:
            raise NotFound(f"User {ref} does not exist")
        return user

    async def get_by_username(self, username: str) -> User:
        async with self._sessions() as db:
            user = await db.scalar(select(User).where(User.username == username))
        if user is None:
            raise NotFound(f"User '{username}' does not exist")
        return user

    async def get_users(self) -> list[User]:
        async with self._sessions() as db:
            result = await db.execute(select(User).order_by(User.username))
            return list(result.scalars().all())

    async def ids_to_usernames(self, refs: Sequence[UserRef]) -> list[str]:
        """Usernames in the order of ``refs``; unknown ids map to ``DELETED_USER``."""
        if not refs:
            return []
        async with self._sessions() as db:
            result = await db.execute(
                select(User.id, User.username).where(User.id.in_([r.value for r in refs]))
            )
            names = {row.id: row.username for row in result}
        return [names.get(r.value, DELETED_USER) for r in refs]

    async def update_username(self, ref: UserRef, username: str) -> User:
        username = _clean_username(username)
        async with self._sessions() as db:
            user = await db.get(User, ref.value)
            if user is None:
                raise NotFound(f"User {ref} does not exist")
            user.username = username
            try:
                await db.commit()
            except IntegrityError:
                await db.rollback()
                raise AlreadyExists(f"Username '{username}' is already taken")
            await db.refresh(user)
        return user

    async def update_password(self, ref: UserRef, current_password: str, new_password: str) -> None:
        if not new_password:
            raise InvalidOperation("Password must be non-empty")
        async with self._sessions() as db:
            user = await db.get(User, ref.value)
            if user is None:
                raise NotFound(f"User {ref} does not exist")
            if not pwd_context.verify(current_password, user.password_hash):
                raise NotAllowed("The given current password is wrong")
            user.password_hash = pwd_context.hash(new_password)
            await db.commit()

    async def delete(self, ref: UserRef) -> None:
        await self.get_by_id(ref)
        await self._retirement.retire_identity(ref)

        async with self._sessions() as db:
            user = await db.get(User, ref.value)
            if user is not None:
                await db.delete(user)
                await db.commit()

        log.info("User deleted: %s", ref)
