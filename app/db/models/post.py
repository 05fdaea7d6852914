"""Authored content."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, ForeignKey, DateTime, Index
from sqlalchemy.orm import Mapped, mapped_column

from app.engagement.refs import ContentRef, UserRef

from .base import Base


class Post(Base):
    """
    One row per post.

    ``original_artist_id`` is set on remixes: the author credited for the
    work the remix derives from.
    """

    __tablename__ = "posts"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=lambda: uuid.uuid4().hex)
    author_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    original_artist_id: Mapped[str | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        Index("ix_posts_created_at", "created_at"),
    )

    @property
    def ref(self) -> ContentRef:
        return ContentRef(self.id)

    @property
    def author(self) -> UserRef:
        return UserRef(self.author_id)

    @property
    def original_artist(self) -> UserRef | None:
        return UserRef(self.original_artist_id) if self.original_artist_id else None
