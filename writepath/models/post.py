"""Post ORM — the publishable record shared by most write patterns.

Invariants:
    - slug is unique (nested create and raw SQL ON CONFLICT target)
    - view_count only changes through in-database arithmetic updates
    - published_at is set whenever published flips to True

Design Decisions:
    - tags/categories go through association models (PostTag, PostCategory) so
      the link rows carry their own created_at
    - cascade delete for comments, likes and links: deleting a post removes them
"""

import uuid
from datetime import datetime

from sqlalchemy import (
    String, Text, Integer, Boolean, DateTime, ForeignKey, Index,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from writepath.db.base import Base
from writepath.models._time import utcnow


class Post(Base):
    """Blog post."""
    __tablename__ = "posts"
    __table_args__ = (
        Index("ix_posts_published_created_at", "published", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(
        String(255), nullable=False, unique=True,
    )
    content: Mapped[str | None] = mapped_column(Text, nullable=True)
    excerpt: Mapped[str | None] = mapped_column(String(500), nullable=True)
    published: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    published_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    view_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
    )
    author_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
        onupdate=utcnow,
    )

    author: Mapped["User"] = relationship("User", back_populates="posts")
    tags: Mapped[list["PostTag"]] = relationship(
        "PostTag", back_populates="post", cascade="all, delete-orphan",
    )
    categories: Mapped[list["PostCategory"]] = relationship(
        "PostCategory", back_populates="post", cascade="all, delete-orphan",
    )
    comments: Mapped[list["Comment"]] = relationship(
        "Comment", back_populates="post", cascade="all, delete-orphan",
    )
