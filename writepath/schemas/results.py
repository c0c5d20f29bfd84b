"""Result Schemas — what each write operation reports back to the runner.

Design Decisions:
    - from_attributes=True so ORM rows convert with model_validate()
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class UserSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    username: str
    first_name: str | None
    last_name: str | None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class TagSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    slug: str
    color: str | None


class CategorySummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    slug: str
    description: str | None


class PostSummary(BaseModel):
    """Post with author, tags and categories loaded."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    slug: str
    published: bool
    published_at: datetime | None
    view_count: int
    author: UserSummary
    tags: list[TagSummary]
    categories: list[CategorySummary]


class CommentSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    content: str
    post_id: UUID
    author_id: UUID


class ProfileSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    bio: str | None
    website: str | None


class InteractionResult(BaseModel):
    """Outcome of the comment + like + view-count unit of work."""
    comment_id: UUID
    like_id: UUID
    post_id: UUID
    view_count: int


class BatchUpdateResult(BaseModel):
    users_activated: int
    posts_published: int


class RawSqlResult(BaseModel):
    inserted: int
    updated: int


class ProfileUpdateResult(BaseModel):
    user_id: UUID
    first_name: str
    profile: ProfileSummary
