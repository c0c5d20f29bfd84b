"""Input Schemas — validated payloads handed to the write operations.

Invariants:
    - Emails are lowercased and stripped before they reach the database
    - Slugs are lowercase kebab-case
    - Tag colors are #RRGGBB
"""

from pydantic import BaseModel, Field, field_validator

_SLUG = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


class UserCreate(BaseModel):
    email: str = Field(min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    username: str = Field(min_length=1, max_length=100)
    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower() if isinstance(v, str) else v


class TagCreate(BaseModel):
    name: str = Field(min_length=1, max_length=50)
    slug: str = Field(max_length=50, pattern=_SLUG)
    color: str | None = Field(None, pattern=r"^#[0-9a-fA-F]{6}$")


class CategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    slug: str = Field(max_length=100, pattern=_SLUG)
    description: str | None = None


class PostCreate(BaseModel):
    """Post with its author (by email) and brand-new tags/categories."""
    title: str = Field(min_length=1, max_length=255)
    slug: str = Field(max_length=255, pattern=_SLUG)
    content: str | None = None
    excerpt: str | None = Field(None, max_length=500)
    published: bool = False
    author_email: str
    tags: list[TagCreate] = Field(default_factory=list)
    categories: list[CategoryCreate] = Field(default_factory=list)


class ProfileFields(BaseModel):
    bio: str | None = None
    website: str | None = Field(None, max_length=255)


class ProfileUpsert(BaseModel):
    """Values for the create path and for the update path of a profile upsert."""
    create: ProfileFields
    update: ProfileFields
