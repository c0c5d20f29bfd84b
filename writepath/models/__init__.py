"""ORM Models — SQLAlchemy declarative models for the blog schema.

Invariants:
    - All models inherit from Base (db/base.py)
    - User is the owner of posts, comments, likes and its profile

Design Decisions:
    - One file per entity
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from writepath.models.user import User  # noqa: F401
from writepath.models.profile import Profile  # noqa: F401
from writepath.models.post import Post  # noqa: F401
from writepath.models.tag import Tag, PostTag  # noqa: F401
from writepath.models.category import Category, PostCategory  # noqa: F401
from writepath.models.comment import Comment  # noqa: F401
from writepath.models.like import Like  # noqa: F401
