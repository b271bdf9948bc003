"""Post, Like and Comment — the blog side of the engine.

A Post carries denormalized ``like_count`` and ``comment_count``; they are
only ever moved through the repository's atomic counter primitive.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from commerce.domain.exceptions import ValidationError

MAX_COMMENT_LENGTH = 1000


def _now() -> datetime:
    return datetime.now(timezone.utc)


class PostCounter(Enum):
    LIKES = "like_count"
    COMMENTS = "comment_count"


@dataclass
class Post:
    id: str
    title: str
    slug: str
    author_id: str
    like_count: int = 0
    comment_count: int = 0
    view_count: int = 0
    created_at: datetime = field(default_factory=_now)

    def counter(self, which: PostCounter) -> int:
        return getattr(self, which.value)


@dataclass(frozen=True)
class Like:
    user_id: str
    post_id: str
    created_at: datetime = field(default_factory=_now)


@dataclass
class Comment:
    id: int | None
    post_id: str
    author_id: str
    content: str
    created_at: datetime = field(default_factory=_now)

    def __post_init__(self) -> None:
        if not self.content or not self.content.strip():
            raise ValidationError("Comment content is required")
        if len(self.content) > MAX_COMMENT_LENGTH:
            raise ValidationError(f"Comment cannot exceed {MAX_COMMENT_LENGTH} characters")
