"""Abstract repositories for Post, Like and Comment."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from commerce.domain.model.post import Comment, Like, Post, PostCounter


@dataclass(frozen=True)
class CounterUpdate:
    """Result of an atomic counter adjustment.

    ``clamped`` is set when the adjustment would have gone below zero and
    the stored value was pinned at 0 instead.
    """

    value: int
    clamped: bool = False


class PostRepository(ABC):

    @abstractmethod
    def get_by_id(self, post_id: str) -> Post | None:
        """Return a post by its ID, or None if not found."""

    @abstractmethod
    def slug_exists(self, slug: str) -> bool:
        """True if any post already uses *slug*."""

    @abstractmethod
    def save(self, post: Post) -> None:
        """Persist a new or updated post."""

    @abstractmethod
    def adjust_counter(self, post_id: str, counter: PostCounter, delta: int) -> CounterUpdate:
        """Atomically add *delta* to a counter, flooring the result at 0.

        Raises EntityNotFoundError for an unknown post.
        """


class LikeRepository(ABC):

    @abstractmethod
    def add(self, like: Like) -> None:
        """Insert a like; raises UniqueConstraintViolation for a repeat (user, post)."""

    @abstractmethod
    def remove(self, user_id: str, post_id: str) -> Like | None:
        """Delete and return the like, or None if there was none."""


class CommentRepository(ABC):

    @abstractmethod
    def get_by_id(self, comment_id: int) -> Comment | None:
        """Return a comment by its ID, or None if not found."""

    @abstractmethod
    def add(self, comment: Comment) -> None:
        """Persist a new comment and assign its ID."""

    @abstractmethod
    def remove(self, comment_id: int) -> Comment | None:
        """Delete and return the comment, or None if there was none."""
