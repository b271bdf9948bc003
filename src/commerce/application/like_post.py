"""Application services: Like / Unlike Post use cases.

The like store's unique (user, post) key decides who wins when the same
user likes twice at once; only the successful insert moves the counter.
"""

from __future__ import annotations

from commerce.domain.exceptions import EntityNotFoundError, UniqueConstraintViolation
from commerce.domain.model.post import Like
from commerce.domain.repository.post_repository import LikeRepository, PostRepository
from commerce.domain.service.aggregates import PostCounters


class _LikeHandler:

    def __init__(self, post_repo: PostRepository, like_repo: LikeRepository) -> None:
        self._post_repo = post_repo
        self._like_repo = like_repo
        self._counters = PostCounters(post_repo)

    def _ensure_post(self, post_id: str) -> None:
        if self._post_repo.get_by_id(post_id) is None:
            raise EntityNotFoundError(f"Post '{post_id}' not found")


class LikePostHandler(_LikeHandler):

    def handle(self, user_id: str, post_id: str) -> bool:
        """Like the post.  Returns False if the user had already liked it."""
        self._ensure_post(post_id)
        like = Like(user_id=user_id, post_id=post_id)
        try:
            self._like_repo.add(like)
        except UniqueConstraintViolation:
            return False
        self._counters.on_like_added(like)
        return True


class UnlikePostHandler(_LikeHandler):

    def handle(self, user_id: str, post_id: str) -> bool:
        """Remove the like.  Returns False if there was nothing to remove."""
        self._ensure_post(post_id)
        like = self._like_repo.remove(user_id, post_id)
        if like is None:
            return False
        self._counters.on_like_removed(like)
        return True
