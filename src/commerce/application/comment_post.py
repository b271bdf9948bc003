"""Application services: Add / Remove Comment use cases."""

from __future__ import annotations

from commerce.domain.exceptions import EntityNotFoundError
from commerce.domain.model.post import Comment
from commerce.domain.repository.post_repository import CommentRepository, PostRepository
from commerce.domain.service.aggregates import PostCounters


class AddCommentHandler:

    def __init__(self, post_repo: PostRepository, comment_repo: CommentRepository) -> None:
        self._post_repo = post_repo
        self._comment_repo = comment_repo
        self._counters = PostCounters(post_repo)

    def handle(self, post_id: str, author_id: str, content: str) -> Comment:
        if self._post_repo.get_by_id(post_id) is None:
            raise EntityNotFoundError(f"Post '{post_id}' not found")
        comment = Comment(id=None, post_id=post_id, author_id=author_id, content=content.strip())
        self._comment_repo.add(comment)
        self._counters.on_comment_added(comment)
        return comment


class RemoveCommentHandler:

    def __init__(self, post_repo: PostRepository, comment_repo: CommentRepository) -> None:
        self._comment_repo = comment_repo
        self._counters = PostCounters(post_repo)

    def handle(self, comment_id: int) -> bool:
        """Delete the comment.  Returns False if it was already gone."""
        comment = self._comment_repo.remove(comment_id)
        if comment is None:
            return False
        self._counters.on_comment_removed(comment)
        return True
