"""Application service: Create Post use case."""

from __future__ import annotations

import uuid

from commerce.domain.exceptions import ValidationError
from commerce.domain.model.post import Post
from commerce.domain.repository.post_repository import PostRepository
from commerce.domain.service.identifiers import generate_unique_slug, slugify


class CreatePostHandler:

    def __init__(self, post_repo: PostRepository) -> None:
        self._post_repo = post_repo

    def handle(self, title: str, author_id: str) -> Post:
        """Create a post whose slug is derived from its title and unique."""
        if not title or not title.strip():
            raise ValidationError("Post title is required")
        base = slugify(title)
        if not base:
            raise ValidationError(f"Cannot derive a slug from title {title!r}")

        post = Post(
            id=uuid.uuid4().hex,
            title=title.strip(),
            slug=generate_unique_slug(base, self._post_repo.slug_exists),
            author_id=author_id,
        )
        self._post_repo.save(post)
        return post
