"""JSON-file-backed implementations of the Post, Like and Comment repositories."""

from __future__ import annotations

from datetime import datetime

from commerce.domain.exceptions import EntityNotFoundError, UniqueConstraintViolation
from commerce.domain.model.post import Comment, Like, Post, PostCounter
from commerce.domain.repository.post_repository import (
    CommentRepository,
    CounterUpdate,
    LikeRepository,
    PostRepository,
)
from commerce.infrastructure.persistence.json_file import JsonFile


class JsonPostRepository(JsonFile, PostRepository):

    def get_by_id(self, post_id: str) -> Post | None:
        with self._lock:
            for raw in self._load_raw():
                if raw["id"] == post_id:
                    return self._to_domain(raw)
        return None

    def slug_exists(self, slug: str) -> bool:
        with self._lock:
            return any(raw["slug"] == slug for raw in self._load_raw())

    def save(self, post: Post) -> None:
        with self._lock:
            records = self._load_raw()
            new_raw = self._to_raw(post)
            for i, raw in enumerate(records):
                if raw["id"] == post.id:
                    records[i] = new_raw
                    break
            else:
                records.append(new_raw)
            self._persist_raw(records)

    def adjust_counter(self, post_id: str, counter: PostCounter, delta: int) -> CounterUpdate:
        with self._lock:
            records = self._load_raw()
            for raw in records:
                if raw["id"] == post_id:
                    value = raw[counter.value] + delta
                    update = CounterUpdate(max(value, 0), clamped=value < 0)
                    raw[counter.value] = update.value
                    self._persist_raw(records)
                    return update
        raise EntityNotFoundError(f"Post '{post_id}' not found")

    @staticmethod
    def _to_raw(post: Post) -> dict:
        return {
            "id": post.id,
            "title": post.title,
            "slug": post.slug,
            "author_id": post.author_id,
            "like_count": post.like_count,
            "comment_count": post.comment_count,
            "view_count": post.view_count,
            "created_at": post.created_at.isoformat(),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Post:
        return Post(
            id=raw["id"],
            title=raw["title"],
            slug=raw["slug"],
            author_id=raw["author_id"],
            like_count=raw.get("like_count", 0),
            comment_count=raw.get("comment_count", 0),
            view_count=raw.get("view_count", 0),
            created_at=datetime.fromisoformat(raw["created_at"]),
        )


class JsonLikeRepository(JsonFile, LikeRepository):

    def add(self, like: Like) -> None:
        with self._lock:
            records = self._load_raw()
            if any(r["user_id"] == like.user_id and r["post_id"] == like.post_id for r in records):
                raise UniqueConstraintViolation(f"User {like.user_id} already likes post {like.post_id}")
            records.append({
                "user_id": like.user_id,
                "post_id": like.post_id,
                "created_at": like.created_at.isoformat(),
            })
            self._persist_raw(records)

    def remove(self, user_id: str, post_id: str) -> Like | None:
        with self._lock:
            records = self._load_raw()
            for i, raw in enumerate(records):
                if raw["user_id"] == user_id and raw["post_id"] == post_id:
                    del records[i]
                    self._persist_raw(records)
                    return Like(user_id, post_id, datetime.fromisoformat(raw["created_at"]))
        return None


class JsonCommentRepository(JsonFile, CommentRepository):

    def get_by_id(self, comment_id: int) -> Comment | None:
        with self._lock:
            for raw in self._load_raw():
                if raw["id"] == comment_id:
                    return self._to_domain(raw)
        return None

    def add(self, comment: Comment) -> None:
        with self._lock:
            records = self._load_raw()
            comment.id = max((r["id"] for r in records), default=0) + 1
            records.append({
                "id": comment.id,
                "post_id": comment.post_id,
                "author_id": comment.author_id,
                "content": comment.content,
                "created_at": comment.created_at.isoformat(),
            })
            self._persist_raw(records)

    def remove(self, comment_id: int) -> Comment | None:
        with self._lock:
            records = self._load_raw()
            for i, raw in enumerate(records):
                if raw["id"] == comment_id:
                    del records[i]
                    self._persist_raw(records)
                    return self._to_domain(raw)
        return None

    @staticmethod
    def _to_domain(raw: dict) -> Comment:
        return Comment(
            id=raw["id"],
            post_id=raw["post_id"],
            author_id=raw["author_id"],
            content=raw["content"],
            created_at=datetime.fromisoformat(raw["created_at"]),
        )
