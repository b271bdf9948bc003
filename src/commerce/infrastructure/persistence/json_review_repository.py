"""JSON-file-backed implementation of ReviewRepository."""

from __future__ import annotations

from datetime import datetime

from commerce.domain.exceptions import EntityNotFoundError, UniqueConstraintViolation
from commerce.domain.model.review import Review, ReviewStatus
from commerce.domain.repository.review_repository import ReviewRepository
from commerce.infrastructure.persistence.json_file import JsonFile


class JsonReviewRepository(JsonFile, ReviewRepository):

    # --- ReviewRepository interface -------------------------------------------

    def get_by_id(self, review_id: int) -> Review | None:
        with self._lock:
            for raw in self._load_raw():
                if raw["id"] == review_id:
                    return self._to_domain(raw)
        return None

    def add(self, review: Review) -> None:
        with self._lock:
            records = self._load_raw()
            for raw in records:
                if raw["product_id"] == review.product_id and raw["user_id"] == review.user_id:
                    raise UniqueConstraintViolation(
                        f"Review by {review.user_id} for product {review.product_id} already exists"
                    )
            review.id = max((r["id"] for r in records), default=0) + 1
            records.append(self._to_raw(review))
            self._persist_raw(records)

    def set_status(self, review_id: int, status: ReviewStatus) -> None:
        with self._lock:
            records = self._load_raw()
            raw = self._find(records, review_id)
            raw["status"] = status.value
            self._persist_raw(records)

    def delete(self, review_id: int) -> Review | None:
        with self._lock:
            records = self._load_raw()
            for i, raw in enumerate(records):
                if raw["id"] == review_id:
                    del records[i]
                    self._persist_raw(records)
                    return self._to_domain(raw)
        return None

    def list_approved_for_product(self, product_id: str) -> list[Review]:
        with self._lock:
            return [
                self._to_domain(raw)
                for raw in self._load_raw()
                if raw["product_id"] == product_id and raw["status"] == ReviewStatus.APPROVED.value
            ]

    def set_helpful_vote(self, review_id: int, user_id: str, helpful: bool) -> Review:
        with self._lock:
            records = self._load_raw()
            raw = self._find(records, review_id)
            review = self._to_domain(raw)
            changed = review.mark_helpful(user_id) if helpful else review.unmark_helpful(user_id)
            if changed:
                raw["helpful_users"] = sorted(review.helpful_users)
                self._persist_raw(records)
            return review

    # --- Helpers --------------------------------------------------------------

    @staticmethod
    def _find(records: list[dict], review_id: int) -> dict:
        for raw in records:
            if raw["id"] == review_id:
                return raw
        raise EntityNotFoundError(f"Review #{review_id} not found")

    @staticmethod
    def _to_raw(review: Review) -> dict:
        return {
            "id": review.id,
            "product_id": review.product_id,
            "user_id": review.user_id,
            "rating": review.rating,
            "title": review.title,
            "comment": review.comment,
            "status": review.status.value,
            "helpful_users": sorted(review.helpful_users),
            "created_at": review.created_at.isoformat(),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Review:
        return Review(
            id=raw["id"],
            product_id=raw["product_id"],
            user_id=raw["user_id"],
            rating=raw["rating"],
            title=raw.get("title"),
            comment=raw.get("comment"),
            status=ReviewStatus(raw["status"]),
            helpful_users=set(raw.get("helpful_users", [])),
            created_at=datetime.fromisoformat(raw["created_at"]),
        )
