"""Abstract repository for Review aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from commerce.domain.model.review import Review, ReviewStatus


class ReviewRepository(ABC):

    @abstractmethod
    def get_by_id(self, review_id: int) -> Review | None:
        """Return a review by its ID, or None if not found."""

    @abstractmethod
    def add(self, review: Review) -> None:
        """Persist a new review and assign its ID.

        Raises UniqueConstraintViolation if the user already reviewed
        the product.
        """

    @abstractmethod
    def set_status(self, review_id: int, status: ReviewStatus) -> None:
        """Persist a new moderation status; raises EntityNotFoundError if missing."""

    @abstractmethod
    def delete(self, review_id: int) -> Review | None:
        """Remove a review, returning what was removed (or None)."""

    @abstractmethod
    def list_approved_for_product(self, product_id: str) -> list[Review]:
        """Current APPROVED reviews of a product (a fresh read every call)."""

    @abstractmethod
    def set_helpful_vote(self, review_id: int, user_id: str, helpful: bool) -> Review:
        """Atomically add or remove *user_id* from the helpful set.

        Returns the updated review; raises EntityNotFoundError if missing.
        """
