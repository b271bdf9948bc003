"""Application service: Submit Review use case.

New reviews start PENDING and do not count towards the product's rating
until a moderator approves them.
"""

from __future__ import annotations

import logging

from commerce.application.dto import ReviewDTO, review_to_dto
from commerce.domain.exceptions import (
    DuplicateReviewError,
    EntityNotFoundError,
    UniqueConstraintViolation,
)
from commerce.domain.model.review import Review
from commerce.domain.repository.product_repository import ProductRepository
from commerce.domain.repository.review_repository import ReviewRepository

logger = logging.getLogger(__name__)


class SubmitReviewHandler:

    def __init__(self, review_repo: ReviewRepository, product_repo: ProductRepository) -> None:
        self._review_repo = review_repo
        self._product_repo = product_repo

    def handle(
        self,
        product_id: str,
        user_id: str,
        rating: int,
        title: str | None = None,
        comment: str | None = None,
    ) -> ReviewDTO:
        if self._product_repo.get_by_id(product_id) is None:
            raise EntityNotFoundError(f"Product with ID '{product_id}' not found")

        review = Review.create(product_id, user_id, rating, title, comment)
        try:
            self._review_repo.add(review)
        except UniqueConstraintViolation as exc:
            raise DuplicateReviewError(
                f"User '{user_id}' has already reviewed product '{product_id}'"
            ) from exc

        logger.info(f"Review #{review.id} submitted for product {product_id} by user {user_id}")
        return review_to_dto(review)
