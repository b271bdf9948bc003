"""Application service: review moderation use cases.

Every moderation step that changes whether a review counts (approval,
rejection of an approved review, deletion of an approved review) is
followed by a full rating recompute for the product.
"""

from __future__ import annotations

import logging

from commerce.application.dto import ReviewDTO, review_to_dto
from commerce.domain.exceptions import EntityNotFoundError
from commerce.domain.model.review import Review, ReviewStatus
from commerce.domain.repository.product_repository import ProductRepository
from commerce.domain.repository.review_repository import ReviewRepository
from commerce.domain.service.aggregates import ReviewAggregates

logger = logging.getLogger(__name__)


class _ReviewHandler:

    def __init__(self, review_repo: ReviewRepository, product_repo: ProductRepository) -> None:
        self._review_repo = review_repo
        self._aggregates = ReviewAggregates(product_repo, review_repo)

    def _load(self, review_id: int) -> Review:
        review = self._review_repo.get_by_id(review_id)
        if review is None:
            raise EntityNotFoundError(f"Review #{review_id} not found")
        return review


class ApproveReviewHandler(_ReviewHandler):

    def handle(self, review_id: int) -> ReviewDTO:
        review = self._load(review_id)
        if review.moderate(ReviewStatus.APPROVED):
            self._review_repo.set_status(review_id, review.status)
            logger.info(f"Review #{review_id} approved")
        # Recompute even on a repeat: it is idempotent and heals a missed run
        self._aggregates.on_review_approved(review)
        return review_to_dto(review)


class RejectReviewHandler(_ReviewHandler):

    def handle(self, review_id: int) -> ReviewDTO:
        review = self._load(review_id)
        was_approved = review.is_approved
        if review.moderate(ReviewStatus.REJECTED):
            self._review_repo.set_status(review_id, review.status)
            logger.info(f"Review #{review_id} rejected")
        if was_approved:
            self._aggregates.on_review_withdrawn(review)
        return review_to_dto(review)


class DeleteReviewHandler(_ReviewHandler):

    def handle(self, review_id: int) -> None:
        review = self._review_repo.delete(review_id)
        if review is None:
            raise EntityNotFoundError(f"Review #{review_id} not found")
        logger.info(f"Review #{review_id} deleted")
        if review.is_approved:
            self._aggregates.on_review_withdrawn(review)


class MarkReviewHelpfulHandler(_ReviewHandler):

    def handle(self, review_id: int, user_id: str, helpful: bool = True) -> ReviewDTO:
        """Record (or withdraw) *user_id*'s helpful vote; repeats are no-ops."""
        review = self._review_repo.set_helpful_vote(review_id, user_id, helpful)
        return review_to_dto(review)
