"""Domain service: Aggregate Recalculation.

Keeps the denormalized counters in step with the records they summarise:

* product ``average_rating`` / ``review_count`` are recomputed from a full
  rescan of APPROVED reviews on every relevant change, never adjusted
  incrementally, so rerunning a recompute always converges on the right
  answer;
* post ``like_count`` / ``comment_count`` move by exactly ±1 through the
  repository's atomic counter, floored at zero.

The operations are meant to be called right after the underlying write
has been persisted.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from commerce.domain.exceptions import DomainException
from commerce.domain.model.post import Comment, Like, PostCounter
from commerce.domain.model.review import Review
from commerce.domain.repository.post_repository import PostRepository
from commerce.domain.repository.product_repository import ProductRepository
from commerce.domain.repository.review_repository import ReviewRepository

logger = logging.getLogger(__name__)

_ONE_PLACE = Decimal("0.1")


@dataclass(frozen=True)
class RatingSummary:
    average: Decimal
    count: int


def summarise_ratings(ratings: list[int]) -> RatingSummary:
    """Mean of *ratings* rounded half-up to one decimal place."""
    if not ratings:
        return RatingSummary(Decimal("0.0"), 0)
    mean = Decimal(sum(ratings)) / Decimal(len(ratings))
    return RatingSummary(mean.quantize(_ONE_PLACE, ROUND_HALF_UP), len(ratings))


class ReviewAggregates:
    """Product rating aggregates, always rebuilt from approved reviews."""

    def __init__(self, product_repo: ProductRepository, review_repo: ReviewRepository) -> None:
        self._product_repo = product_repo
        self._review_repo = review_repo

    def on_review_approved(self, review: Review) -> RatingSummary:
        return self.recompute_product_rating(review.product_id)

    def on_review_withdrawn(self, review: Review) -> RatingSummary:
        """A previously approved review was rejected or deleted."""
        return self.recompute_product_rating(review.product_id)

    def recompute_product_rating(self, product_id: str) -> RatingSummary:
        try:
            approved = self._review_repo.list_approved_for_product(product_id)
            summary = summarise_ratings([r.rating for r in approved])
            self._product_repo.update_rating(product_id, summary.average, summary.count)
        except DomainException as exc:
            logger.error(f"Rating recompute failed for product {product_id}: {exc}", exc_info=True)
            raise
        logger.info(
            f"Product {product_id} rating recomputed: {summary.average} from {summary.count} review(s)"
        )
        return summary


class PostCounters:
    """Like and comment counters on posts, moved by exactly one per event."""

    def __init__(self, post_repo: PostRepository) -> None:
        self._post_repo = post_repo

    def on_like_added(self, like: Like) -> int:
        return self._adjust(like.post_id, PostCounter.LIKES, 1)

    def on_like_removed(self, like: Like) -> int:
        return self._adjust(like.post_id, PostCounter.LIKES, -1)

    def on_comment_added(self, comment: Comment) -> int:
        return self._adjust(comment.post_id, PostCounter.COMMENTS, 1)

    def on_comment_removed(self, comment: Comment) -> int:
        return self._adjust(comment.post_id, PostCounter.COMMENTS, -1)

    def _adjust(self, post_id: str, counter: PostCounter, delta: int) -> int:
        update = self._post_repo.adjust_counter(post_id, counter, delta)
        if update.clamped:
            # An earlier increment was missed somewhere
            logger.warning(
                f"Post {post_id} {counter.value} would have gone negative; clamped at 0"
            )
        return update.value
