"""Tests for rating and post-counter aggregate maintenance."""

from decimal import Decimal

import pytest

from commerce.domain.model.post import Comment, Like, Post, PostCounter
from commerce.domain.model.product import Product
from commerce.domain.model.review import Review, ReviewStatus
from commerce.domain.model.value_objects import Money
from commerce.domain.service.aggregates import (
    PostCounters,
    RatingSummary,
    ReviewAggregates,
    summarise_ratings,
)
from tests.fakes import FakePostRepository, FakeProductRepository, FakeReviewRepository


class TestSummariseRatings:

    def test_empty(self):
        assert summarise_ratings([]) == RatingSummary(Decimal("0.0"), 0)

    def test_mean(self):
        assert summarise_ratings([5, 4, 3]) == RatingSummary(Decimal("4.0"), 3)

    def test_rounds_half_up_to_one_place(self):
        # 4.25 -> 4.3, 4.666... -> 4.7
        assert summarise_ratings([5, 4, 4, 4]).average == Decimal("4.3")
        assert summarise_ratings([5, 5, 4]).average == Decimal("4.7")


def _seed_reviews(review_repo: FakeReviewRepository, ratings: dict[str, int], approved: set[str]) -> None:
    for user, rating in ratings.items():
        review = Review.create("p1", user, rating)
        review_repo.add(review)
        if user in approved:
            review_repo.set_status(review.id, ReviewStatus.APPROVED)


class TestReviewAggregates:

    @pytest.fixture
    def repos(self):
        products = FakeProductRepository([Product(id="p1", name="Lamp", sku="LAMP", price=Money.of("30"))])
        return products, FakeReviewRepository()

    def test_recompute_counts_only_approved(self, repos):
        products, reviews = repos
        _seed_reviews(reviews, {"a": 5, "b": 4, "c": 1}, approved={"a", "b"})
        summary = ReviewAggregates(products, reviews).recompute_product_rating("p1")
        assert summary == RatingSummary(Decimal("4.5"), 2)
        product = products.get_by_id("p1")
        assert product.average_rating == Decimal("4.5")
        assert product.review_count == 2

    def test_recompute_is_idempotent(self, repos):
        products, reviews = repos
        _seed_reviews(reviews, {"a": 5, "b": 4, "c": 3}, approved={"a", "b", "c"})
        aggregates = ReviewAggregates(products, reviews)
        first = aggregates.recompute_product_rating("p1")
        second = aggregates.recompute_product_rating("p1")
        assert first == second == RatingSummary(Decimal("4.0"), 3)

    def test_no_approved_reviews_resets_to_zero(self, repos):
        products, reviews = repos
        products.update_rating("p1", Decimal("3.0"), 1)
        ReviewAggregates(products, reviews).recompute_product_rating("p1")
        product = products.get_by_id("p1")
        assert product.average_rating == Decimal("0.0")
        assert product.review_count == 0


class TestPostCounters:

    @pytest.fixture
    def repo(self):
        return FakePostRepository([Post(id="post-1", title="Hello", slug="hello", author_id="a")])

    def test_like_and_unlike(self, repo):
        counters = PostCounters(repo)
        like = Like(user_id="u1", post_id="post-1")
        assert counters.on_like_added(like) == 1
        assert counters.on_like_removed(like) == 0

    def test_comment_count(self, repo):
        counters = PostCounters(repo)
        comment = Comment(id=1, post_id="post-1", author_id="u1", content="Nice")
        counters.on_comment_added(comment)
        counters.on_comment_added(comment)
        assert repo.get_by_id("post-1").counter(PostCounter.COMMENTS) == 2

    def test_decrement_is_floored_at_zero(self, repo, caplog):
        counters = PostCounters(repo)
        with caplog.at_level("WARNING"):
            assert counters.on_like_removed(Like(user_id="u1", post_id="post-1")) == 0
        assert repo.get_by_id("post-1").like_count == 0
        assert "clamped at 0" in caplog.text
