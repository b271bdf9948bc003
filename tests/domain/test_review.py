"""Unit tests for the Review aggregate."""

import pytest

from commerce.domain.exceptions import ValidationError
from commerce.domain.model.review import Review, ReviewStatus


class TestReviewCreation:

    def test_starts_pending(self):
        review = Review.create("p1", "u1", 4, title="  Solid  ", comment="Works fine")
        assert review.status == ReviewStatus.PENDING
        assert review.id is None
        assert review.title == "Solid"
        assert not review.is_approved

    @pytest.mark.parametrize("rating", [0, 6, -1])
    def test_rating_out_of_range(self, rating):
        with pytest.raises(ValidationError, match="between 1 and 5"):
            Review.create("p1", "u1", rating)

    def test_rating_must_be_whole(self):
        with pytest.raises(ValidationError, match="whole number"):
            Review.create("p1", "u1", 4.5)

    def test_long_title_rejected(self):
        with pytest.raises(ValidationError, match="Title"):
            Review.create("p1", "u1", 3, title="t" * 101)


class TestModeration:

    def test_approve(self):
        review = Review.create("p1", "u1", 5)
        assert review.moderate(ReviewStatus.APPROVED)
        assert review.is_approved

    def test_repeat_is_noop(self):
        review = Review.create("p1", "u1", 5)
        review.moderate(ReviewStatus.APPROVED)
        assert review.moderate(ReviewStatus.APPROVED) is False

    def test_moderator_can_change_mind(self):
        review = Review.create("p1", "u1", 5)
        review.moderate(ReviewStatus.APPROVED)
        assert review.moderate(ReviewStatus.REJECTED)
        assert review.status == ReviewStatus.REJECTED

    def test_cannot_return_to_pending(self):
        review = Review.create("p1", "u1", 5)
        review.moderate(ReviewStatus.REJECTED)
        with pytest.raises(ValidationError, match="PENDING"):
            review.moderate(ReviewStatus.PENDING)


class TestHelpfulVotes:

    def test_each_user_counted_once(self):
        review = Review.create("p1", "u1", 5)
        assert review.mark_helpful("u2")
        assert not review.mark_helpful("u2")
        assert review.mark_helpful("u3")
        assert review.helpful_count == 2

    def test_unmark(self):
        review = Review.create("p1", "u1", 5)
        review.mark_helpful("u2")
        assert review.unmark_helpful("u2")
        assert not review.unmark_helpful("u2")
        assert review.helpful_count == 0
