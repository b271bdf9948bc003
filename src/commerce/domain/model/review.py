"""Review aggregate — a user's rating of a product, subject to moderation."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from commerce.domain.exceptions import ValidationError

MIN_RATING = 1
MAX_RATING = 5
MAX_TITLE_LENGTH = 100
MAX_COMMENT_LENGTH = 1000


class ReviewStatus(Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


@dataclass
class Review:
    """One review per (product, user); the repository enforces uniqueness."""

    id: int | None
    product_id: str
    user_id: str
    rating: int
    title: str | None = None
    comment: str | None = None
    status: ReviewStatus = ReviewStatus.PENDING
    helpful_users: set[str] = field(default_factory=set)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @staticmethod
    def create(
        product_id: str,
        user_id: str,
        rating: int,
        title: str | None = None,
        comment: str | None = None,
    ) -> Review:
        if not isinstance(rating, int) or isinstance(rating, bool):
            raise ValidationError("Rating must be a whole number")
        if not MIN_RATING <= rating <= MAX_RATING:
            raise ValidationError(
                f"Rating must be between {MIN_RATING} and {MAX_RATING}, got {rating}"
            )
        if title is not None and len(title.strip()) > MAX_TITLE_LENGTH:
            raise ValidationError(f"Title cannot exceed {MAX_TITLE_LENGTH} characters")
        if comment is not None and len(comment.strip()) > MAX_COMMENT_LENGTH:
            raise ValidationError(f"Comment cannot exceed {MAX_COMMENT_LENGTH} characters")
        return Review(
            id=None,
            product_id=product_id,
            user_id=user_id,
            rating=rating,
            title=title.strip() if title else None,
            comment=comment.strip() if comment else None,
        )

    @property
    def is_approved(self) -> bool:
        return self.status == ReviewStatus.APPROVED

    @property
    def helpful_count(self) -> int:
        return len(self.helpful_users)

    def moderate(self, target: ReviewStatus) -> bool:
        """Set the moderation status.  Returns False if nothing changed.

        Moderators may change their minds, so APPROVED and REJECTED can be
        swapped; nothing returns to PENDING.
        """
        if target == self.status:
            return False
        if target == ReviewStatus.PENDING:
            raise ValidationError("A moderated review cannot return to PENDING")
        self.status = target
        return True

    # Helpful votes: each user counted at most once
    def mark_helpful(self, user_id: str) -> bool:
        if user_id in self.helpful_users:
            return False
        self.helpful_users.add(user_id)
        return True

    def unmark_helpful(self, user_id: str) -> bool:
        if user_id not in self.helpful_users:
            return False
        self.helpful_users.discard(user_id)
        return True
