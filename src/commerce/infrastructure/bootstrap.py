"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

import os
from pathlib import Path

from commerce.infrastructure.persistence.json_order_repository import (
    JsonOrderRepository,
)
from commerce.infrastructure.persistence.json_post_repository import (
    JsonCommentRepository,
    JsonLikeRepository,
    JsonPostRepository,
)
from commerce.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)
from commerce.infrastructure.persistence.json_review_repository import (
    JsonReviewRepository,
)

DATA_DIR_ENV = "COMMERCE_DATA_DIR"

# Default data directory relative to the project root.
# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"


def data_dir() -> Path:
    """Resolved on every call so the environment can be changed at runtime."""
    override = os.environ.get(DATA_DIR_ENV)
    return Path(override) if override else _DEFAULT_DATA_DIR


def product_repository() -> JsonProductRepository:
    return JsonProductRepository(data_dir() / "products.json")


def order_repository() -> JsonOrderRepository:
    return JsonOrderRepository(data_dir() / "orders.json")


def review_repository() -> JsonReviewRepository:
    return JsonReviewRepository(data_dir() / "reviews.json")


def post_repository() -> JsonPostRepository:
    return JsonPostRepository(data_dir() / "posts.json")


def like_repository() -> JsonLikeRepository:
    return JsonLikeRepository(data_dir() / "likes.json")


def comment_repository() -> JsonCommentRepository:
    return JsonCommentRepository(data_dir() / "comments.json")
