"""Human-readable identifiers: order numbers and URL slugs."""

from __future__ import annotations

import re
import secrets
import time
from typing import Callable

ORDER_NUMBER_PREFIX = "ORD"
SLUG_ATTEMPTS = 10

_BASE36 = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"
_SUFFIX_LENGTH = 6

_STRIP = re.compile(r"[^\w\s-]", re.ASCII)
_SEPARATORS = re.compile(r"[\s_-]+", re.ASCII)


def _millis() -> int:
    return time.time_ns() // 1_000_000


def to_base36(number: int) -> str:
    if number < 0:
        raise ValueError("Cannot encode a negative number")
    if number == 0:
        return "0"
    digits = []
    while number:
        number, rem = divmod(number, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def generate_order_number(clock: Callable[[], int] = _millis) -> str:
    """``ORD-<base36 ms timestamp>-<6 random base36 chars>``, uppercase.

    The random suffix makes collisions within one millisecond vanishingly
    rare; callers still retry on a unique-key violation.
    """
    suffix = "".join(secrets.choice(_BASE36) for _ in range(_SUFFIX_LENGTH))
    return f"{ORDER_NUMBER_PREFIX}-{to_base36(clock())}-{suffix}"


def slugify(text: str) -> str:
    """Turn *text* into a URL slug: ``"Hello, World!"`` -> ``"hello-world"``."""
    slug = text.lower().strip()
    slug = _STRIP.sub("", slug)
    slug = _SEPARATORS.sub("-", slug)
    return slug.strip("-")


def generate_unique_slug(
    base: str,
    exists: Callable[[str], bool],
    max_attempts: int = SLUG_ATTEMPTS,
    clock: Callable[[], int] = _millis,
) -> str:
    """First of ``base``, ``base-1`` … ``base-<max_attempts>`` that is free.

    Falls back to a millisecond timestamp suffix so the search always ends.
    """
    if not exists(base):
        return base
    for attempt in range(1, max_attempts + 1):
        candidate = f"{base}-{attempt}"
        if not exists(candidate):
            return candidate
    return f"{base}-{clock()}"
