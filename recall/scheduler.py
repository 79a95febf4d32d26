"""
SM-2 Spaced Repetition Scheduler.

Pure transformation of (item, rating, now) into the item's next retention
state. Nothing here touches storage; "now" is always injected.

Rating Scale:
1 - Again: forgotten
2 - Hard: recalled with serious difficulty (counts as a failure)
3 - Good: recalled correctly
4 - Easy: recalled instantly

Interval tiers follow classic SM-2: the first two successful repetitions use
fixed intervals (1 and 6 days), later ones grow geometrically by the ease
factor. The ease factor is adjusted after every review, failures included.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta

from loguru import logger

from .errors import InvalidRatingError
from .models import Rating, ReviewHistoryEntry, ReviewItem

VALID_RATINGS = tuple(int(r) for r in Rating)
PASSING_RATING = int(Rating.GOOD)


# =============================================================================
# Configuration
# =============================================================================


@dataclass(frozen=True)
class SM2Config:
    """Configuration for SM-2 algorithm."""

    initial_easiness: float = 2.5
    minimum_easiness: float = 1.3
    first_interval: int = 1  # Days for first review
    second_interval: int = 6  # Days for second review


DEFAULT_CONFIG = SM2Config()


# =============================================================================
# SM-2 Algorithm
# =============================================================================


def validate_rating(rating: object) -> int:
    """Return the rating as an int, or raise InvalidRatingError."""
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise InvalidRatingError(rating)
    if rating not in VALID_RATINGS:
        raise InvalidRatingError(rating)
    return int(rating)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero (12.5 -> 13)."""
    return int(math.floor(value + 0.5))


def next_ease_factor(
    ease_factor: float,
    rating: int,
    config: SM2Config = DEFAULT_CONFIG,
) -> float:
    """
    Apply the SM-2 ease adjustment.

    EF' = EF + (0.1 - (5 - q) * (0.08 + (5 - q) * 0.02)), floored at the
    configured minimum. There is no upper bound.
    """
    q = 5 - rating
    new_ef = ease_factor + (0.1 - q * (0.08 + q * 0.02))
    return max(config.minimum_easiness, new_ef)


def next_interval(
    interval: int,
    ease_factor: float,
    repetition_count: int,
    rating: int,
    config: SM2Config = DEFAULT_CONFIG,
) -> tuple[int, int]:
    """
    Compute (interval, repetition_count) after a review.

    `ease_factor` is the value in effect before this review.
    """
    if rating < PASSING_RATING:
        # Failed - reset to beginning
        return config.first_interval, 0

    if repetition_count == 0:
        new_interval = config.first_interval
    elif repetition_count == 1:
        new_interval = config.second_interval
    else:
        new_interval = max(1, round_half_up(interval * ease_factor))

    return new_interval, repetition_count + 1


def compute_next_state(
    item: ReviewItem,
    rating: int,
    now: datetime,
    config: SM2Config = DEFAULT_CONFIG,
) -> ReviewItem:
    """
    Calculate an item's state after a review.

    Args:
        item: Current item (left unmodified)
        rating: User rating (1-4)
        now: Review timestamp
        config: Algorithm constants

    Returns:
        A new ReviewItem with updated schedule and one more history entry

    Raises:
        InvalidRatingError: rating outside 1-4
    """
    rating = validate_rating(rating)
    updated = item.model_copy(deep=True)

    updated.review_history.append(
        ReviewHistoryEntry(date=now, rating=rating, interval=item.interval)
    )

    updated.interval, updated.repetition_count = next_interval(
        item.interval,
        item.ease_factor,
        item.repetition_count,
        rating,
        config,
    )
    updated.ease_factor = next_ease_factor(item.ease_factor, rating, config)

    updated.last_reviewed = now
    updated.next_review = now + timedelta(days=updated.interval)

    logger.debug(
        f"SM-2 update for {item.id}: rating={rating}, "
        f"interval={item.interval}d -> {updated.interval}d, "
        f"ease={item.ease_factor:.2f} -> {updated.ease_factor:.2f}, "
        f"next_review={updated.next_review.isoformat()}"
    )

    return updated
