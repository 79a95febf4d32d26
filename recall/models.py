"""
Review Data Models.

Persisted records for the review core. Timestamps are `datetime` in memory
and ISO-8601 strings on disk; pydantic handles both directions so a loaded
record never carries a raw time string.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta
from enum import IntEnum

from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================


class Rating(IntEnum):
    """User recall rating, 1-4."""

    AGAIN = 1  # Forgot
    HARD = 2   # Recalled with serious difficulty (still a failure)
    GOOD = 3   # Recalled correctly
    EASY = 4   # Recalled instantly

    @property
    def is_success(self) -> bool:
        return self >= Rating.GOOD


def new_id() -> str:
    """Opaque unique identifier for items and sessions."""
    return uuid.uuid4().hex


# =============================================================================
# Records
# =============================================================================


class ReviewHistoryEntry(BaseModel):
    """One processed review. `interval` is the interval before the update."""

    date: datetime
    rating: int = Field(ge=1, le=4)
    interval: int = Field(ge=1)


class ReviewItem(BaseModel):
    """A concept tracked by the scheduler."""

    id: str = Field(default_factory=new_id)
    concept: str
    description: str = ""
    difficulty: int = Field(default=3, ge=1, le=5)  # informational only
    last_reviewed: datetime
    next_review: datetime
    interval: int = Field(default=1, ge=1)  # days
    ease_factor: float = Field(default=2.5, ge=1.3)
    repetition_count: int = Field(default=0, ge=0)
    review_history: list[ReviewHistoryEntry] = Field(default_factory=list)

    def is_due(self, now: datetime) -> bool:
        return self.next_review <= now

    @property
    def total_reviews(self) -> int:
        return len(self.review_history)


class ReviewSession(BaseModel):
    """A bounded snapshot of due items presented for review."""

    id: str = Field(default_factory=new_id)
    items: list[ReviewItem] = Field(default_factory=list)
    created_at: datetime
    completed_at: datetime | None = None
    score: float | None = Field(default=None, ge=0, le=100)  # percentage of items reviewed

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None

    @property
    def total_items(self) -> int:
        return len(self.items)


def make_item(
    concept: str,
    description: str,
    difficulty: int = 3,
    now: datetime | None = None,
    initial_ease: float = 2.5,
) -> ReviewItem:
    """Build a fresh item, due one day after creation."""
    now = now or datetime.now()
    return ReviewItem(
        concept=concept,
        description=description,
        difficulty=difficulty,
        last_reviewed=now,
        next_review=now + timedelta(days=1),
        interval=1,
        ease_factor=initial_ease,
        repetition_count=0,
    )
