"""
Presentation adapter for a review session.

Walks a session one item at a time. Any front-end (terminal, webview, bot)
reads `current_item` and `progress`, then forwards one of three commands:

- rate(rating): process the review, then advance
- skip(): advance without recording a review
- complete(): end the session now

Reaching the end of the items or calling complete() completes the session
with score = reviewed / total * 100.
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable

from loguru import logger

from .models import ReviewItem, ReviewSession
from .session_manager import SessionManager


class ReviewRunner:
    """Drives a single ReviewSession through rate/skip/complete commands."""

    def __init__(
        self,
        manager: SessionManager,
        session: ReviewSession,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.manager = manager
        self.session = session
        self.clock = clock
        self.index = 0
        self.reviewed: list[str] = []
        self.skipped: list[str] = []

    @property
    def total(self) -> int:
        return self.session.total_items

    @property
    def is_finished(self) -> bool:
        return self.session.is_completed

    @property
    def current_item(self) -> ReviewItem | None:
        if self.is_finished or self.index >= self.total:
            return None
        return self.session.items[self.index]

    @property
    def progress(self) -> tuple[int, int]:
        """(position, total), position is 1-based."""
        return min(self.index + 1, self.total), self.total

    @property
    def score(self) -> float:
        if self.total == 0:
            return 0.0
        return len(self.reviewed) / self.total * 100

    def rate(self, rating: int) -> ReviewItem:
        """
        Rate the current item and advance.

        On error the index does not move and nothing is stored.

        Returns:
            The updated item from the store
        """
        item = self._require_current()
        updated = self.manager.items.process_review(item.id, rating, self.clock())
        self.reviewed.append(item.id)
        self._advance()
        return updated

    def skip(self) -> None:
        item = self._require_current()
        self.skipped.append(item.id)
        self._advance()

    def complete(self) -> ReviewSession:
        """End the session and persist its score."""
        if self.is_finished:
            return self.session
        self.session = self.manager.complete_session(
            self.session.id, self.score, self.clock()
        )
        logger.info(
            f"Review finished: {len(self.reviewed)} reviewed, "
            f"{len(self.skipped)} skipped of {self.total}"
        )
        return self.session

    def _require_current(self) -> ReviewItem:
        item = self.current_item
        if item is None:
            raise RuntimeError("No item left to review in this session")
        return item

    def _advance(self) -> None:
        self.index += 1
        if self.index >= self.total:
            self.complete()
