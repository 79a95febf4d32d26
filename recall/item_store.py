"""
Item Store for the review core.

CRUD over the review item collection, keyed by ID and persisted wholesale
through a KeyValueBackend. Every mutation is an explicit
load -> mutate in memory -> save sequence held under the backend lock.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Mapping

from loguru import logger

from .errors import InvalidConceptError, ItemNotFoundError
from .models import ReviewItem, make_item
from .persistence import ITEMS_KEY, KeyValueBackend
from .scheduler import DEFAULT_CONFIG, PASSING_RATING, SM2Config, compute_next_state


class ItemStore:
    """
    Review item persistence.

    Handles:
    - Item creation with scheduling defaults
    - Due-item queries
    - Review processing (SM-2 update + write-back)
    - Idempotent concept import
    """

    def __init__(
        self,
        backend: KeyValueBackend,
        config: SM2Config | None = None,
        key: str = ITEMS_KEY,
    ):
        """
        Initialize the item store.

        Args:
            backend: Persistence collaborator
            config: SM-2 constants (defaults if None)
            key: Collection key in the backend
        """
        self.backend = backend
        self.config = config or DEFAULT_CONFIG
        self.key = key

    # =========================================================================
    # Serialization
    # =========================================================================

    def _load(self) -> list[ReviewItem]:
        raw = self.backend.load(self.key, [])
        return [ReviewItem.model_validate(data) for data in raw]

    def _save(self, items: list[ReviewItem]) -> None:
        self.backend.save(self.key, [item.model_dump(mode="json") for item in items])

    # =========================================================================
    # Item Operations
    # =========================================================================

    def create_item(
        self,
        concept: str,
        description: str,
        difficulty: int = 3,
        now: datetime | None = None,
    ) -> ReviewItem:
        """Build a new item with default schedule. Does not persist it."""
        return make_item(
            concept,
            description,
            difficulty=difficulty,
            now=now,
            initial_ease=self.config.initial_easiness,
        )

    def get_all(self) -> list[ReviewItem]:
        """Load every item, timestamps parsed back into datetimes."""
        with self.backend.lock:
            return self._load()

    def get(self, item_id: str) -> ReviewItem:
        """
        Get a single item.

        Raises:
            ItemNotFoundError: no item with this ID
        """
        for item in self.get_all():
            if item.id == item_id:
                return item
        logger.warning(f"Item lookup failed: {item_id}")
        raise ItemNotFoundError(item_id)

    def add(self, item: ReviewItem) -> ReviewItem:
        """Append an item to the collection."""
        with self.backend.lock:
            items = self._load()
            items.append(item)
            self._save(items)

        logger.info(f"Added item {item.id} ({item.concept!r})")
        return item

    def get_due(self, now: datetime | None = None) -> list[ReviewItem]:
        """
        Get items due for review.

        Args:
            now: Reference time (defaults to current time)

        Returns:
            Items with next_review <= now, in storage order
        """
        now = now or datetime.now()
        return [item for item in self.get_all() if item.is_due(now)]

    def count_due(self, now: datetime | None = None) -> int:
        """Count items due for review."""
        return len(self.get_due(now))

    def process_review(
        self,
        item_id: str,
        rating: int,
        now: datetime | None = None,
    ) -> ReviewItem:
        """
        Record a review and update the item's schedule.

        The collection is only written after the update computes, so a
        failure leaves stored state unchanged.

        Args:
            item_id: The reviewed item
            rating: Recall rating (1-4)
            now: Review timestamp (defaults to current time)

        Returns:
            The updated item

        Raises:
            InvalidRatingError: rating outside 1-4
            ItemNotFoundError: no item with this ID
        """
        now = now or datetime.now()

        with self.backend.lock:
            items = self._load()
            index = next((i for i, item in enumerate(items) if item.id == item_id), None)
            if index is None:
                logger.warning(f"Review for unknown item: {item_id}")
                raise ItemNotFoundError(item_id)

            updated = compute_next_state(items[index], rating, now, self.config)
            items[index] = updated
            self._save(items)

        logger.debug(
            f"Recorded review for {item_id}: rating={rating}, "
            f"next_review={updated.next_review.isoformat()}, interval={updated.interval}d"
        )
        return updated

    def add_concepts_if_absent(
        self,
        concepts: Iterable[Mapping[str, str]],
        now: datetime | None = None,
    ) -> list[ReviewItem]:
        """
        Create items for concepts not already tracked.

        Matching is on `concept == name`; an existing item keeps its
        description (first write wins).

        Args:
            concepts: Mappings with "name" and optional "description"

        Returns:
            The newly created items

        Raises:
            InvalidConceptError: an entry lacks a string name or has a
                non-string description; nothing is written
        """
        entries = [_check_concept(index, concept) for index, concept in enumerate(concepts)]
        created: list[ReviewItem] = []

        with self.backend.lock:
            items = self._load()
            known = {item.concept for item in items}

            for name, description in entries:
                if name in known:
                    continue
                item = self.create_item(name, description, now=now)
                items.append(item)
                known.add(name)
                created.append(item)

            if created:
                self._save(items)

        if created:
            logger.info(f"Added {len(created)} new concepts")
        return created

    # =========================================================================
    # Stats
    # =========================================================================

    def get_stats(self, now: datetime | None = None, recent: int = 100) -> dict:
        """
        Get item-level learning statistics.

        Args:
            now: Reference time for the due count
            recent: Number of most recent reviews used for averages

        Returns:
            Dictionary with aggregate stats
        """
        now = now or datetime.now()
        items = self.get_all()

        history = sorted(
            (entry for item in items for entry in item.review_history),
            key=lambda entry: entry.date,
        )
        recent_ratings = [entry.rating for entry in history[-recent:]]

        avg_rating = sum(recent_ratings) / len(recent_ratings) if recent_ratings else 0.0
        passed = sum(1 for rating in recent_ratings if rating >= PASSING_RATING)
        retention = passed * 100.0 / len(recent_ratings) if recent_ratings else 0.0

        return {
            "total_items": len(items),
            "items_due": sum(1 for item in items if item.is_due(now)),
            "total_reviews": len(history),
            "avg_rating_recent": round(avg_rating, 2),
            "retention_rate_percent": round(retention, 1),
        }


def _check_concept(index: int, concept: object) -> tuple[str, str]:
    """Return (name, description) for one import entry."""
    if not isinstance(concept, Mapping):
        raise InvalidConceptError(index, "expected an object with a name")
    name = concept.get("name")
    if not isinstance(name, str) or not name.strip():
        raise InvalidConceptError(index, "name must be a non-empty string")
    description = concept.get("description", "")
    if not isinstance(description, str):
        raise InvalidConceptError(index, "description must be a string")
    return name, description
