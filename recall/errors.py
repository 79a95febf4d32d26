"""
Error taxonomy for the review core.

Every error is scoped to a single operation and surfaces to the immediate
caller; nothing here is fatal to the process.
"""

from __future__ import annotations


class RecallError(Exception):
    """Base class for all review-core errors."""


class InvalidRatingError(RecallError, ValueError):
    """Rating outside the 1-4 recall scale."""

    def __init__(self, rating: object):
        self.rating = rating
        super().__init__(f"Rating must be between 1 and 4, got {rating!r}")


class ItemNotFoundError(RecallError, KeyError):
    """Referenced item ID is absent from the item collection."""

    def __init__(self, item_id: str):
        self.item_id = item_id
        super().__init__(f"Item with id {item_id} not found")

    def __str__(self) -> str:
        return self.args[0]


class SessionNotFoundError(RecallError, KeyError):
    """Referenced session ID is absent from the session collection."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Session with id {session_id} not found")

    def __str__(self) -> str:
        return self.args[0]


class SessionAlreadyCompletedError(RecallError):
    """Session already has a completion timestamp."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Session with id {session_id} is already completed")


class InvalidConceptError(RecallError, ValueError):
    """Concept entry without a usable name or description."""

    def __init__(self, index: int, reason: str):
        self.index = index
        self.reason = reason
        super().__init__(f"Concept #{index + 1} is invalid: {reason}")


class InvalidScoreError(RecallError, ValueError):
    """Session score outside 0-100."""

    def __init__(self, score: object):
        self.score = score
        super().__init__(f"Score must be between 0 and 100, got {score!r}")
