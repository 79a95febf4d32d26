"""
Review session bookkeeping.

Selects due items into a bounded session and records completion. Sessions
are persisted as JSON records in their own collection; each record holds a
snapshot of the items as they were at creation time.

Session lifecycle:
    created -> (reviews, delegated to ItemStore) -> completed

Completion is terminal. A session that is never completed stays in its
created state.
"""

from __future__ import annotations

from datetime import datetime

from loguru import logger

from .errors import InvalidScoreError, SessionAlreadyCompletedError, SessionNotFoundError
from .item_store import ItemStore
from .models import ReviewSession
from .persistence import SESSIONS_KEY

DEFAULT_SESSION_SIZE = 5


class SessionManager:
    """Creates, completes and lists review sessions."""

    def __init__(
        self,
        items: ItemStore,
        key: str = SESSIONS_KEY,
        default_size: int = DEFAULT_SESSION_SIZE,
    ):
        self.items = items
        self.backend = items.backend
        self.key = key
        self.default_size = default_size

    def _load(self) -> list[ReviewSession]:
        raw = self.backend.load(self.key, [])
        return [ReviewSession.model_validate(data) for data in raw]

    def _save(self, sessions: list[ReviewSession]) -> None:
        self.backend.save(self.key, [s.model_dump(mode="json") for s in sessions])

    def create_session(
        self,
        now: datetime | None = None,
        max_items: int | None = None,
    ) -> ReviewSession:
        """
        Build a session from currently due items.

        Items are taken in storage order, no shuffling or due-date sorting.

        Args:
            now: Reference time (defaults to current time)
            max_items: Upper bound on session size (defaults to default_size)

        Returns:
            The new, persisted ReviewSession
        """
        now = now or datetime.now()
        limit = self.default_size if max_items is None else max_items
        if limit < 0:
            raise ValueError(f"max_items must be non-negative, got {limit}")

        with self.backend.lock:
            due = self.items.get_due(now)
            session = ReviewSession(items=due[:limit], created_at=now)

            sessions = self._load()
            sessions.append(session)
            self._save(sessions)

        logger.info(
            f"Session {session.id} created: {session.total_items} of {len(due)} due items"
        )
        return session

    def complete_session(
        self,
        session_id: str,
        score: float,
        now: datetime | None = None,
    ) -> ReviewSession:
        """
        Mark a session as completed.

        The score is taken as given (0-100), never recomputed here.

        Raises:
            InvalidScoreError: score outside 0-100
            SessionNotFoundError: no session with this ID
            SessionAlreadyCompletedError: session was already completed
        """
        if isinstance(score, bool) or not isinstance(score, (int, float)) or not 0 <= score <= 100:
            raise InvalidScoreError(score)
        now = now or datetime.now()

        with self.backend.lock:
            sessions = self._load()
            session = next((s for s in sessions if s.id == session_id), None)
            if session is None:
                logger.warning(f"Completion for unknown session: {session_id}")
                raise SessionNotFoundError(session_id)
            if session.is_completed:
                raise SessionAlreadyCompletedError(session_id)

            session.completed_at = now
            session.score = score
            self._save(sessions)

        logger.info(f"Session {session_id} completed with score {score:.1f}")
        return session

    def get_sessions(self) -> list[ReviewSession]:
        """All sessions in creation order."""
        with self.backend.lock:
            return self._load()

    def get_session(self, session_id: str) -> ReviewSession:
        for session in self.get_sessions():
            if session.id == session_id:
                return session
        raise SessionNotFoundError(session_id)

    def get_history(self, limit: int = 30) -> list[ReviewSession]:
        """Most recent sessions first."""
        sessions = sorted(self.get_sessions(), key=lambda s: s.created_at, reverse=True)
        return sessions[:limit]

    def get_stats(self) -> dict:
        completed = [s for s in self.get_sessions() if s.is_completed]
        scores = [s.score for s in completed if s.score is not None]
        avg_score = sum(scores) / len(scores) if scores else 0.0
        return {
            "sessions_completed": len(completed),
            "avg_session_score": round(avg_score, 1),
        }
