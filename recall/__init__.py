"""
Recall: SM-2 spaced repetition review core.

Components:
- scheduler: SM-2 algorithm (pure functions)
- ItemStore: review item persistence and review processing
- SessionManager: bounded review sessions and completion bookkeeping
- ReviewRunner: presentation adapter (rate / skip / complete)
- MemoryBackend, JsonFileBackend: key-value persistence collaborators
"""

from .errors import (
    InvalidConceptError,
    InvalidRatingError,
    InvalidScoreError,
    ItemNotFoundError,
    RecallError,
    SessionAlreadyCompletedError,
    SessionNotFoundError,
)
from .item_store import ItemStore
from .models import Rating, ReviewHistoryEntry, ReviewItem, ReviewSession
from .persistence import ITEMS_KEY, SESSIONS_KEY, JsonFileBackend, KeyValueBackend, MemoryBackend
from .review_runner import ReviewRunner
from .scheduler import SM2Config, compute_next_state
from .session_manager import SessionManager

__all__ = [
    # Models
    "Rating",
    "ReviewItem",
    "ReviewHistoryEntry",
    "ReviewSession",
    # Scheduling
    "SM2Config",
    "compute_next_state",
    # Persistence
    "KeyValueBackend",
    "MemoryBackend",
    "JsonFileBackend",
    "ITEMS_KEY",
    "SESSIONS_KEY",
    # Services
    "ItemStore",
    "SessionManager",
    "ReviewRunner",
    # Errors
    "RecallError",
    "InvalidRatingError",
    "InvalidConceptError",
    "InvalidScoreError",
    "ItemNotFoundError",
    "SessionNotFoundError",
    "SessionAlreadyCompletedError",
]
