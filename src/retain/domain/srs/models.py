"""
Domain models for spaced-repetition scheduling.

These are pure data structures with no I/O or external dependencies.
Every model is frozen: a review never mutates state, it produces a new value.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum

from retain.domain.constants import DEFAULT_MAX_NEW, DEFAULT_MAX_REVIEW


class MasteryLevel(str, Enum):
    """Coarse mastery classification, always derived from SRSData."""

    NEW = "new"
    LEARNING = "learning"
    REVIEWING = "reviewing"
    MASTERED = "mastered"


@dataclass(frozen=True)
class ReviewEntry:
    """
    A single review log entry.

    Attributes:
        date: When the review happened.
        rating: Quality rating given (0-5).
        interval_at_review: Interval (days) in effect *before* this review.
    """

    date: datetime
    rating: int
    interval_at_review: int


@dataclass(frozen=True)
class SRSData:
    """
    SM-2 scheduling state for a card.

    Attributes:
        easiness_factor: Interval growth multiplier, never below 1.3.
        repetition_count: Consecutive passing reviews since the last reset.
        interval: Days until next review as of the last computation.
        next_review_date: When the card becomes due.
        last_review_date: Time of the last review, None before the first one.
        review_history: Append-only log, oldest first.
    """

    easiness_factor: float
    repetition_count: int
    interval: int
    next_review_date: datetime
    last_review_date: datetime | None = None
    review_history: tuple[ReviewEntry, ...] = ()


@dataclass(frozen=True)
class Card:
    """
    A piece of study material as seen by the scheduler.

    Only the identity, the optional SRS state and the scope attributes matter
    here; content lives with the caller.
    """

    id: str
    srs_data: SRSData | None = None
    profile_id: str | None = None
    application_id: str | None = None

    @property
    def is_new(self) -> bool:
        return self.srs_data is None

    def with_srs_data(self, srs_data: SRSData) -> "Card":
        return replace(self, srs_data=srs_data)


@dataclass(frozen=True)
class RatingEvent:
    """A user rating a card at a point in time."""

    item_id: str
    rating: int
    timestamp: datetime


@dataclass(frozen=True)
class StudyQueueOptions:
    """Limits and scope filters for building a study queue."""

    max_new: int = DEFAULT_MAX_NEW
    max_review: int = DEFAULT_MAX_REVIEW
    profile_id: str | None = None
    application_id: str | None = None


@dataclass(frozen=True)
class StudyStats:
    """Per-mastery-level counts plus due/overdue totals for a card set."""

    total: int = 0
    new: int = 0
    learning: int = 0
    reviewing: int = 0
    mastered: int = 0
    due_today: int = 0
    overdue: int = 0


@dataclass(frozen=True)
class StreakResult:
    current: int = 0
    longest: int = 0

