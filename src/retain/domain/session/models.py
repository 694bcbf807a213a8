"""
Domain models for study sessions and long-running study progress.

Pure data structures; the transitions live in retain.application.session.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class StudyMode(str, Enum):
    DAILY = "daily"
    APPLICATION = "application"
    QUICK = "quick"
    ALL_DUE = "all-due"


@dataclass(frozen=True)
class StudySession:
    """
    A single sitting of reviews.

    Attributes:
        id: Stable session identifier (session_<ULID>).
        mode: How the queue for this session was chosen.
        started_at: When the session began.
        total_cards: Size of the queue at the start.
        cards_reviewed: Ratings recorded so far.
        cards_remaining: Cards left in the queue (never negative).
        ratings: Count of each rating, indexed by rating 0-5.
        average_rating: Mean rating, rounded to 2 decimals.
        ended_at: Set once the session is closed.
    """

    id: str
    mode: StudyMode
    started_at: datetime
    total_cards: int
    cards_reviewed: int = 0
    cards_remaining: int = 0
    ratings: tuple[int, ...] = (0, 0, 0, 0, 0, 0)
    average_rating: float = 0.0
    application_id: str | None = None
    profile_id: str | None = None
    ended_at: datetime | None = None

    @property
    def is_active(self) -> bool:
        return self.ended_at is None


@dataclass(frozen=True)
class StudyProgress:
    """Cumulative study progress for one profile."""

    profile_id: str
    current_streak: int = 0
    longest_streak: int = 0
    last_study_date: datetime | None = None
    total_cards_studied: int = 0
    total_reviews: int = 0
    sessions_completed: int = 0
    total_study_time_minutes: int = 0
    average_rating: float = 0.0
    updated_at: datetime | None = None
