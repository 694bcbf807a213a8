"""
Study session bookkeeping.

Sessions and progress are immutable values: each function returns a new
object and leaves its input untouched.
"""

import logging
from collections.abc import Iterable
from dataclasses import replace
from datetime import date, datetime

from ulid import ULID

from retain.application.scheduler import round_half_up, validate_rating
from retain.application.streak import compute_streak
from retain.domain.errors import InvalidStateError
from retain.domain.session.models import StudyMode, StudyProgress, StudySession

logger = logging.getLogger(__name__)


def generate_session_id() -> str:
    """Generate a sortable session ID using ULID."""
    return f"session_{ULID()}"


def _round_rating(value: float) -> float:
    return round_half_up(value * 100) / 100


def start_session(
    mode: StudyMode,
    total_cards: int,
    now: datetime,
    application_id: str | None = None,
    profile_id: str | None = None,
    session_id: str | None = None,
) -> StudySession:
    session = StudySession(
        id=session_id or generate_session_id(),
        mode=StudyMode(mode),
        started_at=now,
        total_cards=total_cards,
        cards_remaining=total_cards,
        application_id=application_id,
        profile_id=profile_id,
    )
    logger.debug(f"Started {session.mode.value} session {session.id} ({total_cards} cards)")
    return session


def record_rating(session: StudySession, rating: int) -> StudySession:
    """
    Count one rating towards the session tally.

    Raises:
        ValidationError: rating is not an integer in [0, 5].
        InvalidStateError: the session has already ended.
    """
    validate_rating(rating)
    if not session.is_active:
        raise InvalidStateError(f"Session {session.id} has already ended")

    ratings = list(session.ratings)
    ratings[rating] += 1

    total = sum(ratings)
    weighted = sum(r * count for r, count in enumerate(ratings))

    return replace(
        session,
        ratings=tuple(ratings),
        cards_reviewed=session.cards_reviewed + 1,
        cards_remaining=max(0, session.cards_remaining - 1),
        average_rating=_round_rating(weighted / total) if total else 0.0,
    )


def end_session(session: StudySession, now: datetime) -> StudySession:
    if not session.is_active:
        raise InvalidStateError(f"Session {session.id} has already ended")
    return replace(session, ended_at=now)


def update_progress(
    progress: StudyProgress,
    session: StudySession,
    study_dates: Iterable[date | datetime],
    now: datetime,
) -> StudyProgress:
    """
    Fold a finished session into cumulative progress.

    Args:
        progress: Progress before this session.
        session: The ended session.
        study_dates: Start times of earlier completed sessions.
        now: When the session was closed; counted as a study day.
    """
    if session.is_active:
        raise InvalidStateError(f"Session {session.id} is still active")

    streak = compute_streak([*study_dates, now], now)
    duration = (session.ended_at - session.started_at).total_seconds()

    reviewed = session.cards_reviewed
    combined_reviews = progress.total_reviews + reviewed
    average = (
        progress.average_rating * progress.total_reviews
        + session.average_rating * reviewed
    ) / (combined_reviews or 1)

    return replace(
        progress,
        last_study_date=now,
        current_streak=streak.current,
        longest_streak=max(progress.longest_streak, streak.longest),
        total_cards_studied=progress.total_cards_studied + reviewed,
        total_reviews=combined_reviews,
        sessions_completed=progress.sessions_completed + 1,
        total_study_time_minutes=progress.total_study_time_minutes
        + round_half_up(duration / 60),
        average_rating=average,
        updated_at=now,
    )
