"""
SM-2 review scheduling.

Pure computation module with no I/O. Rating scale (0-5):
    0 - Complete blackout
    1 - Incorrect, but recognized the answer when shown
    2 - Incorrect, but recalled easily after seeing the answer
    3 - Correct with serious difficulty
    4 - Correct after some hesitation
    5 - Perfect response

EF' = EF + (0.1 - (5 - q) * (0.08 + (5 - q) * 0.02)), floored at 1.3.
"""

import logging
import math
from dataclasses import replace
from datetime import datetime, timedelta

from retain.domain.constants import (
    DEFAULT_EASINESS_FACTOR,
    FAILED_INTERVAL,
    FIRST_INTERVAL,
    MAX_RATING,
    MIN_EASINESS_FACTOR,
    MIN_RATING,
    PASSING_GRADE,
    SECOND_INTERVAL,
)
from retain.domain.errors import InvalidStateError, ValidationError
from retain.domain.srs.models import ReviewEntry, SRSData

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up (2.5 -> 3, 15.5 -> 16)."""
    return math.floor(value + 0.5)


def validate_rating(rating: int) -> int:
    """Return the rating unchanged, or raise ValidationError."""
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise ValidationError(f"Rating must be an integer, got {rating!r}")
    if rating < MIN_RATING or rating > MAX_RATING:
        raise ValidationError(
            f"Rating must be between {MIN_RATING} and {MAX_RATING}, got {rating}"
        )
    return rating


def validate_state(srs_data: SRSData) -> None:
    if srs_data.easiness_factor < MIN_EASINESS_FACTOR:
        raise InvalidStateError(
            f"Easiness factor {srs_data.easiness_factor} is below {MIN_EASINESS_FACTOR}"
        )
    if srs_data.interval < 0:
        raise InvalidStateError(f"Interval must be >= 0, got {srs_data.interval}")
    if srs_data.repetition_count < 0:
        raise InvalidStateError(
            f"Repetition count must be >= 0, got {srs_data.repetition_count}"
        )


def compute_easiness(easiness_factor: float, rating: int) -> float:
    """
    Compute the new easiness factor for a rating.

    Higher ratings never produce a lower result; the floor is 1.3.
    """
    validate_rating(rating)
    miss = MAX_RATING - rating
    new_ef = easiness_factor + (0.1 - miss * (0.08 + miss * 0.02))
    return max(MIN_EASINESS_FACTOR, new_ef)


def compute_interval(
    current_interval: int,
    repetition_count: int,
    easiness_factor: float,
    rating: int,
) -> int:
    """
    Compute the next review interval in days.

    Args:
        current_interval: Interval in effect before this review.
        repetition_count: Passing streak *before* this review.
        easiness_factor: The already-updated easiness factor.
        rating: Quality rating 0-5.

    Rules, in order:
        - rating < 3: reset to 1 day
        - first successful review: 1 day
        - second successful review: 6 days
        - afterwards: round_half_up(current_interval * easiness_factor)
    """
    validate_rating(rating)
    if rating < PASSING_GRADE:
        return FAILED_INTERVAL
    if repetition_count == 0:
        return FIRST_INTERVAL
    if repetition_count == 1:
        return SECOND_INTERVAL
    return round_half_up(current_interval * easiness_factor)


def next_repetition_count(repetition_count: int, rating: int) -> int:
    """Reset to 0 on a failed review, otherwise increment."""
    if rating < PASSING_GRADE:
        return 0
    return repetition_count + 1


def initialize_srs_data(now: datetime) -> SRSData:
    """Scheduling state for a card that has never been reviewed."""
    return SRSData(
        easiness_factor=DEFAULT_EASINESS_FACTOR,
        repetition_count=0,
        interval=0,
        next_review_date=now,
        last_review_date=None,
        review_history=(),
    )


def apply_review(srs_data: SRSData | None, rating: int, now: datetime) -> SRSData:
    """
    Apply one rating event and return the resulting SRS state.

    The input is never mutated. A card without state (None) starts from
    initialize_srs_data(now). Validation runs before any computation, so an
    invalid rating or state never produces a partial result.

    Args:
        srs_data: Current state, or None for a new card.
        rating: Quality rating 0-5.
        now: Review time; also the base for next_review_date.

    Raises:
        ValidationError: rating is not an integer in [0, 5].
        InvalidStateError: srs_data violates the EF floor or has negative counters.
    """
    validate_rating(rating)
    current = srs_data if srs_data is not None else initialize_srs_data(now)
    validate_state(current)

    new_ef = compute_easiness(current.easiness_factor, rating)
    new_count = next_repetition_count(current.repetition_count, rating)
    # Interval rules look at the streak as it was before this review.
    new_interval = compute_interval(
        current.interval, current.repetition_count, new_ef, rating
    )

    entry = ReviewEntry(date=now, rating=rating, interval_at_review=current.interval)

    logger.debug(
        f"Review rating={rating}: interval {current.interval} -> {new_interval}, "
        f"EF {current.easiness_factor:.2f} -> {new_ef:.2f}"
    )

    return replace(
        current,
        easiness_factor=new_ef,
        repetition_count=new_count,
        interval=new_interval,
        next_review_date=now + timedelta(days=new_interval),
        last_review_date=now,
        review_history=current.review_history + (entry,),
    )
