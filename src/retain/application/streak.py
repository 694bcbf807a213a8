"""Consecutive-day study streaks computed from review timestamps."""

from collections.abc import Iterable
from datetime import date, datetime, timedelta, tzinfo

from retain.domain.srs.models import StreakResult


def _to_day(value: date | datetime, tz: tzinfo | None) -> date:
    if isinstance(value, datetime):
        if tz is not None and value.tzinfo is not None:
            value = value.astimezone(tz)
        return value.date()
    return value


def compute_streak(
    review_dates: Iterable[date | datetime],
    now: date | datetime,
    tz: tzinfo | None = None,
) -> StreakResult:
    """
    Compute the current and longest run of consecutive study days.

    Args:
        review_dates: Review timestamps in any order; duplicates on the same
            calendar day count once.
        now: Reference time used to decide what "today" is.
        tz: When given, timezone-aware values are converted to it before
            taking the calendar day.

    Returns:
        StreakResult where `current` is the run starting at the most recent
        study day, provided that day is today or yesterday, and 0 otherwise.
    """
    days = sorted({_to_day(d, tz) for d in review_dates}, reverse=True)
    if not days:
        return StreakResult()

    runs: list[int] = [1]
    for newer, older in zip(days, days[1:]):
        if (newer - older).days == 1:
            runs[-1] += 1
        else:
            runs.append(1)

    today = _to_day(now, tz)
    started_recently = days[0] in (today, today - timedelta(days=1))

    return StreakResult(
        current=runs[0] if started_recently else 0,
        longest=max(runs),
    )
