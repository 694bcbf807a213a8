"""Human-readable formatting helpers."""

from retain.application.scheduler import round_half_up


def _plural(count: int, unit: str) -> str:
    return f"1 {unit}" if count == 1 else f"{count} {unit}s"


def format_interval(days: int) -> str:
    """
    Format a review interval for display.

    >>> format_interval(0)
    'Now'
    >>> format_interval(10)
    '1 week'
    >>> format_interval(45)
    '2 months'
    """
    if days == 0:
        return "Now"
    if days < 7:
        return _plural(days, "day")
    if days < 30:
        return _plural(round_half_up(days / 7), "week")
    if days < 365:
        return _plural(round_half_up(days / 30), "month")
    return _plural(round_half_up(days / 365), "year")
