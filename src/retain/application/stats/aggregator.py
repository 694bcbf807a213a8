"""
Study statistics aggregation.

This is a pure computation module with no I/O.
"""

from collections.abc import Iterable
from datetime import datetime

from retain.application.due import days_until_review, is_due
from retain.application.mastery import classify
from retain.domain.srs.models import Card, StudyStats


def aggregate(cards: Iterable[Card], now: datetime) -> StudyStats:
    """
    Count cards per mastery level plus due and overdue totals.

    Note: due_today includes new cards, since a card without SRS state is
    always due. overdue only counts reviewed cards past their due day.
    """
    counts = {
        "total": 0,
        "new": 0,
        "learning": 0,
        "reviewing": 0,
        "mastered": 0,
        "due_today": 0,
        "overdue": 0,
    }

    for card in cards:
        counts["total"] += 1
        counts[classify(card.srs_data).value] += 1

        if is_due(card.srs_data, now):
            counts["due_today"] += 1
            if days_until_review(card.srs_data, now) < 0:
                counts["overdue"] += 1

    return StudyStats(**counts)
