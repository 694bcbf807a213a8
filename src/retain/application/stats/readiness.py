"""
Readiness score: a 0-100 summary of how well a card set is known.

Pure computation, no I/O.
"""

from collections.abc import Iterable
from datetime import datetime

from retain.application.due import days_until_review, is_due
from retain.application.mastery import classify
from retain.application.scheduler import round_half_up
from retain.domain.constants import (
    READINESS_BASE_SCORES,
    READINESS_MIN_CARD_SCORE,
    READINESS_OVERDUE_PENALTY,
)
from retain.domain.srs.models import Card, MasteryLevel


def card_readiness(card: Card, now: datetime) -> int:
    """
    Score a single card.

    Base score comes from the mastery level. Due reviewed cards lose
    5 points per day overdue, but never drop below 10.
    """
    level = classify(card.srs_data)
    card_score = READINESS_BASE_SCORES[level.value]

    if level != MasteryLevel.NEW and is_due(card.srs_data, now):
        days_overdue = abs(days_until_review(card.srs_data, now))
        card_score = max(
            card_score - days_overdue * READINESS_OVERDUE_PENALTY,
            READINESS_MIN_CARD_SCORE,
        )

    return card_score


def score(cards: Iterable[Card], now: datetime) -> int:
    """Mean card readiness, rounded half-up. An empty set scores 0."""
    cards = list(cards)
    if not cards:
        return 0
    total = sum(card_readiness(card, now) for card in cards)
    return round_half_up(total / len(cards))
