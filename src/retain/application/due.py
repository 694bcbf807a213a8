"""
Due-date checks and review priority ordering.

Every function takes an explicit `now`; nothing here reads the clock.
"""

import math
from collections.abc import Iterable
from datetime import datetime

from retain.domain.constants import SECONDS_PER_DAY
from retain.domain.srs.models import Card, SRSData

# Sort buckets for sort_by_priority
_DUE = 0
_NEW = 1
_FUTURE = 2


def is_due(srs_data: SRSData | None, now: datetime) -> bool:
    """A card with no state is always due."""
    if srs_data is None:
        return True
    return now >= srs_data.next_review_date


def days_until_review(srs_data: SRSData | None, now: datetime) -> int:
    """
    Whole days until the card is due, rounded up.

    Negative values mean the card is overdue. Cards with no state return 0.
    """
    if srs_data is None:
        return 0
    delta = (srs_data.next_review_date - now).total_seconds()
    return math.ceil(delta / SECONDS_PER_DAY)


def select_due(cards: Iterable[Card], now: datetime) -> list[Card]:
    """Cards that are due now, new cards included."""
    return [card for card in cards if is_due(card.srs_data, now)]


def select_new(cards: Iterable[Card]) -> list[Card]:
    return [card for card in cards if card.srs_data is None]


def _priority_key(card: Card, now: datetime) -> tuple[int, int]:
    if card.srs_data is None:
        return (_NEW, 0)
    days = days_until_review(card.srs_data, now)
    if is_due(card.srs_data, now):
        return (_DUE, days)
    return (_FUTURE, days)


def sort_by_priority(cards: Iterable[Card], now: datetime) -> list[Card]:
    """
    Order cards for review.

    1. Due cards, most overdue first
    2. New cards, in their original order
    3. Not-yet-due cards, soonest first

    The sort is stable, so ties keep their input order.
    """
    return sorted(cards, key=lambda card: _priority_key(card, now))
