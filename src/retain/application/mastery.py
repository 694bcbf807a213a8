"""Mastery classification derived from SRS state."""

from collections.abc import Iterable

from retain.domain.constants import (
    LEARNING_MAX_INTERVAL,
    LEARNING_MAX_REPETITIONS,
    REVIEWING_MAX_INTERVAL,
)
from retain.domain.srs.models import Card, MasteryLevel, SRSData


def classify(srs_data: SRSData | None) -> MasteryLevel:
    """
    Derive the mastery level of a card. First matching rule wins:

    1. no state or repetition_count == 0 -> new
    2. repetition_count <= 2 or interval <= 6 -> learning
    3. interval <= 21 -> reviewing
    4. otherwise -> mastered
    """
    if srs_data is None or srs_data.repetition_count == 0:
        return MasteryLevel.NEW
    if (
        srs_data.repetition_count <= LEARNING_MAX_REPETITIONS
        or srs_data.interval <= LEARNING_MAX_INTERVAL
    ):
        return MasteryLevel.LEARNING
    if srs_data.interval <= REVIEWING_MAX_INTERVAL:
        return MasteryLevel.REVIEWING
    return MasteryLevel.MASTERED


def cards_by_mastery(cards: Iterable[Card], level: MasteryLevel) -> list[Card]:
    return [card for card in cards if classify(card.srs_data) == level]
