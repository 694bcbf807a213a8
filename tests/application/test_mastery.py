"""Tests for mastery classification."""

import pytest

from retain.application.mastery import cards_by_mastery, classify
from retain.domain.srs.models import MasteryLevel


def test_absent_state_is_new():
    assert classify(None) == MasteryLevel.NEW


@pytest.mark.parametrize(
    "repetition_count, interval, expected",
    [
        (0, 0, MasteryLevel.NEW),
        (0, 30, MasteryLevel.NEW),
        (1, 1, MasteryLevel.LEARNING),
        (2, 40, MasteryLevel.LEARNING),
        (5, 6, MasteryLevel.LEARNING),
        (3, 7, MasteryLevel.REVIEWING),
        (3, 21, MasteryLevel.REVIEWING),
        (4, 22, MasteryLevel.MASTERED),
        (9, 180, MasteryLevel.MASTERED),
    ],
)
def test_classification_rules(make_srs, repetition_count, interval, expected):
    assert classify(make_srs(repetition_count=repetition_count, interval=interval)) == expected


def test_mastery_level_values():
    assert [level.value for level in MasteryLevel] == [
        "new",
        "learning",
        "reviewing",
        "mastered",
    ]


def test_cards_by_mastery(make_card, make_srs):
    cards = [
        make_card("a"),
        make_card("b", make_srs(repetition_count=1, interval=1)),
        make_card("c", make_srs(repetition_count=4, interval=30)),
        make_card("d"),
    ]

    assert [c.id for c in cards_by_mastery(cards, MasteryLevel.NEW)] == ["a", "d"]
    assert [c.id for c in cards_by_mastery(cards, MasteryLevel.MASTERED)] == ["c"]
    assert cards_by_mastery(cards, MasteryLevel.REVIEWING) == []
