"""
Deck Service: Application layer orchestrator.

Coordinates loading cards from the repository, running the pure scheduling
functions over them, and writing reviewed state back.
"""

import logging
import random
from datetime import datetime, tzinfo

from retain.application.mastery import cards_by_mastery, classify
from retain.application.queue_builder import build_study_queue, filter_by_scope
from retain.application.scheduler import apply_review, validate_rating
from retain.application.stats import aggregate, score
from retain.application.streak import compute_streak
from retain.domain.errors import CardNotFoundError
from retain.domain.srs.models import (
    Card,
    MasteryLevel,
    RatingEvent,
    StreakResult,
    StudyQueueOptions,
    StudyStats,
)
from retain.domain.srs.ports import CardRepository

logger = logging.getLogger(__name__)


class DeckService:
    """
    Application service for reviewing and analysing a deck.

    Follows Dependency Inversion: depends on the CardRepository abstraction,
    not a concrete storage adapter. Callers serialize concurrent reviews of
    the same deck; the last save wins.
    """

    def __init__(self, repository: CardRepository):
        self._repo = repository

    def review(self, event: RatingEvent) -> Card:
        """
        Apply a rating event to its card and persist the new state.

        Raises:
            ValidationError: The rating is invalid. Nothing is saved.
            CardNotFoundError: No card with event.item_id exists.
        """
        validate_rating(event.rating)

        cards = self._repo.load_cards()
        for card in cards:
            if card.id == event.item_id:
                break
        else:
            raise CardNotFoundError(event.item_id)

        updated = card.with_srs_data(
            apply_review(card.srs_data, event.rating, event.timestamp)
        )
        self._repo.save_cards([updated])

        logger.info(
            f"Reviewed {updated.id}: rating={event.rating}, "
            f"next in {updated.srs_data.interval}d ({classify(updated.srs_data).value})"
        )
        return updated

    def queue(
        self, options: StudyQueueOptions, rng: random.Random, now: datetime
    ) -> list[Card]:
        return build_study_queue(self._repo.load_cards(), options, rng, now)

    def stats(self, now: datetime, options: StudyQueueOptions | None = None) -> StudyStats:
        return aggregate(self._scoped_cards(options), now)

    def readiness(self, now: datetime, options: StudyQueueOptions | None = None) -> int:
        return score(self._scoped_cards(options), now)

    def streak(self, now: datetime, tz: tzinfo | None = None) -> StreakResult:
        """Streak over every review recorded in the deck."""
        review_dates = [
            entry.date
            for card in self._repo.load_cards()
            if card.srs_data is not None
            for entry in card.srs_data.review_history
        ]
        return compute_streak(review_dates, now, tz=tz)

    def mastery_breakdown(self) -> dict[MasteryLevel, list[Card]]:
        """Group cards by mastery level, keeping deck order within a level."""
        cards = self._repo.load_cards()
        return {level: cards_by_mastery(cards, level) for level in MasteryLevel}

    def _scoped_cards(self, options: StudyQueueOptions | None) -> list[Card]:
        cards = self._repo.load_cards()
        if options is None:
            return cards
        return filter_by_scope(cards, options.profile_id, options.application_id)
