"""
Queue builder for study sessions.

Builds ordered study queues by:
1. Filtering cards to the requested profile/application scope
2. Ordering due cards by review priority and shuffling new cards
3. Capping each group, then interleaving new cards between reviews
"""

import logging
import random
from collections.abc import Iterable
from datetime import datetime

from retain.application.due import is_due, sort_by_priority
from retain.domain.constants import REVIEWS_PER_NEW_CARD
from retain.domain.srs.models import Card, StudyQueueOptions

logger = logging.getLogger(__name__)


def build_study_queue(
    cards: Iterable[Card],
    options: StudyQueueOptions,
    rng: random.Random,
    now: datetime,
) -> list[Card]:
    """
    Build the card order for one study session.

    Args:
        cards: Candidate cards.
        options: Limits and scope filters.
        rng: Random source used to shuffle new cards. Pass a seeded
            random.Random for reproducible queues.
        now: Reference time for due checks.

    Returns:
        Up to max_review due cards and max_new new cards, with one new card
        after every five reviews. The queue holds no state between calls.
    """
    scoped = filter_by_scope(cards, options.profile_id, options.application_id)

    due_cards = [c for c in scoped if c.srs_data is not None and is_due(c.srs_data, now)]
    new_cards = [c for c in scoped if c.srs_data is None]

    sorted_due = sort_by_priority(due_cards, now)
    shuffled_new = list(new_cards)
    rng.shuffle(shuffled_new)

    limited_due = sorted_due[: max(0, options.max_review)]
    limited_new = shuffled_new[: max(0, options.max_new)]

    logger.debug(
        f"Queue: {len(limited_due)}/{len(due_cards)} due, "
        f"{len(limited_new)}/{len(new_cards)} new"
    )

    return interleave(limited_due, limited_new)


def filter_by_scope(
    cards: Iterable[Card],
    profile_id: str | None = None,
    application_id: str | None = None,
) -> list[Card]:
    """
    Keep cards that belong to the given scope.

    Cards without a profile are shared across profiles; the application
    filter is an exact match.
    """
    scoped = list(cards)
    if profile_id:
        scoped = [c for c in scoped if not c.profile_id or c.profile_id == profile_id]
    if application_id:
        scoped = [c for c in scoped if c.application_id == application_id]
    return scoped


def interleave(
    review_cards: list[Card],
    new_cards: list[Card],
    reviews_per_new: int = REVIEWS_PER_NEW_CARD,
) -> list[Card]:
    """
    Emit `reviews_per_new` review cards, then one new card, repeating.

    Once either list runs out the rest of the other is appended as-is.
    """
    result: list[Card] = []
    review_index = 0
    new_index = 0

    while review_index < len(review_cards) or new_index < len(new_cards):
        chunk = review_cards[review_index : review_index + reviews_per_new]
        result.extend(chunk)
        review_index += len(chunk)

        if new_index < len(new_cards):
            result.append(new_cards[new_index])
            new_index += 1

    return result
