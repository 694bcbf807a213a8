"""
Study Service: runs a study session over a deck.

A session is started from a study queue, collects one rating per card
(each rating also reschedules the card), and on finish is stored with the
profile's updated progress.
"""

import logging
import random
from dataclasses import replace
from datetime import datetime

from retain.application.deck_service import DeckService
from retain.application.queue_builder import build_study_queue
from retain.application.session import (
    end_session,
    record_rating,
    start_session,
    update_progress,
)
from retain.domain.constants import (
    DEFAULT_PROFILE_ID,
    QUICK_MAX_NEW,
    QUICK_MAX_REVIEW,
    RECENT_SESSIONS_LIMIT,
)
from retain.domain.errors import ValidationError
from retain.domain.session.models import StudyMode, StudyProgress, StudySession
from retain.domain.session.ports import SessionRepository
from retain.domain.srs.models import Card, RatingEvent, StudyQueueOptions
from retain.domain.srs.ports import CardRepository

logger = logging.getLogger(__name__)


def options_for_mode(
    mode: StudyMode, options: StudyQueueOptions, deck_size: int
) -> StudyQueueOptions:
    """
    Adjust queue limits for a study mode.

    - daily: the limits as given
    - application: the limits as given; an application id is required
    - quick: at most 3 new and 10 review cards
    - all-due: every due review, plus up to max_new new cards
    """
    mode = StudyMode(mode)
    if mode == StudyMode.QUICK:
        return replace(options, max_new=QUICK_MAX_NEW, max_review=QUICK_MAX_REVIEW)
    if mode == StudyMode.ALL_DUE:
        return replace(options, max_review=deck_size)
    if mode == StudyMode.APPLICATION and not options.application_id:
        raise ValidationError("Application mode needs an application id")
    return options


class StudyService:
    """Orchestrates a study session across the card and session repositories."""

    def __init__(self, cards: CardRepository, sessions: SessionRepository):
        self._cards = cards
        self._sessions = sessions
        self._deck = DeckService(cards)

    def start(
        self,
        mode: StudyMode,
        options: StudyQueueOptions,
        rng: random.Random,
        now: datetime,
    ) -> tuple[StudySession, list[Card]]:
        """Build the queue for `mode` and open a session sized to it."""
        cards = self._cards.load_cards()
        options = options_for_mode(mode, options, len(cards))
        queue = build_study_queue(cards, options, rng, now)
        session = start_session(
            mode,
            len(queue),
            now,
            application_id=options.application_id,
            profile_id=options.profile_id,
        )
        logger.info(f"Started {session.mode.value} session {session.id} with {len(queue)} cards")
        return session, queue

    def rate(
        self, session: StudySession, card_id: str, rating: int, now: datetime
    ) -> tuple[StudySession, Card]:
        """
        Record a rating in the session and reschedule the card.

        Raises:
            ValidationError: The rating is invalid. Nothing is saved.
            InvalidStateError: The session has already ended.
            CardNotFoundError: No card with this id exists.
        """
        updated = record_rating(session, rating)
        card = self._deck.review(RatingEvent(item_id=card_id, rating=rating, timestamp=now))
        return updated, card

    def finish(
        self, session: StudySession, now: datetime
    ) -> tuple[StudySession, StudyProgress]:
        """End the session and fold it into the profile's stored progress."""
        ended = end_session(session, now)
        profile_id = ended.profile_id or DEFAULT_PROFILE_ID

        study_dates = [
            s.started_at
            for s in self._sessions.load_sessions()
            if not s.is_active and s.profile_id == ended.profile_id
        ]
        progress = update_progress(self.progress(profile_id), ended, study_dates, now)

        self._sessions.save_session(ended)
        self._sessions.save_progress(progress)

        logger.info(
            f"Finished session {ended.id}: {ended.cards_reviewed}/{ended.total_cards} reviewed, "
            f"streak {progress.current_streak}"
        )
        return ended, progress

    def progress(self, profile_id: str | None = None) -> StudyProgress:
        key = profile_id or DEFAULT_PROFILE_ID
        return self._sessions.load_progress(key) or StudyProgress(profile_id=key)

    def recent_sessions(
        self, limit: int = RECENT_SESSIONS_LIMIT, profile_id: str | None = None
    ) -> list[StudySession]:
        sessions = self._sessions.load_sessions()
        if profile_id:
            sessions = [s for s in sessions if s.profile_id == profile_id]
        return sessions[: max(0, limit)]
