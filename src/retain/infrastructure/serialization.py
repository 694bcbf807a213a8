"""
Persisted shape of cards and SRS state.

The storage contract uses camelCase keys and ISO-8601 timestamps:

    { easinessFactor, repetitionCount, interval, nextReviewDate,
      lastReviewDate | null, reviewHistory: [{date, rating, intervalAtReview}] }

These pydantic models validate that shape and convert to and from the frozen
domain dataclasses.

Study sessions and progress use the same camelCase convention; a session's
rating counts are stored as {"0": n, ..., "5": n}.
"""

from dataclasses import asdict
from datetime import datetime, timezone
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from retain.domain.constants import MAX_RATING, MIN_RATING
from retain.domain.session.models import StudyMode, StudyProgress, StudySession
from retain.domain.srs.models import Card, ReviewEntry, SRSData


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# Timestamps without an offset are read as UTC
UtcDatetime = Annotated[datetime, AfterValidator(_as_utc)]


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ReviewEntrySchema(_CamelModel):
    date: UtcDatetime
    rating: int = Field(ge=MIN_RATING, le=MAX_RATING)
    interval_at_review: int = Field(ge=0)

    def to_domain(self) -> ReviewEntry:
        return ReviewEntry(
            date=self.date,
            rating=self.rating,
            interval_at_review=self.interval_at_review,
        )


class SRSDataSchema(_CamelModel):
    easiness_factor: float
    repetition_count: int
    interval: int
    next_review_date: UtcDatetime
    last_review_date: UtcDatetime | None = None
    review_history: list[ReviewEntrySchema] = Field(default_factory=list)

    def to_domain(self) -> SRSData:
        return SRSData(
            easiness_factor=self.easiness_factor,
            repetition_count=self.repetition_count,
            interval=self.interval,
            next_review_date=self.next_review_date,
            last_review_date=self.last_review_date,
            review_history=tuple(e.to_domain() for e in self.review_history),
        )

    @classmethod
    def from_domain(cls, data: SRSData) -> "SRSDataSchema":
        return cls(
            easiness_factor=data.easiness_factor,
            repetition_count=data.repetition_count,
            interval=data.interval,
            next_review_date=data.next_review_date,
            last_review_date=data.last_review_date,
            review_history=[
                ReviewEntrySchema(
                    date=e.date, rating=e.rating, interval_at_review=e.interval_at_review
                )
                for e in data.review_history
            ],
        )


class CardSchema(_CamelModel):
    """A card record. Unknown keys (question text etc.) are kept as extras."""

    model_config = ConfigDict(extra="allow")

    id: str
    profile_id: str | None = None
    application_id: str | None = None
    srs_data: SRSDataSchema | None = None

    def to_domain(self) -> Card:
        return Card(
            id=self.id,
            srs_data=self.srs_data.to_domain() if self.srs_data else None,
            profile_id=self.profile_id,
            application_id=self.application_id,
        )


def dump_srs_data(data: SRSData | None) -> dict[str, Any] | None:
    """Serialize SRS state to its JSON-compatible storage form."""
    if data is None:
        return None
    return SRSDataSchema.from_domain(data).model_dump(mode="json", by_alias=True)


def load_srs_data(raw: dict[str, Any] | None) -> SRSData | None:
    if raw is None:
        return None
    return SRSDataSchema.model_validate(raw).to_domain()


def load_card(raw: dict[str, Any]) -> Card:
    return CardSchema.model_validate(raw).to_domain()


class StudySessionSchema(_CamelModel):
    id: str
    mode: StudyMode
    started_at: UtcDatetime
    ended_at: UtcDatetime | None = None
    total_cards: int = Field(ge=0)
    cards_reviewed: int = Field(default=0, ge=0)
    cards_remaining: int = Field(default=0, ge=0)
    ratings: dict[str, int] = Field(default_factory=dict)
    average_rating: float = 0.0
    application_id: str | None = None
    profile_id: str | None = None

    def to_domain(self) -> StudySession:
        return StudySession(
            id=self.id,
            mode=self.mode,
            started_at=self.started_at,
            total_cards=self.total_cards,
            cards_reviewed=self.cards_reviewed,
            cards_remaining=self.cards_remaining,
            ratings=tuple(
                self.ratings.get(str(r), 0) for r in range(MIN_RATING, MAX_RATING + 1)
            ),
            average_rating=self.average_rating,
            application_id=self.application_id,
            profile_id=self.profile_id,
            ended_at=self.ended_at,
        )

    @classmethod
    def from_domain(cls, session: StudySession) -> "StudySessionSchema":
        return cls(
            id=session.id,
            mode=session.mode,
            started_at=session.started_at,
            ended_at=session.ended_at,
            total_cards=session.total_cards,
            cards_reviewed=session.cards_reviewed,
            cards_remaining=session.cards_remaining,
            ratings={str(r): count for r, count in enumerate(session.ratings)},
            average_rating=session.average_rating,
            application_id=session.application_id,
            profile_id=session.profile_id,
        )


class StudyProgressSchema(_CamelModel):
    profile_id: str
    current_streak: int = Field(default=0, ge=0)
    longest_streak: int = Field(default=0, ge=0)
    last_study_date: UtcDatetime | None = None
    total_cards_studied: int = Field(default=0, ge=0)
    total_reviews: int = Field(default=0, ge=0)
    sessions_completed: int = Field(default=0, ge=0)
    total_study_time_minutes: int = Field(default=0, ge=0)
    average_rating: float = 0.0
    updated_at: UtcDatetime | None = None

    def to_domain(self) -> StudyProgress:
        return StudyProgress(**dict(self))

    @classmethod
    def from_domain(cls, progress: StudyProgress) -> "StudyProgressSchema":
        return cls(**asdict(progress))


def dump_session(session: StudySession) -> dict[str, Any]:
    return StudySessionSchema.from_domain(session).model_dump(mode="json", by_alias=True)


def load_session(raw: dict[str, Any]) -> StudySession:
    return StudySessionSchema.model_validate(raw).to_domain()


def dump_progress(progress: StudyProgress) -> dict[str, Any]:
    return StudyProgressSchema.from_domain(progress).model_dump(mode="json", by_alias=True)


def load_progress(raw: dict[str, Any]) -> StudyProgress:
    return StudyProgressSchema.model_validate(raw).to_domain()
