# Domain SRS Package
from .models import (
    Card,
    MasteryLevel,
    RatingEvent,
    ReviewEntry,
    SRSData,
    StreakResult,
    StudyQueueOptions,
    StudyStats,
)
from .ports import CardRepository

__all__ = [
    "Card",
    "CardRepository",
    "MasteryLevel",
    "RatingEvent",
    "ReviewEntry",
    "SRSData",
    "StreakResult",
    "StudyQueueOptions",
    "StudyStats",
]
