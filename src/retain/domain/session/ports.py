"""
Ports (interfaces) for study session history.

Sessions are append-only records of finished sittings; progress is one
cumulative record per profile.
"""

from abc import ABC, abstractmethod

from .models import StudyProgress, StudySession


class SessionRepository(ABC):
    """
    Port for session history and per-profile progress.

    Implementations:
        - FileSessionRepository: A JSON or YAML file stored next to the deck.
    """

    @abstractmethod
    def load_sessions(self) -> list[StudySession]:
        """
        Load recorded sessions.

        Returns:
            Sessions, most recently saved first.
        """
        pass

    @abstractmethod
    def save_session(self, session: StudySession) -> None:
        """Record a session, replacing any earlier record with the same id."""
        pass

    @abstractmethod
    def load_progress(self, profile_id: str) -> StudyProgress | None:
        """Return stored progress for the profile, or None if it has none yet."""
        pass

    @abstractmethod
    def save_progress(self, progress: StudyProgress) -> None:
        pass
