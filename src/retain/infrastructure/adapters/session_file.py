"""
File Session Repository: session history and progress beside a deck file.

A deck `math.json` keeps its sessions in `math.sessions.json` (YAML decks
get a YAML file), as a document of the form:

    {"sessions": [...most recent first...], "progress": {profileId: {...}}}
"""

import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError as SchemaError

from retain.domain.session.models import StudyProgress, StudySession
from retain.domain.session.ports import SessionRepository
from retain.infrastructure.serialization import (
    dump_progress,
    dump_session,
    load_progress,
    load_session,
)

from ._document import DeckFileError, read_document, write_document

logger = logging.getLogger(__name__)


class FileSessionRepository(SessionRepository):
    def __init__(self, path: Path):
        self.path = Path(path)

    @classmethod
    def for_deck(cls, deck_path: Path) -> "FileSessionRepository":
        deck_path = Path(deck_path)
        return cls(deck_path.with_name(f"{deck_path.stem}.sessions{deck_path.suffix}"))

    def load_sessions(self) -> list[StudySession]:
        sessions = []
        for index, raw in enumerate(self._read_document()["sessions"]):
            try:
                sessions.append(load_session(raw))
            except SchemaError as e:
                raise DeckFileError(
                    f"{self.path}: invalid session at index {index}: {e}"
                ) from e
        return sessions

    def save_session(self, session: StudySession) -> None:
        document = self._read_document()
        records = [r for r in document["sessions"] if r.get("id") != session.id]
        document["sessions"] = [dump_session(session), *records]
        write_document(self.path, document)
        logger.debug(f"Saved session {session.id} to {self.path}")

    def load_progress(self, profile_id: str) -> StudyProgress | None:
        raw = self._read_document()["progress"].get(profile_id)
        if raw is None:
            return None
        try:
            return load_progress(raw)
        except SchemaError as e:
            raise DeckFileError(f"{self.path}: invalid progress for {profile_id!r}: {e}") from e

    def save_progress(self, progress: StudyProgress) -> None:
        document = self._read_document()
        document["progress"][progress.profile_id] = dump_progress(progress)
        write_document(self.path, document)

    def _read_document(self) -> dict[str, Any]:
        if not self.path.exists():
            return {"sessions": [], "progress": {}}
        document = read_document(self.path)
        if not isinstance(document.setdefault("sessions", []), list):
            raise DeckFileError(f"{self.path}: 'sessions' must be a list")
        if not isinstance(document.setdefault("progress", {}), dict):
            raise DeckFileError(f"{self.path}: 'progress' must be a mapping")
        return document
