# Infrastructure Adapters Package
from .deck_file import DeckFileError, FileDeckRepository
from .session_file import FileSessionRepository

__all__ = ["DeckFileError", "FileDeckRepository", "FileSessionRepository"]
