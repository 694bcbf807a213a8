# Domain Session Package
from .models import StudyMode, StudyProgress, StudySession
from .ports import SessionRepository

__all__ = ["SessionRepository", "StudyMode", "StudyProgress", "StudySession"]
