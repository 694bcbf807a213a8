"""Helpers shared by CLI commands."""

import tomllib
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import typer
from pydantic import ValidationError as SchemaError

from retain.application.config import AppConfig, resolve_config
from retain.application.deck_service import DeckService
from retain.application.study_service import StudyService
from retain.domain.errors import CardNotFoundError, SchedulingError
from retain.infrastructure.adapters.deck_file import DeckFileError, FileDeckRepository
from retain.infrastructure.adapters.session_file import FileSessionRepository


def _resolve_with_overrides(**overrides: Any) -> AppConfig:
    """Resolve config, letting non-None CLI values win."""
    try:
        return resolve_config(overrides)
    except (SchemaError, tomllib.TOMLDecodeError) as e:
        typer.secho(f"Invalid configuration: {e}", fg="red", err=True)
        raise typer.Exit(2) from e


def _parse_now(value: str | None) -> datetime:
    """Parse --now as ISO-8601; default to the current UTC time."""
    if value is None:
        return datetime.now(timezone.utc)
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as e:
        raise typer.BadParameter(f"Not an ISO-8601 timestamp: {value}") from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _require_deck(config: AppConfig) -> Path:
    if config.deck_path is None:
        typer.secho(
            "No deck given. Pass a deck path or set 'deck_path' in config.",
            fg="red",
            err=True,
        )
        raise typer.Exit(2)
    return Path(config.deck_path)


def _deck_service(config: AppConfig) -> DeckService:
    return DeckService(FileDeckRepository(_require_deck(config)))


def _study_service(config: AppConfig) -> StudyService:
    deck_path = _require_deck(config)
    return StudyService(
        FileDeckRepository(deck_path), FileSessionRepository.for_deck(deck_path)
    )


@contextmanager
def _reporting_errors():
    """Turn domain and storage errors into a red message plus exit code."""
    try:
        yield
    except SchedulingError as e:
        typer.secho(f"Rejected: {e}", fg="red", err=True)
        raise typer.Exit(2) from e
    except (CardNotFoundError, DeckFileError) as e:
        typer.secho(str(e), fg="red", err=True)
        raise typer.Exit(1) from e
