from datetime import datetime, timedelta, timezone

import pytest

from retain.domain.srs.models import Card, SRSData


@pytest.fixture
def now():
    """A fixed reference time so due checks never depend on the clock."""
    return datetime(2026, 3, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_srs(now):
    """Factory for SRSData due `due_in_days` from `now` (negative = overdue)."""

    def _make(
        repetition_count: int = 1,
        interval: int = 1,
        due_in_days: float = 1,
        easiness_factor: float = 2.5,
    ) -> SRSData:
        return SRSData(
            easiness_factor=easiness_factor,
            repetition_count=repetition_count,
            interval=interval,
            next_review_date=now + timedelta(days=due_in_days),
            last_review_date=now - timedelta(days=interval),
        )

    return _make


@pytest.fixture
def make_card():
    """Factory for cards; pass srs=None (default) for a new card."""

    def _make(card_id: str, srs: SRSData | None = None, **scope) -> Card:
        return Card(id=card_id, srs_data=srs, **scope)

    return _make


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir."""
    home = tmp_path / "home"
    home.mkdir()

    # Mocking HOME to a temp directory to isolate config/logs
    monkeypatch.setenv("HOME", str(home))
    return home
