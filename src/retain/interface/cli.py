"""retain CLI: review cards, build study queues and inspect deck progress."""

import json
import logging
import random
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Annotated

import typer

from retain.application.due import days_until_review
from retain.application.mastery import classify
from retain.application.utils.text import format_interval
from retain.domain.constants import MAX_RATING, MIN_RATING, RECENT_SESSIONS_LIMIT
from retain.domain.session.models import StudyMode
from retain.domain.srs.models import Card, MasteryLevel, RatingEvent, StudyQueueOptions
from retain.infrastructure.serialization import dump_progress, dump_session
from retain.interface._common import (
    _deck_service,
    _parse_now,
    _reporting_errors,
    _resolve_with_overrides,
    _study_service,
)

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="retain: SM-2 spaced-repetition scheduler.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

config_app = typer.Typer(help="Manage retain configuration.")
app.add_typer(config_app, name="config")

DeckArg = Annotated[
    Path | None,
    typer.Argument(help="Path to a JSON or YAML deck file. Defaults to 'deck_path' in config."),
]
NowOpt = Annotated[
    str | None,
    typer.Option("--now", help="Reference time (ISO-8601). Defaults to the current time."),
]
JsonOpt = Annotated[bool, typer.Option("--json", help="Output as JSON.")]


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 1,
):
    """Global settings for retain."""
    if verbose >= 2:
        logging.getLogger("retain").setLevel(logging.DEBUG)


# ---------------------------------------------------------------------------
# Root commands
# ---------------------------------------------------------------------------


@app.command()
def review(
    card_id: Annotated[str, typer.Argument(help="ID of the card that was reviewed.")],
    rating: Annotated[int, typer.Argument(help="Recall quality, 0 (blackout) to 5 (perfect).")],
    deck: DeckArg = None,
    now: NowOpt = None,
):
    """[bold green]Record[/bold green] a review and reschedule the card."""
    config = _resolve_with_overrides(deck_path=deck)
    service = _deck_service(config)
    event = RatingEvent(item_id=card_id, rating=rating, timestamp=_parse_now(now))

    with _reporting_errors():
        card = service.review(event)

    srs = card.srs_data
    typer.echo(
        f"{card.id}: next review in {format_interval(srs.interval)} "
        f"({srs.next_review_date.isoformat()}), "
        f"EF {srs.easiness_factor:.2f}, {classify(srs).value}"
    )


@app.command("queue")
def queue(
    deck: DeckArg = None,
    max_new: Annotated[int | None, typer.Option(help="Maximum new cards.")] = None,
    max_review: Annotated[int | None, typer.Option(help="Maximum review cards.")] = None,
    profile: Annotated[str | None, typer.Option(help="Only cards for this profile.")] = None,
    application: Annotated[
        str | None, typer.Option(help="Only cards for this application.")
    ] = None,
    seed: Annotated[
        int | None, typer.Option(help="Seed for the new-card shuffle (reproducible queues).")
    ] = None,
    now: NowOpt = None,
    json_output: JsonOpt = False,
):
    """Build the study queue: due cards by priority, one new card after every five."""
    config = _resolve_with_overrides(
        deck_path=deck, max_new=max_new, max_review=max_review, seed=seed
    )
    service = _deck_service(config)
    reference = _parse_now(now)
    options = StudyQueueOptions(
        max_new=config.max_new,
        max_review=config.max_review,
        profile_id=profile,
        application_id=application,
    )
    rng = random.Random(config.seed)
    logger.debug(f"Building queue from {config.deck_path} (seed={config.seed})")

    with _reporting_errors():
        cards = service.queue(options, rng, reference)

    if json_output:
        typer.echo(
            json.dumps(
                [
                    {
                        "id": card.id,
                        "mastery": classify(card.srs_data).value,
                        "daysUntilReview": days_until_review(card.srs_data, reference),
                        "new": card.is_new,
                    }
                    for card in cards
                ],
                indent=2,
            )
        )
        return

    if not cards:
        typer.secho("Nothing to study.", fg="green")
        return

    for position, card in enumerate(cards, start=1):
        if card.is_new:
            typer.echo(f"{position:>3}. {card.id}  [new]")
        else:
            days = days_until_review(card.srs_data, reference)
            status = f"overdue {-days}d" if days < 0 else "due"
            typer.echo(f"{position:>3}. {card.id}  [{classify(card.srs_data).value}] {status}")


@app.command()
def stats(
    deck: DeckArg = None,
    profile: Annotated[str | None, typer.Option(help="Only cards for this profile.")] = None,
    application: Annotated[
        str | None, typer.Option(help="Only cards for this application.")
    ] = None,
    now: NowOpt = None,
    json_output: JsonOpt = False,
):
    """Show card counts per mastery level and due totals."""
    config = _resolve_with_overrides(deck_path=deck)
    service = _deck_service(config)
    options = StudyQueueOptions(profile_id=profile, application_id=application)

    with _reporting_errors():
        result = service.stats(_parse_now(now), options)

    if json_output:
        typer.echo(json.dumps(asdict(result), indent=2))
        return

    typer.echo(f"Total: {result.total}")
    typer.echo(
        f"  new: {result.new}  learning: {result.learning}"
        f"  reviewing: {result.reviewing}  mastered: {result.mastered}"
    )
    typer.echo(f"Due today: {result.due_today}")
    if result.overdue:
        typer.secho(f"Overdue: {result.overdue}", fg="yellow")
    else:
        typer.secho("Overdue: 0", fg="green")


@app.command()
def readiness(
    deck: DeckArg = None,
    profile: Annotated[str | None, typer.Option(help="Only cards for this profile.")] = None,
    application: Annotated[
        str | None, typer.Option(help="Only cards for this application.")
    ] = None,
    now: NowOpt = None,
):
    """Show the 0-100 readiness score for the deck."""
    config = _resolve_with_overrides(deck_path=deck)
    service = _deck_service(config)
    options = StudyQueueOptions(profile_id=profile, application_id=application)

    with _reporting_errors():
        value = service.readiness(_parse_now(now), options)

    typer.echo(f"Readiness: {value}/100")


@app.command()
def streak(
    deck: DeckArg = None,
    now: NowOpt = None,
    json_output: JsonOpt = False,
):
    """Show current and longest streak of consecutive study days."""
    config = _resolve_with_overrides(deck_path=deck)
    service = _deck_service(config)

    with _reporting_errors():
        result = service.streak(_parse_now(now))

    if json_output:
        typer.echo(json.dumps(asdict(result), indent=2))
        return

    typer.echo(f"Current streak: {result.current}  Longest: {result.longest}")


@app.command()
def mastery(
    deck: DeckArg = None,
    level: Annotated[
        MasteryLevel | None, typer.Option(help="Only list cards at this level.")
    ] = None,
):
    """List cards grouped by mastery level."""
    config = _resolve_with_overrides(deck_path=deck)
    service = _deck_service(config)

    with _reporting_errors():
        breakdown = service.mastery_breakdown()

    for current, cards in breakdown.items():
        if level is not None and current != level:
            continue
        typer.secho(f"{current.value} ({len(cards)})", bold=True)
        for card in cards:
            interval = card.srs_data.interval if card.srs_data else 0
            typer.echo(f"  {card.id}  interval {format_interval(interval)}")


# ---------------------------------------------------------------------------
# Study sessions
# ---------------------------------------------------------------------------


def _prompt_rating(position: int, total: int, card: Card) -> int | None:
    """Ask for a 0-5 rating; None means the user stopped the session."""
    label = "new" if card.is_new else classify(card.srs_data).value
    while True:
        answer = typer.prompt(f"[{position}/{total}] {card.id} ({label}) rating 0-5, q to stop")
        answer = answer.strip().lower()
        if answer == "q":
            return None
        if answer.isdigit() and MIN_RATING <= int(answer) <= MAX_RATING:
            return int(answer)
        typer.secho("Enter a rating from 0 to 5, or q to stop.", fg="yellow")


@app.command()
def study(
    deck: DeckArg = None,
    mode: Annotated[StudyMode, typer.Option(help="How to pick the cards.")] = StudyMode.DAILY,
    max_new: Annotated[int | None, typer.Option(help="Maximum new cards.")] = None,
    max_review: Annotated[int | None, typer.Option(help="Maximum review cards.")] = None,
    profile: Annotated[str | None, typer.Option(help="Only cards for this profile.")] = None,
    application: Annotated[
        str | None, typer.Option(help="Only cards for this application.")
    ] = None,
    seed: Annotated[int | None, typer.Option(help="Seed for the new-card shuffle.")] = None,
    now: NowOpt = None,
):
    """[bold green]Study[/bold green] the queue card by card and record the session."""
    config = _resolve_with_overrides(
        deck_path=deck, max_new=max_new, max_review=max_review, seed=seed
    )
    service = _study_service(config)
    options = StudyQueueOptions(
        max_new=config.max_new,
        max_review=config.max_review,
        profile_id=profile,
        application_id=application,
    )

    with _reporting_errors():
        session, cards = service.start(mode, options, random.Random(config.seed), _parse_now(now))

    if not cards:
        typer.secho("Nothing to study.", fg="green")
        return

    typer.echo(f"{session.mode.value} session: {len(cards)} cards")
    for position, card in enumerate(cards, start=1):
        rating = _prompt_rating(position, len(cards), card)
        if rating is None:
            break
        with _reporting_errors():
            session, card = service.rate(session, card.id, rating, _parse_now(now))
        typer.echo(f"  next review in {format_interval(card.srs_data.interval)}")

    with _reporting_errors():
        session, summary = service.finish(session, _parse_now(now))

    typer.secho(
        f"Reviewed {session.cards_reviewed}/{session.total_cards}, "
        f"average rating {session.average_rating:.2f}",
        bold=True,
    )
    typer.echo(f"Current streak: {summary.current_streak}  Longest: {summary.longest_streak}")


@app.command()
def progress(
    deck: DeckArg = None,
    profile: Annotated[str | None, typer.Option(help="Profile to show.")] = None,
    json_output: JsonOpt = False,
):
    """Show cumulative progress from recorded study sessions."""
    config = _resolve_with_overrides(deck_path=deck)
    service = _study_service(config)

    with _reporting_errors():
        result = service.progress(profile)

    if json_output:
        typer.echo(json.dumps(dump_progress(result), indent=2))
        return

    typer.echo(f"Sessions: {result.sessions_completed}  Reviews: {result.total_reviews}")
    typer.echo(f"Study time: {result.total_study_time_minutes} min")
    typer.echo(f"Average rating: {result.average_rating:.2f}")
    typer.echo(f"Current streak: {result.current_streak}  Longest: {result.longest_streak}")


@app.command()
def sessions(
    deck: DeckArg = None,
    limit: Annotated[int, typer.Option(help="How many sessions to list.")] = RECENT_SESSIONS_LIMIT,
    profile: Annotated[str | None, typer.Option(help="Only sessions for this profile.")] = None,
    json_output: JsonOpt = False,
):
    """List recent study sessions, newest first."""
    config = _resolve_with_overrides(deck_path=deck)
    service = _study_service(config)

    with _reporting_errors():
        recent = service.recent_sessions(limit, profile)

    if json_output:
        typer.echo(json.dumps([dump_session(s) for s in recent], indent=2))
        return

    if not recent:
        typer.echo("No sessions recorded.")
        return

    for s in recent:
        typer.echo(
            f"{s.started_at:%Y-%m-%d %H:%M}  {s.mode.value:<11} "
            f"{s.cards_reviewed}/{s.total_cards} reviewed  avg {s.average_rating:.2f}"
        )


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show():
    """Display final resolved configuration."""
    config = _resolve_with_overrides()
    d = {k: str(v) if isinstance(v, Path) else v for k, v in config.model_dump().items()}
    typer.echo(json.dumps(d, indent=2))
