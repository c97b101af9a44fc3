"""vocabdeck CLI: root commands and subgroup registration."""

import json
import logging
import sys
from dataclasses import asdict
from datetime import date
from pathlib import Path
from typing import Annotated

import typer

from vocabdeck.application import deck_service
from vocabdeck.application.config import resolve_config
from vocabdeck.application.session import ReviewSession
from vocabdeck.application.stats import get_deck_stats
from vocabdeck.domain.models import Deck, LearningMode
from vocabdeck.domain.ports import DeckRepository
from vocabdeck.interface._common import _make_rng, _open_repository, _require_deck

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="vocabdeck: daily word/translation review with spaced repetition.",
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

# ---------------------------------------------------------------------------
# Register subgroups
# ---------------------------------------------------------------------------

from vocabdeck.interface.deck_commands import cards_app, decks_app  # noqa: E402

app.add_typer(decks_app, name="decks")
app.add_typer(cards_app, name="cards")

config_app = typer.Typer(help="Manage vocabdeck configuration.")
app.add_typer(config_app, name="config")

DeckOption = Annotated[
    str | None, typer.Option("--deck", "-d", help="Deck name. Defaults to the current deck.")
]

# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    ctx: typer.Context,
    data_dir: Annotated[
        Path | None, typer.Option("--data-dir", help="Where decks are stored.")
    ] = None,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 0,
):
    """Global settings for vocabdeck."""
    ctx.ensure_object(dict)
    overrides: dict = {"data_dir": data_dir}
    if verbose:
        overrides["verbose"] = verbose + 1
    ctx.obj["overrides"] = overrides


# ---------------------------------------------------------------------------
# Rendering helpers
# ---------------------------------------------------------------------------


def _stats_line(deck: Deck) -> str:
    stats = get_deck_stats(deck, date.today())
    if stats.mode == LearningMode.SPACED:
        return f"Due: {stats.due}  Upcoming: {stats.upcoming}  Total: {stats.total}"
    return f"To review: {stats.to_review}  Finished: {stats.finished}  Total: {stats.total}"


def _rating_keys(session: ReviewSession) -> dict[str, str]:
    """Map '1', '2', ... and the rating names themselves to ratings."""
    keys: dict[str, str] = {}
    for i, rating in enumerate(session.strategy.ratings, start=1):
        keys[str(i)] = rating
        keys[rating] = rating
        keys.setdefault(rating[0], rating)
    return keys


def _run_review(session: ReviewSession, repo: DeckRepository) -> None:
    deck = session.deck
    keys = _rating_keys(session)
    menu = "  ".join(f"[{i}] {r}" for i, r in enumerate(session.strategy.ratings, start=1))
    menu += "  [u] undo  [q] quit"

    while not session.is_complete():
        card = session.current_card()
        progress = session.progress()
        typer.echo("")
        typer.secho(f"({progress.current + 1}/{progress.total})  {card.word}", bold=True)
        typer.prompt("Press Enter to reveal", default="", show_default=False)
        typer.secho(f"  {card.translation}", fg="cyan")

        while True:
            choice = typer.prompt(menu).strip().lower()
            if choice == "q":
                repo.save(deck)
                typer.echo("Progress saved.")
                return
            if choice == "u":
                if session.rewind():
                    repo.save(deck)
                    typer.secho("Last rating undone.", fg="yellow")
                    break
                typer.secho("Nothing to undo.", fg="yellow")
                continue
            if choice in keys:
                session.rate_card(keys[choice])
                repo.save(deck)
                break
            typer.secho(f"Unknown choice '{choice}'.", fg="red")

    typer.echo("")
    typer.secho("Session complete!", fg="green", bold=True)
    typer.echo(_stats_line(deck))
    typer.echo("Run 'vocabdeck extend' to study more today.")


# ---------------------------------------------------------------------------
# Root commands
# ---------------------------------------------------------------------------


@app.command()
def review(
    ctx: typer.Context,
    deck_name: DeckOption = None,
    seed: Annotated[int | None, typer.Option(help="Fixed shuffle seed.")] = None,
):
    """[bold green]Review[/bold green] today's cards."""
    config, repo = _open_repository(ctx)
    if seed is not None:
        config.seed = seed
    deck = _require_deck(repo, deck_name)

    session = ReviewSession(deck, rng=_make_rng(config))
    session.build()
    repo.save(deck)  # day reset may have changed counters

    if session.is_complete():
        typer.secho("Nothing to review right now.", fg="yellow")
        typer.echo(_stats_line(deck))
        return

    typer.echo(f"Deck: {deck.name} ({deck.learning_mode.value} mode)")
    _run_review(session, repo)


@app.command()
def stats(
    ctx: typer.Context,
    deck_name: DeckOption = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Show deck statistics."""
    _, repo = _open_repository(ctx)
    deck = _require_deck(repo, deck_name)

    if json_output:
        data = asdict(get_deck_stats(deck, date.today()))
        data["mode"] = deck.learning_mode.value
        data = {k: v for k, v in data.items() if v is not None}
        data["deck"] = deck.name
        typer.echo(json.dumps(data, indent=2))
        return

    typer.echo(f"{deck.name} ({deck.learning_mode.value} mode, {deck.daily_limit}/day)")
    typer.echo(_stats_line(deck))


@app.command()
def extend(
    ctx: typer.Context,
    amount: Annotated[
        int | None, typer.Argument(help="Extra cards for today. Defaults to config.")
    ] = None,
    deck_name: DeckOption = None,
):
    """Allow more reviews today without changing the daily limit."""
    config, repo = _open_repository(ctx)
    deck = _require_deck(repo, deck_name)

    amount = amount if amount is not None else config.default_extend_amount
    session = ReviewSession(deck, rng=_make_rng(config))
    result = session.extend(amount)
    repo.save(deck)

    typer.secho(f"Session extended by {max(1, amount)} card(s).", fg="green")
    typer.echo(f"{len(result.queue)} card(s) available now.")


@app.command()
def settings(
    ctx: typer.Context,
    deck_name: DeckOption = None,
    mode: Annotated[
        LearningMode | None, typer.Option(help="Learning mode.", case_sensitive=False)
    ] = None,
    limit: Annotated[int | None, typer.Option(help="Cards per day (1-500).")] = None,
):
    """Show or change a deck's learning mode and daily limit."""
    _, repo = _open_repository(ctx)
    deck = _require_deck(repo, deck_name)

    if mode is not None or limit is not None:
        deck_service.update_settings(deck, learning_mode=mode, daily_limit=limit)
        repo.save(deck)
        typer.secho("Settings saved.", fg="green")

    typer.echo(f"Mode: {deck.learning_mode.value}")
    typer.echo(f"Daily limit: {deck.daily_limit}")
    typer.echo(f"Reviewed today: {deck.cards_reviewed_today} (+{deck.session_extension} extension)")


@app.command()
def reset(
    ctx: typer.Context,
    deck_name: DeckOption = None,
    force: Annotated[bool, typer.Option("--force", "-f", help="Skip confirmation.")] = False,
):
    """Reset every card back to 'To Review', clearing all progress."""
    _, repo = _open_repository(ctx)
    deck = _require_deck(repo, deck_name)

    if not force and not typer.confirm(
        f"Reset all {len(deck.cards)} cards in '{deck.name}'? This clears all progress."
    ):
        raise typer.Abort()

    deck_service.reset_progress(deck)
    repo.save(deck)
    typer.secho(f"All cards in '{deck.name}' reset to 'To Review'.", fg="green")


@app.command()
def serve(
    port: Annotated[int, typer.Option(help="Port to bind the server to.")] = 8777,
    host: Annotated[str, typer.Option(help="Host to bind the server to.")] = "127.0.0.1",
    reload: Annotated[bool, typer.Option(help="Enable auto-reload.")] = False,
):
    """Run the HTTP review API."""
    import uvicorn

    uvicorn.run("vocabdeck.server:app", host=host, port=port, reload=reload)


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show(ctx: typer.Context):
    """Display final resolved configuration."""
    overrides = (ctx.obj or {}).get("overrides", {})
    config = resolve_config(overrides)
    d = {k: str(v) if isinstance(v, Path) else v for k, v in config.model_dump().items()}
    typer.echo(json.dumps(d, indent=2))
