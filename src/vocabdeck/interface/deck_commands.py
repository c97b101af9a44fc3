"""Deck and card management subcommands: `vocabdeck decks ...` and `vocabdeck cards ...`."""

import json
from pathlib import Path
from typing import Annotated

import typer

from vocabdeck.application import deck_service
from vocabdeck.application.id_service import assign_card_ids
from vocabdeck.domain.errors import CardValidationError, DeckFormatError
from vocabdeck.infrastructure.deck_io import ExportFormat, detect_format, parse_deck_text, write_deck_file
from vocabdeck.interface._common import _open_repository, _read_text, _require_deck

decks_app = typer.Typer(help="Create, switch, import and export decks.", no_args_is_help=True)
cards_app = typer.Typer(help="Add, edit and import cards.", no_args_is_help=True)

DeckOption = Annotated[
    str | None, typer.Option("--deck", "-d", help="Deck name. Defaults to the current deck.")
]


# ---------------------------------------------------------------------------
# Decks
# ---------------------------------------------------------------------------


@decks_app.command("list")
def decks_list(
    ctx: typer.Context,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """List all decks. The current deck is marked with '*'."""
    _, repo = _open_repository(ctx)
    names = repo.list_names()
    current = repo.get_current()

    if json_output:
        typer.echo(json.dumps({"current": current, "decks": names}, indent=2))
        return

    if not names:
        typer.secho("(No decks yet, create or import one)", fg="yellow")
        return
    for name in names:
        marker = "*" if name == current else " "
        typer.echo(f"{marker} {name}")


@decks_app.command("new")
def decks_new(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Name of the new deck.")],
    mode: Annotated[
        str | None, typer.Option(help="Learning mode: simple or spaced.")
    ] = None,
    limit: Annotated[int | None, typer.Option(help="Cards per day.")] = None,
):
    """Create an empty deck and make it current."""
    config, repo = _open_repository(ctx)
    if name.strip() in repo.list_names():
        typer.secho(f"A deck named '{name}' already exists.", fg="red")
        raise typer.Exit(1)

    try:
        deck = deck_service.create_empty_deck(
            name,
            daily_limit=deck_service.clamp_daily_limit(limit or config.default_daily_limit),
            learning_mode=mode or config.default_learning_mode,
        )
    except ValueError as e:
        typer.secho(str(e), fg="red")
        raise typer.Exit(1)

    repo.save(deck)
    repo.set_current(deck.name)
    typer.secho(f"Deck '{deck.name}' created.", fg="green")


@decks_app.command("use")
def decks_use(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Deck to open.")],
):
    """Switch the current deck."""
    _, repo = _open_repository(ctx)
    deck = _require_deck(repo, name)
    repo.set_current(deck.name)
    typer.echo(f"Current deck: {deck.name}")


@decks_app.command("delete")
def decks_delete(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Deck to delete.")],
    force: Annotated[bool, typer.Option("--force", "-f", help="Skip confirmation.")] = False,
):
    """Delete a deck permanently."""
    _, repo = _open_repository(ctx)
    if name not in repo.list_names():
        typer.secho(f"Deck '{name}' not found.", fg="red")
        raise typer.Exit(1)

    if not force and not typer.confirm(f"Delete deck '{name}'?"):
        raise typer.Abort()

    repo.delete(name)
    typer.echo(f"Deck '{name}' deleted.")


@decks_app.command("import")
def decks_import(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="A .json, .yaml or .txt deck file.")],
):
    """Import a deck file. Name clashes get ' (imported)' appended."""
    _, repo = _open_repository(ctx)
    text = _read_text(path)
    existing = repo.list_names()

    try:
        fmt = detect_format(path)
        if fmt == "txt":
            deck, skipped = deck_service.deck_from_text(path, text, existing)
            if not deck.cards:
                typer.secho(
                    'No valid cards found. Use "Word - Translation" or tab-separated (Anki) format.',
                    fg="red",
                )
                raise typer.Exit(1)
        else:
            deck = parse_deck_text(text, fmt)
            deck.name = deck_service.unique_deck_name(deck.name, existing)
            assign_card_ids(deck)
            skipped = 0
    except DeckFormatError as e:
        typer.secho(str(e), fg="red")
        raise typer.Exit(1)

    repo.save(deck)
    msg = f"Deck '{deck.name}' imported ({len(deck.cards)} cards)."
    if skipped:
        msg += f" {skipped} line(s) skipped."
    typer.secho(msg, fg="green")


@decks_app.command("export")
def decks_export(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="Destination file.")],
    deck_name: DeckOption = None,
    fmt: Annotated[
        str | None,
        typer.Option("--format", help="json, yaml or txt. Defaults to the file suffix."),
    ] = None,
):
    """Export a deck with its progress (json/yaml) or as plain card lines (txt)."""
    _, repo = _open_repository(ctx)
    deck = _require_deck(repo, deck_name)

    try:
        export_fmt: ExportFormat = fmt or detect_format(path)  # type: ignore[assignment]
        if export_fmt not in ("json", "yaml", "txt"):
            raise DeckFormatError(f"Unsupported export format: '{export_fmt}'")
    except DeckFormatError as e:
        typer.secho(str(e), fg="red")
        raise typer.Exit(1)

    write_deck_file(deck, path, export_fmt)
    typer.secho(f"Deck '{deck.name}' exported to {path}.", fg="green")


# ---------------------------------------------------------------------------
# Cards
# ---------------------------------------------------------------------------


@cards_app.command("list")
def cards_list(
    ctx: typer.Context,
    deck_name: DeckOption = None,
    search: Annotated[
        str | None, typer.Option("--search", "-s", help="Filter by word or translation.")
    ] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """List the cards in a deck."""
    _, repo = _open_repository(ctx)
    deck = _require_deck(repo, deck_name)

    cards = deck.cards
    if search:
        needle = search.lower()
        cards = [c for c in cards if needle in c.word.lower() or needle in c.translation.lower()]

    if json_output:
        typer.echo(
            json.dumps(
                [
                    {
                        "id": c.id,
                        "word": c.word,
                        "translation": c.translation,
                        "status": c.session_status.value,
                        "due": c.due_date.isoformat() if c.due_date else None,
                        "interval": c.interval,
                        "ease": c.ease_factor,
                    }
                    for c in cards
                ],
                indent=2,
                ensure_ascii=False,
            )
        )
        return

    for c in cards:
        due = c.due_date.isoformat() if c.due_date else "-"
        typer.echo(f"{c.id}  {c.word} = {c.translation}  [{c.session_status.value}, due {due}]")
    typer.echo(f"{len(cards)} card(s)")


@cards_app.command("add")
def cards_add(
    ctx: typer.Context,
    word: Annotated[str, typer.Argument(help="Front side.")],
    translation: Annotated[str, typer.Argument(help="Back side.")],
    deck_name: DeckOption = None,
):
    """Add a card."""
    _, repo = _open_repository(ctx)
    deck = _require_deck(repo, deck_name)
    try:
        card = deck_service.add_card(deck, word, translation)
    except CardValidationError as e:
        typer.secho(str(e), fg="red")
        raise typer.Exit(1)
    repo.save(deck)
    typer.secho(f"Card added ({card.id}).", fg="green")


@cards_app.command("edit")
def cards_edit(
    ctx: typer.Context,
    card_id: Annotated[str, typer.Argument(help="ID shown by 'cards list'.")],
    word: Annotated[str, typer.Argument(help="New front side.")],
    translation: Annotated[str, typer.Argument(help="New back side.")],
    deck_name: DeckOption = None,
):
    """Change a card's text. Its progress is kept."""
    _, repo = _open_repository(ctx)
    deck = _require_deck(repo, deck_name)
    try:
        card = deck_service.edit_card(deck, card_id, word, translation)
    except CardValidationError as e:
        typer.secho(str(e), fg="red")
        raise typer.Exit(1)
    if card is None:
        typer.secho(f"Card '{card_id}' not found.", fg="red")
        raise typer.Exit(1)
    repo.save(deck)
    typer.echo("Card updated.")


@cards_app.command("remove")
def cards_remove(
    ctx: typer.Context,
    card_id: Annotated[str, typer.Argument(help="ID shown by 'cards list'.")],
    deck_name: DeckOption = None,
):
    """Delete a card."""
    _, repo = _open_repository(ctx)
    deck = _require_deck(repo, deck_name)
    if not deck_service.delete_card(deck, card_id):
        typer.secho(f"Card '{card_id}' not found.", fg="red")
        raise typer.Exit(1)
    repo.save(deck)
    typer.echo("Card deleted.")


@cards_app.command("import")
def cards_import(
    ctx: typer.Context,
    path: Annotated[
        Path | None, typer.Argument(help="Text file. Reads stdin when omitted.")
    ] = None,
    deck_name: DeckOption = None,
):
    """Append cards from 'Word - Translation' or tab-separated lines."""
    _, repo = _open_repository(ctx)
    deck = _require_deck(repo, deck_name)

    text = _read_text(path) if path else typer.get_text_stream("stdin").read()
    if not text.strip():
        typer.secho("Please enter cards to import.", fg="yellow")
        raise typer.Exit(1)

    added, skipped = deck_service.import_cards_from_text(deck, text)
    repo.save(deck)

    msg = f"{added} card(s) imported."
    if skipped:
        msg += f' {skipped} line(s) skipped (use "Word - Translation" or tab-separated format).'
    typer.secho(msg, fg="green" if added else "yellow")
