"""tango CLI: deck listing, interactive study runs, stats and maintenance."""

import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Annotated

import typer

from tango.application.config import AppConfig, resolve_config
from tango.application.decks import build_deck_options
from tango.application.session import StudySession
from tango.domain.errors import DeckLoadError, DeckValidationError
from tango.domain.models import CardItem

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="tango: adaptive Japanese vocabulary flashcards.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(help="Manage tango configuration.")
app.add_typer(config_app, name="config")

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

STUDY_KEYS = (
    "[Enter/e] known  [f] unknown  [s] flip  [d] difficult  [x] reshuffle  [r] restart  [q] quit"
)


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 0,
    decks_dir: Annotated[
        Path | None, typer.Option(help="Directory holding *.json decks.")
    ] = None,
    data_file: Annotated[
        Path | None, typer.Option(help="File that stores card statistics.")
    ] = None,
):
    """Global settings for tango."""
    ctx.ensure_object(dict)
    ctx.obj["overrides"] = {"decks_dir": decks_dir, "data_file": data_file}
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)


def _config(ctx: typer.Context, **overrides) -> AppConfig:
    merged = dict((ctx.obj or {}).get("overrides", {}))
    merged.update(overrides)
    return resolve_config(merged)


def _session(config: AppConfig) -> StudySession:
    from tango.application.factory import get_card_data, get_deck_source

    return StudySession(
        get_card_data(config),
        get_deck_source(config),
        random_count=config.random_count,
        prioritize_difficult=config.prioritize_difficult,
    )


# ---------------------------------------------------------------------------
# Interactive study loop
# ---------------------------------------------------------------------------


def _render_card(card: CardItem, front_field: str, flipped: bool, session: StudySession) -> None:
    counts = session.current_counts()
    flag = " [difficult]" if session.current_is_difficult() else ""
    typer.echo("")
    typer.secho(
        f"{session.remaining} left  |  ✓ {counts.success}  ✗ {counts.failure}{flag}", fg="cyan"
    )
    typer.secho(getattr(card, front_field) or "(blank)", bold=True)
    if flipped:
        typer.echo(f"  {card.japanese}  【{card.hiragana}】")
        typer.echo(f"  {card.english}")
        if card.japanese_example:
            typer.echo(f"  {card.japanese_example}")
        if card.english_example:
            typer.echo(f"  {card.english_example}")


def run_study_loop(session: StudySession, front_field: str) -> None:
    typer.echo(STUDY_KEYS)
    while True:
        card = session.current
        if card is None:
            typer.secho("Deck complete!", fg="green")
            choice = typer.prompt("[Enter/r] restart  [q] quit", default="", show_default=False)
            if choice.strip().lower() == "q":
                return
            session.restart()
            if session.current is None:
                return
            continue

        _render_card(card, front_field, session.flipped, session)
        choice = typer.prompt(">", default="", show_default=False).strip().lower()

        if choice in ("", "e"):
            session.mark_known()
        elif choice == "f":
            session.mark_unknown()
        elif choice == "s":
            session.flip()
        elif choice == "d":
            state = session.toggle_difficult()
            typer.echo("Marked difficult." if state else "Unmarked difficult.")
        elif choice == "x":
            session.reshuffle()
            typer.echo("Reshuffled.")
        elif choice == "r":
            session.restart()
        elif choice == "q":
            return
        else:
            typer.echo(STUDY_KEYS)


def _fail(message: str) -> None:
    typer.secho(message, fg="red", err=True)
    raise typer.Exit(1)


# ---------------------------------------------------------------------------
# Root commands
# ---------------------------------------------------------------------------


@app.command()
def decks(ctx: typer.Context):
    """List available decks with their card counts."""
    from tango.application.factory import get_deck_source

    source = get_deck_source(_config(ctx))
    options = build_deck_options(source)
    if not options:
        typer.secho(f"No decks found in {source.decks_dir}", fg="yellow")
        return
    for option in options:
        try:
            count = str(len(source.load_deck(option.key)))
        except DeckLoadError:
            count = "unreadable"
        typer.echo(f"{option.key}\t{option.name}\t{count}")


@app.command()
def study(
    ctx: typer.Context,
    deck: Annotated[str, typer.Argument(help="Deck key, e.g. n5_verbs.json.")],
    front: Annotated[
        str | None, typer.Option(help="Field shown on the front: japanese or english.")
    ] = None,
):
    """[bold green]Study[/bold green] one deck in shuffled order."""
    config = _config(ctx, front_field=front)
    session = _session(config)
    try:
        session.select_deck(deck)
    except DeckValidationError as e:
        _fail(str(e))
    if session.current is None:
        _fail(f"Deck {deck!r} is empty or could not be loaded.")
    run_study_loop(session, config.front_field)


@app.command("random")
def random_run(
    ctx: typer.Context,
    count: Annotated[int | None, typer.Option("--count", "-n", help="Cards in the run.")] = None,
    prioritize_difficult: Annotated[
        bool | None,
        typer.Option(
            "--prioritize-difficult/--no-prioritize-difficult",
            help="Put cards flagged difficult first.",
        ),
    ] = None,
    front: Annotated[
        str | None, typer.Option(help="Field shown on the front: japanese or english.")
    ] = None,
):
    """Study an adaptive sample drawn from every deck."""
    config = _config(
        ctx,
        random_count=count,
        prioritize_difficult=prioritize_difficult,
        front_field=front,
    )
    session = _session(config)
    try:
        session.start_random()
    except DeckValidationError as e:
        _fail(str(e))
    if session.current is None:
        _fail("No cards available for a random run.")
    run_study_loop(session, config.front_field)


@app.command()
def stats(
    ctx: typer.Context,
    deck: Annotated[str | None, typer.Option(help="Only cards of this deck.")] = None,
    difficult_only: Annotated[
        bool, typer.Option("--difficult-only", help="Only cards flagged difficult.")
    ] = False,
    limit: Annotated[int | None, typer.Option(help="Show at most this many cards.")] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Output JSON.")] = False,
):
    """Show cards ranked from weakest to strongest."""
    from tango.application.factory import get_card_data, get_deck_source
    from tango.application.stats_report import build_stats_report, summarize

    config = _config(ctx)
    source = get_deck_source(config)
    keys = [deck] if deck else source.list_decks()

    cards: dict[str, CardItem] = {}
    for key in keys:
        try:
            for card in source.load_deck(key):
                cards.setdefault(card.id, card)
        except DeckLoadError as e:
            if deck:
                _fail(str(e))
            logger.warning(f"Skipping deck {key}: {e}")

    records = get_card_data(config).get_all_records()
    rows = build_stats_report(
        list(cards.values()), records, difficult_only=difficult_only, limit=limit
    )
    summary = summarize(rows)

    if as_json:
        payload = {
            "summary": asdict(summary),
            "cards": [
                {
                    "id": row.card.id,
                    "japanese": row.card.japanese,
                    "english": row.card.english,
                    "success": row.success,
                    "failure": row.failure,
                    "difficult": row.difficult,
                    "failure_ratio": row.failure_ratio,
                }
                for row in rows
            ],
        }
        typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))
        return

    for row in rows:
        flag = "*" if row.difficult else " "
        typer.echo(
            f"{flag} {row.failure_ratio:5.0%}  ✓{row.success:<4} ✗{row.failure:<4} "
            f"{row.card.id}  {row.card.japanese}  {row.card.english}"
        )
    typer.secho(
        f"{summary.cards} cards, {summary.attempted} attempted, "
        f"{summary.difficult} difficult, failure ratio {summary.failure_ratio:.0%}",
        fg="cyan",
    )


@app.command()
def flag(
    ctx: typer.Context,
    card_id: Annotated[str, typer.Argument(help="Card id to toggle.")],
):
    """Toggle the difficult flag of a card."""
    from tango.application.factory import get_card_data

    state = get_card_data(_config(ctx)).toggle_difficult(card_id)
    typer.echo(f"{card_id}: {'difficult' if state else 'not difficult'}")


@app.command("assign-ids")
def assign_ids(
    ctx: typer.Context,
    dry_run: Annotated[
        bool, typer.Option("--dry-run", help="Report without rewriting deck files.")
    ] = False,
):
    """Give every card in every deck a unique, stable id."""
    from tango.application.id_service import assign_card_ids

    config = _config(ctx)
    try:
        count = assign_card_ids(config.decks_dir, dry_run=dry_run)
    except DeckLoadError as e:
        _fail(str(e))
    verb = "Would assign" if dry_run else "Assigned"
    typer.echo(f"{verb} {count} ids.")


@app.command()
def server(
    ctx: typer.Context,
    host: Annotated[str | None, typer.Option(help="Bind address.")] = None,
    port: Annotated[int | None, typer.Option(help="Port.")] = None,
):
    """Serve decks and card data over HTTP."""
    import uvicorn

    from tango.server import app as server_app

    config = _config(ctx, host=host, port=port)
    server_app.state.config = config
    uvicorn.run(server_app, host=config.host, port=config.port)


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show(ctx: typer.Context):
    """Display final resolved configuration."""
    config = _config(ctx)
    d = {k: str(v) if isinstance(v, Path) else v for k, v in config.model_dump().items()}
    typer.echo(json.dumps(d, indent=2))
