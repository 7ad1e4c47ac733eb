"""CLI for Song Ranker."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Annotated

import structlog
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from songrank import __version__
from songrank.core.config import SessionConfig, load_config
from songrank.core.errors import ConfigurationError, RankingError
from songrank.models import Song
from songrank.services.ranking_service import RankingService
from songrank.services.storage import SessionStore
from songrank.session import RankingEngine

# Configure structlog
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

app = typer.Typer(
    name="songrank",
    help="Song Ranker - rank songs through pairwise choices",
    add_completion=False,
)
console = Console()

HELP_TEXT = (
    "[dim]1/2 vote · l N lock/unlock position N · m A B move A to B · "
    "s A B swap · r show ranking · q quit[/dim]"
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"songrank v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option("--version", "-v", callback=version_callback, is_eager=True),
    ] = None,
) -> None:
    """Song Ranker CLI."""


def _configure_logging(verbose: bool) -> None:
    log_level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
        force=True,
    )


def build_ranking_table(engine: RankingEngine, title: str = "Ranking") -> Table:
    """Render the displayed ranking as a rich table."""
    table = Table(title=title)
    table.add_column("#", justify="right")
    table.add_column("Song")
    table.add_column("Artist", style="dim")
    table.add_column("Score", justify="right")
    table.add_column("Lock", justify="center")
    for i, item in enumerate(engine.ranking_list(), 1):
        style = "bold green" if i == 1 else None
        table.add_row(
            str(i),
            item.song.name or item.song.id,
            item.song.artist,
            f"{item.score:.3f}",
            "🔒" if engine.is_locked(item.song.id) else "",
            style=style,
        )
    return table


def _print_progress(engine: RankingEngine) -> None:
    p = engine.progress()
    console.print(
        f"[bold]Matchups[/bold] {p.completed}/{p.total} "
        f"([cyan]{p.fraction:.0%}[/cyan], {p.remaining} remaining)"
    )


def parse_positions(args: list[str], count: int) -> list[int] | None:
    """Parse 1-based positions into 0-based indices; None if malformed."""
    if len(args) != count:
        return None
    try:
        return [int(a) - 1 for a in args]
    except ValueError:
        return None


def _handle_edit(engine: RankingEngine, command: str, args: list[str]) -> None:
    """Apply a lock, move or swap command typed at the prompt."""
    if command == "l":
        positions = parse_positions(args, 1)
        ranking = engine.ranking_list()
        if positions is None or not 0 <= positions[0] < len(ranking):
            console.print("[red]Usage:[/red] l N  (N is a displayed position)")
            return
        song = ranking[positions[0]].song
        engine.toggle_lock(song.id)
        state = "locked" if engine.is_locked(song.id) else "unlocked"
        console.print(f"{song.label} {state}")
    elif command == "m":
        positions = parse_positions(args, 2)
        if positions is None:
            console.print("[red]Usage:[/red] m FROM TO")
            return
        if not engine.can_reorder(*positions):
            console.print("[yellow]Cannot move: position out of range or locked[/yellow]")
            return
        engine.reorder(*positions)
    elif command == "s":
        positions = parse_positions(args, 2)
        if positions is None:
            console.print("[red]Usage:[/red] s A B")
            return
        if not engine.can_swap(*positions):
            console.print("[yellow]Cannot swap: position out of range or locked[/yellow]")
            return
        engine.swap(*positions)
    console.print(build_ranking_table(engine))


async def run_session(service: RankingService) -> None:
    """Interactive voting loop. Returns when all pairs are voted or on quit."""
    engine = service.engine
    pair: tuple[Song, Song] | None = engine.current_pair()

    while pair is not None:
        _print_progress(engine)
        left, right = pair
        console.print(f"  [bold cyan][1][/bold cyan] {left.label}")
        console.print(f"  [bold magenta][2][/bold magenta] {right.label}")
        console.print(HELP_TEXT)

        try:
            raw = console.input("> ").strip().lower()
        except EOFError:
            break
        if not raw:
            continue
        command, *args = raw.split()

        if command in ("1", "2"):
            winner, loser = (left, right) if command == "1" else (right, left)
            try:
                await service.vote(winner.id, loser.id)
            except RankingError as e:
                console.print(f"[red]{e}[/red]")
                continue
            pair = engine.current_pair()
        elif command == "q":
            break
        elif command == "r":
            console.print(build_ranking_table(engine))
        elif command in ("l", "m", "s"):
            _handle_edit(engine, command, args)
        else:
            console.print(f"[red]Unknown command:[/red] {command}")

    if engine.current_pair() is None:
        console.print("[bold green]All matchups complete![/bold green]")


def _open_store(config: SessionConfig, session_id: str | None) -> SessionStore | None:
    if not config.persist:
        return None
    return SessionStore(config, session_id=session_id)


@app.command()
def rank(
    config_path: Annotated[Path, typer.Argument(help="Path to catalog YAML file")],
    session_id: Annotated[
        str | None, typer.Option("--session-id", help="Session ID (default: timestamp)")
    ] = None,
    resume: Annotated[
        bool, typer.Option("--resume", help="Replay stored votes for --session-id first")
    ] = False,
    seed: Annotated[int | None, typer.Option("--seed", help="Seed for pair order")] = None,
    persist: Annotated[
        bool | None,
        typer.Option("--persist/--no-persist", help="Store votes and reports on disk"),
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-V", help="Verbose output")] = False,
) -> None:
    """Rank the songs of a catalog through pairwise votes.

    Args:
        config_path: Path to YAML catalog/configuration file.
        session_id: Session identifier used for the snapshot directory.
        resume: Replay the stored votes of an existing session.
        seed: Override the configured pair-sampling seed.
        persist: Override the configured persistence setting.
        verbose: Enable verbose logging.
    """
    _configure_logging(verbose)

    try:
        config = load_config(config_path)
        if seed is not None:
            config.seed = seed
        if persist is not None:
            config.persist = persist
        if resume and session_id is None:
            raise ConfigurationError(
                "--resume needs a session to resume", "Pass --session-id as well."
            )

        console.print(f"[bold]{config.title}[/bold] - {len(config.songs)} songs")

        async def _run() -> None:
            service = RankingService(config, _open_store(config, session_id))
            try:
                if resume:
                    replayed = await service.restore()
                    console.print(f"Replayed {replayed} votes")
                elif service.store is not None:
                    stored = await service.store.load_matchups()
                    if stored:
                        sid = service.store.session_id
                        raise ConfigurationError(
                            f"Session '{sid}' already has {len(stored)} votes",
                            "Pass --resume or choose a new --session-id.",
                        )
                await run_session(service)
                console.print(build_ranking_table(service.engine, title="Final ranking"))
                report_dir = await service.save_reports()
                if report_dir is not None:
                    console.print(f"Results saved to: {report_dir}")
            finally:
                await service.close()

        asyncio.run(_run())

    except FileNotFoundError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e
    except (ConfigurationError, RankingError) as e:
        console.print(f"[red]{e}")
        raise typer.Exit(1) from e


@app.command()
def show(
    config_path: Annotated[Path, typer.Argument(help="Path to catalog YAML file")],
    session_id: Annotated[str, typer.Option("--session-id", help="Stored session to replay")],
) -> None:
    """Replay a stored session and print its ranking.

    Args:
        config_path: Path to YAML catalog/configuration file.
        session_id: Identifier of the stored session.
    """
    _configure_logging(verbose=False)

    try:
        config = load_config(config_path)
        if not (Path(config.output_dir) / session_id).exists():
            raise ConfigurationError(
                f"No stored session '{session_id}' in {config.output_dir}",
                "Check --session-id and the config's output_dir.",
            )

        async def _run() -> None:
            service = RankingService(config, SessionStore(config, session_id=session_id))
            try:
                await service.restore()
                _print_progress(service.engine)
                console.print(build_ranking_table(service.engine, title=config.title))
            finally:
                await service.close()

        asyncio.run(_run())

    except FileNotFoundError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e
    except (ConfigurationError, RankingError) as e:
        console.print(f"[red]{e}")
        raise typer.Exit(1) from e


@app.command()
def validate(
    config_path: Annotated[Path, typer.Argument(help="Path to catalog YAML file")],
) -> None:
    """Validate a catalog file without ranking.

    Args:
        config_path: Path to YAML catalog/configuration file.
    """
    try:
        config = load_config(config_path)
        n = len(config.songs)
        console.print("[green]Configuration is valid![/green]")
        console.print(f"  Title: {config.title}")
        console.print(f"  Songs: {n}")
        console.print(f"  Matchups: {n * (n - 1) // 2}")
        console.print(f"  Damping: {config.scoring.damping}")
        console.print(f"  Iterations: {config.scoring.iterations}")

    except FileNotFoundError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e
    except ConfigurationError as e:
        console.print(f"[red]{e}")
        raise typer.Exit(1) from e
    except Exception as e:
        console.print(f"[red]Validation error:[/red] {e}")
        raise typer.Exit(1) from e


@app.command()
def info() -> None:
    """Show tool information and example commands."""
    console.print("[bold]Song Ranker[/bold]")
    console.print(f"Version: {__version__}\n")

    console.print("[bold]Example Commands:[/bold]")
    console.print("  # Rank a catalog")
    console.print("  songrank rank configs/top_hits.yaml\n")

    console.print("  # Reproducible pair order, nothing written to disk")
    console.print("  songrank rank configs/top_hits.yaml --seed 7 --no-persist\n")

    console.print("  # Continue a stored session")
    console.print("  songrank rank configs/top_hits.yaml --session-id mine --resume\n")

    console.print("  # Print a stored session's ranking")
    console.print("  songrank show configs/top_hits.yaml --session-id mine\n")

    console.print("  # Validate a catalog")
    console.print("  songrank validate configs/top_hits.yaml")


if __name__ == "__main__":
    app()
