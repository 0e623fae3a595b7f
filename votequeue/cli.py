"""
Command-line interface for votequeue.

This module implements the CLI using Click (through rich-click for
colored help) on top of QueueBoard.

Commands:
    votequeue resolve <text>        Print the video id found in the text
    votequeue show                  Print the current queue
    votequeue add <url>             Validate a link and queue it locally
    votequeue vote <id>             Toggle your vote on a queued video
    votequeue play-next             Take the top video and print its player URL
    votequeue watch                 Live view, refreshed on every poll

Options:
    --config <path>                 Path to config.yaml
    --server <url>                  Override server.base_url
    --verbose                       Show debug output on the console

Usage:
    votequeue --server http://localhost:3000 show
    votequeue add "https://youtu.be/dQw4w9WgXcQ"
    votequeue vote dQw4w9WgXcQ
    votequeue watch

Configuration:
    config.yaml in the current directory (or --config). When no file is
    found, --server alone is enough; every other setting has a default.

Exit Codes:
    0    success
    1    configuration error or unexpected failure
    2    input rejected (no video id, unknown video, not in queue)
    3    queue service or lookup service unreachable / refused
    130  interrupted
"""

import sys
import threading
from pathlib import Path
from typing import Callable

import rich_click as click
from rich.live import Live

# Configure rich-click for better help formatting
click.rich_click.USE_RICH_MARKUP = True
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.GROUP_ARGUMENTS_OPTIONS = True
click.rich_click.STYLE_ERRORS_SUGGESTION = "magenta italic"
click.rich_click.ERRORS_SUGGESTION = ""
click.rich_click.MAX_WIDTH = 100

from votequeue import __version__
from votequeue.board import QueueBoard, SubmitStatus
from votequeue.core import (
    Config,
    ConfigError,
    EnrichmentError,
    RemoteError,
    ResolveError,
    UnknownItemError,
    UnknownMediaError,
    VoteQueueError,
    get_logger,
    load_config,
    parse_config,
    setup_logging,
    shutdown_logging,
)
from votequeue.core.config import CONFIG_FILENAME
from votequeue.core.display import get_display_console, render_board, render_queue
from votequeue.media.resolver import resolve, watch_url

logger = get_logger(__name__)


# Seconds the watch view waits for a poll before redrawing anyway
WATCH_REDRAW_INTERVAL = 1.0


@click.group()
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    metavar="<path>",
    help="Path to config.yaml (default: ./config.yaml)"
)
@click.option(
    "--server",
    type=str,
    default=None,
    metavar="<url>",
    help="Queue service base URL, overrides server.base_url"
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    default=False,
    help="Show debug output on the console."
)
@click.version_option(__version__, prog_name="votequeue")
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, server: str | None, verbose: bool) -> None:
    """
    [bold]votequeue[/bold] - shared, vote-ranked playback queue.

    Paste a video link to queue it, vote to move it up, and play the
    top-ranked video when the current one ends.
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["server"] = server
    ctx.obj["verbose"] = verbose


@cli.command("resolve")
@click.argument("text")
def resolve_command(text: str) -> None:
    """Print the video id contained in TEXT (no network access)."""
    video_id = resolve(text)
    if video_id is None:
        click.echo("No video id found", err=True)
        sys.exit(2)
    click.echo(video_id)


@cli.command("show")
@click.pass_context
def show_command(ctx: click.Context) -> None:
    """Fetch the queue once and print it."""
    def action(board: QueueBoard) -> None:
        _refresh_or_fail(board)
        get_display_console().print(render_queue(board.items()))

    _run_with_board(ctx, action)


@cli.command("add")
@click.argument("url")
@click.pass_context
def add_command(ctx: click.Context, url: str) -> None:
    """
    Look up the video at URL and add it to the queue.

    The entry lives in this invocation's local queue only: the queue
    service has no submit endpoint, so it is gone when the command exits.
    """
    def action(board: QueueBoard) -> None:
        _refresh_or_fail(board)
        result = board.submit(url)
        if result.status is SubmitStatus.ALREADY_QUEUED:
            click.echo(f"Already queued: {result.item_id}")
        else:
            click.echo(f"Queued: {result.item.title if result.item else result.item_id}")
        get_display_console().print(render_queue(board.items()))

    _run_with_board(ctx, action)


@cli.command("vote")
@click.argument("item_id", metavar="ID")
@click.pass_context
def vote_command(ctx: click.Context, item_id: str) -> None:
    """Toggle your vote on the queued video ID."""
    def action(board: QueueBoard) -> None:
        _refresh_or_fail(board)
        confirmed = board.toggle_vote(item_id).result()
        get_display_console().print(render_queue(board.items()))
        if not confirmed:
            click.echo("Vote was not confirmed by the queue service", err=True)
            sys.exit(3)

    _run_with_board(ctx, action, notify=click.echo)


@cli.command("play-next")
@click.pass_context
def play_next_command(ctx: click.Context) -> None:
    """Take the top-ranked video off the queue and print its player URL."""
    def action(board: QueueBoard) -> None:
        _refresh_or_fail(board)
        video_id = board.play_next()
        if video_id is None:
            click.echo("Queue is empty")
            return
        click.echo(board.player.now_playing_url)
        click.echo(watch_url(video_id))

    _run_with_board(ctx, action)


@cli.command("watch")
@click.pass_context
def watch_command(ctx: click.Context) -> None:
    """Show the queue and keep it in sync until Ctrl-C."""
    polled = threading.Event()

    def action(board: QueueBoard) -> None:
        console = get_display_console()

        def view():
            return render_board(board.items(), board.player.current_item)

        board.activate()
        try:
            with Live(view(), console=console, auto_refresh=False) as live:
                while True:
                    polled.wait(WATCH_REDRAW_INTERVAL)
                    polled.clear()
                    live.update(view(), refresh=True)
        except KeyboardInterrupt:
            click.echo("Stopped watching")

    _run_with_board(ctx, action, on_refresh=polled.set)


# =============================================================================
# Helpers
# =============================================================================

def _load_configuration(config_path: Path | None, server: str | None) -> Config:
    """
    Load config.yaml, falling back to --server alone when no file exists.

    Raises:
        ConfigError: If the file is invalid, or missing without --server.
    """
    default_path = Path.cwd() / CONFIG_FILENAME
    if config_path is None and server is not None and not default_path.exists():
        return parse_config({"server": {"base_url": server}})

    config = load_config(config_path)
    if server is not None:
        config = config.with_base_url(server)
    return config


def _refresh_or_fail(board: QueueBoard) -> None:
    if not board.refresh():
        raise RemoteError("Could not fetch the queue from the queue service")


def _run_with_board(
    ctx: click.Context,
    action: Callable[[QueueBoard], None],
    notify: Callable[[str], None] | None = None,
    on_refresh: Callable[[], None] | None = None
) -> None:
    """
    Set up logging, build a board, run the action and map errors to exit codes.

    Behavior:
        1. Load configuration (exit 1 on ConfigError)
        2. Configure logging from config.logging
        3. Build the board and run the action
        4. Close the board and shut down logging, whatever happened
    """
    options = ctx.obj

    try:
        config = _load_configuration(options["config_path"], options["server"])
    except ConfigError as e:
        click.echo(f"Configuration error: {e.message}", err=True)
        sys.exit(1)

    setup_logging(config.logging.directory, verbose=options["verbose"])
    board = QueueBoard.from_config(config, notify=notify, on_refresh=on_refresh)

    try:
        action(board)

    except (ResolveError, UnknownItemError) as e:
        click.echo(f"Rejected: {e.message}", err=True)
        sys.exit(2)

    except UnknownMediaError as e:
        click.echo(f"Rejected: {e.message}", err=True)
        sys.exit(2)

    except EnrichmentError as e:
        click.echo(f"Lookup service error: {e.message}", err=True)
        sys.exit(3)

    except RemoteError as e:
        click.echo(f"Queue service error: {e.message}", err=True)
        logger.debug(f"Error details: {e.details}")
        sys.exit(3)

    except VoteQueueError as e:
        click.echo(f"Error: {e.message}", err=True)
        logger.debug(f"Error details: {e.details}")
        sys.exit(1)

    except KeyboardInterrupt:
        click.echo("\nInterrupted by user", err=True)
        sys.exit(130)

    except Exception as e:
        click.echo(f"Unexpected error: {e}", err=True)
        logger.exception("Unexpected error")
        sys.exit(1)

    finally:
        board.close()
        shutdown_logging()


def main() -> None:
    """
    Entry point for the CLI.

    This function is called when running `votequeue` from the command line.
    """
    cli(obj={})


if __name__ == "__main__":
    main()
