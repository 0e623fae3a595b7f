"""
Terminal rendering of the queue using the Rich library.

All tables share one theme so the one-shot commands and the live watch
view look the same.

Usage:
    from votequeue.core.display import render_queue, get_display_console

    console = get_display_console()
    console.print(render_queue(board.items(), board.currently_playing))
"""

from typing import Iterable

from rich.console import Console, Group
from rich.table import Table
from rich.text import Text
from rich.theme import Theme

from votequeue.sync.models import Item


DISPLAY_THEME = Theme({
    "queue.rank": "grey50",
    "queue.title": "white",
    "queue.score": "bold rgb(165,66,129)",
    "queue.voted": "rgb(114,156,31)",
    "queue.id": "grey62",
    "queue.playing": "bold rgb(114,156,31)",
    "queue.empty": "italic grey50",
})

VOTED_MARK = "▲"
NOT_VOTED_MARK = "△"


def get_display_console() -> Console:
    """Console carrying the queue theme."""
    return Console(theme=DISPLAY_THEME)


def render_now_playing(item: Item | None) -> Text:
    if item is None:
        return Text("Nothing playing", style="queue.empty")
    text = Text("Now playing: ", style="queue.playing")
    text.append(item.title, style="queue.title")
    text.append(f"  ({item.id})", style="queue.id")
    return text


def render_queue(items: Iterable[Item], title: str = "Up next") -> Table:
    """
    Build the queue table.

    Args:
        items: Items in display order.
        title: Table caption.

    Returns:
        Rich Table with rank, vote mark, score, title and id columns.
    """
    table = Table(title=title, title_justify="left", expand=False)
    table.add_column("#", style="queue.rank", justify="right")
    table.add_column("", justify="center")
    table.add_column("Votes", style="queue.score", justify="right")
    table.add_column("Title", style="queue.title", overflow="fold")
    table.add_column("ID", style="queue.id", no_wrap=True)

    rows = 0
    for rank, item in enumerate(items, start=1):
        mark = Text(VOTED_MARK, style="queue.voted") if item.voted_by_local_user else Text(NOT_VOTED_MARK)
        table.add_row(str(rank), mark, str(item.score), item.title, item.id)
        rows += 1

    if rows == 0:
        table.add_row("", "", "", Text("Queue is empty", style="queue.empty"), "")
    return table


def render_board(items: Iterable[Item], playing: Item | None) -> Group:
    """Now-playing line followed by the queue table."""
    return Group(render_now_playing(playing), render_queue(items))
