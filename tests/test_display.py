# tests/test_display.py
"""Test terminal rendering"""

from rich.console import Console

from conftest import make_item
from votequeue.core.display import DISPLAY_THEME, VOTED_MARK, render_board, render_queue


def render_text(renderable):
    console = Console(record=True, width=100, theme=DISPLAY_THEME)
    console.print(renderable)
    return console.export_text()


class TestRenderQueue:
    """Test the queue table"""

    def test_rows_in_order(self):
        items = [make_item("A", score=3, voted=True, title="First"), make_item("B", title="Second")]
        table = render_queue(items)
        assert table.row_count == 2

        text = render_text(table)
        assert text.index("First") < text.index("Second")
        assert VOTED_MARK in text

    def test_empty_queue(self):
        assert "Queue is empty" in render_text(render_queue([]))


class TestRenderBoard:
    """Test the combined view"""

    def test_now_playing(self):
        text = render_text(render_board([], make_item("A", title="Current")))
        assert "Now playing: Current" in text

    def test_nothing_playing(self):
        assert "Nothing playing" in render_text(render_board([], None))
