# tests/test_cli.py
"""Test the command-line interface"""

from unittest.mock import Mock, patch

import pytest
from click.testing import CliRunner

from conftest import make_item
from votequeue import __version__
from votequeue.board import QueueBoard
from votequeue.cli import cli
from votequeue.core.exceptions import UnknownMediaError
from votequeue.media.enrichment import MediaInfo


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def board(engine, fetcher):
    """Board over the synchronous test engine, served to every command"""
    enrichment = Mock()

    def lookup(video_id):
        if video_id == "dQw4w9WgXcQ":
            return MediaInfo(video_id=video_id, title="Never Gonna Give You Up")
        raise UnknownMediaError(f"Invalid video URL: no title found for {video_id}")

    enrichment.lookup.side_effect = lookup
    fetcher.snapshot = [make_item("9bZkp7q19f0", score=2, title="Gangnam Style")]

    board = QueueBoard(engine, enrichment, poll_interval=60)
    with patch("votequeue.cli.QueueBoard.from_config", return_value=board):
        yield board


def invoke(runner, *args):
    with runner.isolated_filesystem():
        return runner.invoke(cli, ["--server", "http://queue.test", *args], obj={})


class TestResolveCommand:
    """Test the offline resolve command"""

    def test_resolve(self, runner):
        result = runner.invoke(cli, ["resolve", "https://youtu.be/dQw4w9WgXcQ"], obj={})
        assert result.exit_code == 0
        assert result.output.strip() == "dQw4w9WgXcQ"

    def test_resolve_failure(self, runner):
        result = runner.invoke(cli, ["resolve", "not a url"], obj={})
        assert result.exit_code == 2


class TestQueueCommands:
    """Test commands that talk to the queue service"""

    def test_show(self, runner, board):
        result = invoke(runner, "show")
        assert result.exit_code == 0
        assert "Gangnam Style" in result.output

    def test_show_when_service_down(self, runner, board, fetcher):
        fetcher.fail = True
        result = invoke(runner, "show")
        assert result.exit_code == 3
        assert "Queue service error" in result.output

    def test_add(self, runner, board):
        result = invoke(runner, "add", "https://youtu.be/dQw4w9WgXcQ")
        assert result.exit_code == 0
        assert "Queued: Never Gonna Give You Up" in result.output

    def test_add_help_says_local(self, runner):
        """Test that add documents its entry does not outlive the command"""
        result = runner.invoke(cli, ["add", "--help"], obj={})
        assert result.exit_code == 0
        assert "local" in result.output

    def test_add_rejected(self, runner, board):
        result = invoke(runner, "add", "not a url")
        assert result.exit_code == 2
        assert "Rejected" in result.output

    def test_add_unknown_video(self, runner, board):
        result = invoke(runner, "add", "https://youtu.be/aaaaaaaaaaa")
        assert result.exit_code == 2

    def test_vote(self, runner, board, ledger, notices):
        result = invoke(runner, "vote", "9bZkp7q19f0")
        assert result.exit_code == 0
        assert notices == ["Successfully Upvoted !!"]
        assert ledger.calls[0][0] == "9bZkp7q19f0"
        assert "Gangnam Style" in result.output

    def test_vote_unknown_id(self, runner, board):
        result = invoke(runner, "vote", "missing")
        assert result.exit_code == 2

    def test_vote_not_confirmed(self, runner, board, ledger):
        ledger.failing.add("9bZkp7q19f0")
        result = invoke(runner, "vote", "9bZkp7q19f0")
        assert result.exit_code == 3

    def test_play_next(self, runner, board):
        result = invoke(runner, "play-next")
        assert result.exit_code == 0
        assert "https://www.youtube.com/embed/9bZkp7q19f0?autoplay=1" in result.output

    def test_play_next_empty(self, runner, board, fetcher):
        fetcher.snapshot = []
        result = invoke(runner, "play-next")
        assert result.exit_code == 0
        assert "Queue is empty" in result.output


class TestGlobalOptions:
    """Test configuration handling"""

    def test_missing_config(self, runner):
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["show"], obj={})
        assert result.exit_code == 1
        assert "Configuration error" in result.output

    def test_invalid_server_url(self, runner):
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["--server", "queue.test", "show"], obj={})
        assert result.exit_code == 1

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert __version__ in result.output
