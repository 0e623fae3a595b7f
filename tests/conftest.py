"""Test configuration and fixtures"""

import tempfile
from concurrent.futures import Executor, Future
from pathlib import Path
from typing import Callable

import pytest

from votequeue.core.exceptions import FetchError, VoteError
from votequeue.sync.engine import QueueEngine
from votequeue.sync.models import Item, VoteDirection


class ImmediateExecutor(Executor):
    """Runs every submitted call on the calling thread"""

    def submit(self, fn: Callable, /, *args, **kwargs) -> Future:
        future: Future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except BaseException as e:
            future.set_exception(e)
        return future


class DeferredExecutor(Executor):
    """Holds submitted calls until the test runs them"""

    def __init__(self):
        self.queued: list[tuple[Future, Callable, tuple, dict]] = []

    def submit(self, fn: Callable, /, *args, **kwargs) -> Future:
        future: Future = Future()
        self.queued.append((future, fn, args, kwargs))
        return future

    def run_next(self) -> Future:
        return self._run(self.queued.pop(0))

    def run_last(self) -> Future:
        return self._run(self.queued.pop())

    def run_all(self) -> None:
        while self.queued:
            self.run_next()

    @staticmethod
    def _run(entry) -> Future:
        future, fn, args, kwargs = entry
        try:
            future.set_result(fn(*args, **kwargs))
        except BaseException as e:
            future.set_exception(e)
        return future


class FakeLedger:
    """Records votes; fails for ids listed in `failing`"""

    def __init__(self):
        self.calls: list[tuple[str, VoteDirection]] = []
        self.failing: set[str] = set()

    def submit_vote(self, item_id: str, direction: VoteDirection) -> str:
        self.calls.append((item_id, direction))
        if item_id in self.failing:
            raise VoteError("HTTP 500 from vote endpoint", status_code=500)
        return "ok"


class FakeFetcher:
    """Returns `snapshot`; raises FetchError while `fail` is set"""

    def __init__(self):
        self.snapshot: list[Item] = []
        self.fail = False
        self.calls = 0

    def fetch_queue(self) -> list[Item]:
        self.calls += 1
        if self.fail:
            raise FetchError("Queue service unreachable", is_network_error=True)
        return list(self.snapshot)


def make_item(item_id: str, score: int = 0, voted: bool = False, title: str | None = None) -> Item:
    """Item with a readable default title"""
    return Item(
        id=item_id,
        title=title or f"Video {item_id}",
        score=score,
        voted_by_local_user=voted,
    )


@pytest.fixture
def temp_dir():
    """Create temporary directory for tests"""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def ledger():
    return FakeLedger()


@pytest.fixture
def fetcher():
    return FakeFetcher()


@pytest.fixture
def deferred():
    return DeferredExecutor()


@pytest.fixture
def notices():
    """Collects notification messages"""
    return []


@pytest.fixture
def engine(ledger, fetcher, notices):
    """Engine whose background work runs synchronously"""
    engine = QueueEngine(ledger, fetcher, executor=ImmediateExecutor(), notify=notices.append)
    yield engine
    engine.close()


@pytest.fixture
def deferred_engine(ledger, fetcher, deferred, notices):
    """Engine whose background work runs only when the test says so"""
    engine = QueueEngine(ledger, fetcher, executor=deferred, notify=notices.append)
    yield engine
    engine.close()


@pytest.fixture
def sample_stream_data():
    """One stream entry as the queue service returns it"""
    return {
        "id": "dQw4w9WgXcQ",
        "title": "Rick Astley - Never Gonna Give You Up",
        "upvotes": 3,
        "smlImg": "https://i.ytimg.com/vi/dQw4w9WgXcQ/mqdefault.jpg",
        "bigImg": "https://i.ytimg.com/vi/dQw4w9WgXcQ/hqdefault.jpg",
        "hasUpvoted": True,
    }
