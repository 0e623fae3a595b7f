"""
Queue synchronization engine for votequeue.

The engine owns the local copy of the shared queue. It applies the
user's own votes immediately, confirms them with the queue service in the
background, and periodically replaces its state with the service's
snapshot, except for items whose vote is still in flight.

State:
    items:         Queue, always sorted by (-score, ordinal)
    ordinals:      id -> insertion ordinal, kept across merges
    pending_votes: id -> vote still waiting for the service
    consumed:      ids dequeued for playback, hidden from merges while the
                   service keeps listing them

Concurrency:
    All state lives behind one threading.Lock. Each operation holds it
    for its own state change only; vote submissions and queue fetches run
    outside it, on the executor or the caller's thread, and take the lock
    again to apply their result.

Usage:
    engine = QueueEngine(ledger, fetcher)
    engine.enqueue(item)
    future = engine.toggle_vote(item.id)   # applied immediately
    engine.refresh()                       # fetch + merge
    top = engine.dequeue_next()
    engine.close()
"""

import itertools
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Protocol

from votequeue.core.config import DEFAULT_VOTE_WORKERS
from votequeue.core.exceptions import UnknownItemError, VoteQueueError
from votequeue.core.logger import get_logger, log_vote_failure
from votequeue.sync.models import Item, VoteDirection

logger = get_logger(__name__)


class VoteLedger(Protocol):
    """Anything that can submit a vote; raises on failure."""

    def submit_vote(self, item_id: str, direction: VoteDirection) -> Any: ...


class QueueFetcher(Protocol):
    """Anything that returns the authoritative queue; raises on failure."""

    def fetch_queue(self) -> list[Item]: ...


@dataclass(frozen=True)
class PendingVote:
    """
    A vote applied locally and not yet answered by the service.

    The generation tells overlapping toggles on the same item apart, so a
    late answer to an older toggle does not clear a newer one.
    """
    direction: VoteDirection
    generation: int


class QueueEngine:
    """
    Owns the local queue and keeps it in step with the queue service.

    Attributes:
        _ledger: Vote submission collaborator.
        _fetcher: Queue snapshot collaborator.
        _executor: Runs vote submissions and forced refreshes.
        _notify: Optional best-effort callback for confirmation notices.

    Thread Safety:
        Every public method is safe to call from any thread.
    """

    def __init__(
        self,
        ledger: VoteLedger,
        fetcher: QueueFetcher,
        executor: Executor | None = None,
        notify: Callable[[str], None] | None = None,
        max_workers: int = DEFAULT_VOTE_WORKERS
    ) -> None:
        """
        Initialize the engine with an empty queue.

        Args:
            ledger: Vote submission client.
            fetcher: Queue fetch client.
            executor: Executor for background network calls. If None, the
                      engine creates and owns a ThreadPoolExecutor.
            notify: Called with a short message when a vote is confirmed.
            max_workers: Pool size when the engine creates its executor.
        """
        self._ledger = ledger
        self._fetcher = fetcher
        self._notify = notify
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="votequeue-vote"
        )

        self._lock = threading.Lock()
        self._items: list[Item] = []
        self._ordinals: dict[str, int] = {}
        self._ordinal_counter = itertools.count()
        self._generation_counter = itertools.count(1)
        self._pending: dict[str, PendingVote] = {}
        self._consumed: set[str] = set()
        self._alive = True

    # =========================================================================
    # Read access
    # =========================================================================

    def snapshot(self) -> tuple[Item, ...]:
        """Current queue, highest ranked first."""
        with self._lock:
            return tuple(self._items)

    def get(self, item_id: str) -> Item | None:
        """Queued item with this id, or None."""
        with self._lock:
            return self._find(item_id)

    @property
    def pending_votes(self) -> dict[str, VoteDirection]:
        """Copy of the in-flight votes, id -> direction."""
        with self._lock:
            return {item_id: vote.direction for item_id, vote in self._pending.items()}

    @property
    def is_alive(self) -> bool:
        return self._alive

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __contains__(self, item_id: object) -> bool:
        with self._lock:
            return item_id in self._ordinals

    # =========================================================================
    # Mutations
    # =========================================================================

    def enqueue(self, item: Item, voted: bool | None = None) -> bool:
        """
        Add a new item at the end of its score band.

        Args:
            item: Item to add. Its score and vote flag are reset.
            voted: Initial vote state; None means not voted.

        Returns:
            True if the item was added, False if an item with the same id
            is already queued (nothing changes in that case).
        """
        with self._lock:
            if item.id in self._ordinals:
                logger.info(f"Already queued: {item.title} ({item.id})")
                return False

            # A resubmission of something played earlier is a new entry
            self._consumed.discard(item.id)
            self._ordinals[item.id] = next(self._ordinal_counter)
            self._items.append(item.fresh(voted))
            self._sort()

        logger.info(f"Queued: {item.title} ({item.id})")
        return True

    def toggle_vote(self, item_id: str) -> Future:
        """
        Flip the local user's vote on an item.

        The flip is applied and the queue re-sorted before this method
        returns; the service is told in the background. On confirmation
        the local state stands. On failure the engine fetches the whole
        queue again instead of undoing the flip, since other participants
        may have voted meanwhile.

        Args:
            item_id: Identifier of a queued item.

        Returns:
            Future resolving to True if the service confirmed the vote,
            False otherwise. It never raises.

        Raises:
            UnknownItemError: If item_id is not queued.
            VoteQueueError: If the engine has been closed.
        """
        with self._lock:
            if not self._alive:
                raise VoteQueueError("Queue engine is closed", details={"item_id": item_id})

            index = self._index_of(item_id)
            if index is None:
                raise UnknownItemError(
                    f"Not in queue: {item_id}",
                    details={"item_id": item_id}
                )

            current = self._items[index]
            direction = VoteDirection.for_toggle(current.voted_by_local_user)
            self._items[index] = current.with_vote_toggled()
            self._sort()

            pending = PendingVote(direction, next(self._generation_counter))
            self._pending[item_id] = pending

        logger.debug(f"Applied {direction.value} locally for {item_id}")
        try:
            return self._executor.submit(self._submit_vote, item_id, current.title, pending)
        except RuntimeError as e:
            # Executor shut down between the liveness check and submit
            with self._lock:
                if self._pending.get(item_id) is pending:
                    del self._pending[item_id]
                    index = self._index_of(item_id)
                    if index is not None:
                        self._items[index] = self._items[index].with_vote_toggled()
                        self._sort()
            raise VoteQueueError(
                "Queue engine is closed",
                details={"item_id": item_id, "original_error": str(e)}
            ) from e

    def reconcile(self, remote: Iterable[Item]) -> None:
        """
        Merge an authoritative snapshot into the local queue.

        The snapshot decides membership, score and vote flag for every
        item, except items with a vote in flight, which keep their local
        state (and stay queued even if the snapshot omits them). Items the
        snapshot does not list are dropped. Known items keep their
        ordinal, so an unchanged item never moves among equal scores.

        Args:
            remote: Items in the service's order.
        """
        with self._lock:
            self._merge(list(remote))

    def refresh(self) -> bool:
        """
        Fetch the authoritative queue and merge it.

        Returns:
            True if a snapshot was merged. False if the fetch failed (local
            state is kept and the next attempt proceeds normally) or the
            engine was closed before the answer arrived.
        """
        if not self._alive:
            return False

        try:
            remote = self._fetcher.fetch_queue()
        except VoteQueueError as e:
            logger.warning(f"Queue refresh failed, keeping local state: {e.message}")
            logger.debug(f"Refresh failure details: {e.details}")
            return False

        with self._lock:
            if not self._alive:
                logger.debug("Discarding queue snapshot that arrived after close")
                return False
            self._merge(remote)
            size = len(self._items)

        logger.debug(f"Queue reconciled: {size} items")
        return True

    def request_refresh(self) -> Future:
        """Run refresh() on the engine's executor."""
        return self._executor.submit(self.refresh)

    def dequeue_next(self) -> Item | None:
        """
        Remove and return the highest-ranked item.

        Returns:
            The removed item, or None if the queue is empty (nothing
            changes in that case).
        """
        with self._lock:
            if not self._items:
                return None

            item = self._items.pop(0)
            del self._ordinals[item.id]
            self._consumed.add(item.id)

        logger.debug(f"Dequeued {item.id}")
        return item

    def close(self) -> None:
        """
        Stop accepting work. Answers arriving afterwards are discarded.

        Safe to call more than once.
        """
        with self._lock:
            if not self._alive:
                return
            self._alive = False

        if self._owns_executor:
            self._executor.shutdown(wait=False)
        logger.debug("Queue engine closed")

    # =========================================================================
    # Internals (callers hold self._lock unless stated otherwise)
    # =========================================================================

    def _sort(self) -> None:
        # list.sort is stable; the ordinal makes ties explicit anyway
        self._items.sort(key=lambda item: (-item.score, self._ordinals[item.id]))

    def _index_of(self, item_id: str) -> int | None:
        for index, item in enumerate(self._items):
            if item.id == item_id:
                return index
        return None

    def _find(self, item_id: str) -> Item | None:
        index = self._index_of(item_id)
        return self._items[index] if index is not None else None

    def _merge(self, remote: list[Item]) -> None:
        local = {item.id: item for item in self._items}
        remote_ids = {item.id for item in remote}

        # Once the service stops listing a played item, a reappearance
        # counts as a fresh submission
        self._consumed &= remote_ids

        merged: list[Item] = []
        ordinals: dict[str, int] = {}

        for item in remote:
            if item.id in ordinals or item.id in self._consumed:
                continue

            if item.id in self._pending and item.id in local:
                merged.append(local[item.id])
            else:
                merged.append(item)

            ordinal = self._ordinals.get(item.id)
            ordinals[item.id] = ordinal if ordinal is not None else next(self._ordinal_counter)

        for item_id in self._pending:
            if item_id in local and item_id not in ordinals:
                merged.append(local[item_id])
                ordinals[item_id] = self._ordinals[item_id]

        self._items = merged
        self._ordinals = ordinals
        self._sort()

    def _submit_vote(self, item_id: str, title: str, pending: PendingVote) -> bool:
        """Worker body for toggle_vote(). Runs without the lock."""
        direction = pending.direction
        try:
            receipt = self._ledger.submit_vote(item_id, direction)
        except VoteQueueError as e:
            self._vote_failed(item_id, title, pending, e.message)
            return False
        except Exception as e:
            logger.debug("Unexpected vote submission error", exc_info=True)
            self._vote_failed(item_id, title, pending, f"{type(e).__name__}: {e}")
            return False

        with self._lock:
            if self._pending.get(item_id) is pending:
                del self._pending[item_id]
            alive = self._alive

        if alive:
            service_message = getattr(receipt, "message", None)
            if service_message is not None:
                logger.debug(f"Queue service confirmed {direction.value} for {item_id}: {service_message}")
            logger.info(f"{direction.notice} {title}")
            self._send_notice(direction.notice)
        return True

    def _vote_failed(self, item_id: str, title: str, pending: PendingVote, reason: str) -> None:
        with self._lock:
            if self._pending.get(item_id) is pending:
                del self._pending[item_id]
            alive = self._alive

        if not alive:
            return

        log_vote_failure(logger, item_id, title, pending.direction.value, reason)
        # Resync instead of undoing the flip locally
        try:
            self.refresh()
        except Exception:
            logger.warning(f"Resync after failed vote on {item_id} failed", exc_info=True)

    def _send_notice(self, message: str) -> None:
        if self._notify is None:
            return
        try:
            self._notify(message)
        except Exception:
            logger.warning("Notification callback failed", exc_info=True)
