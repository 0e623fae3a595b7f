"""
Queue board: the single surface a front-end talks to.

The board wires the resolver, the metadata lookup, the queue engine, the
reconcile timer and the playback coordinator together and exposes only
what a view needs:

    items()            live sorted snapshot
    currently_playing  id of the current item
    submit(raw_text)   resolve -> lookup -> enqueue
    toggle_vote(id)    optimistic vote
    play_next()        advance playback

Usage:
    board = QueueBoard.from_config(config)
    board.activate()          # starts periodic reconciliation
    result = board.submit("https://youtu.be/dQw4w9WgXcQ")
    board.toggle_vote(result.item_id)
    board.close()
"""

from concurrent.futures import Future
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from votequeue.core.config import Config
from votequeue.core.exceptions import ResolveError, UnknownMediaError
from votequeue.core.logger import get_logger, log_rejected_submission
from votequeue.media.enrichment import EnrichmentClient
from votequeue.media.resolver import resolve
from votequeue.remote.fetcher import QueueFetchClient
from votequeue.remote.ledger import VoteLedgerClient
from votequeue.remote.session import ApiSession
from votequeue.sync.engine import QueueEngine
from votequeue.sync.models import Item
from votequeue.sync.playback import PlaybackCoordinator
from votequeue.sync.poller import ReconcileTimer

logger = get_logger(__name__)


class SubmitStatus(Enum):
    """Outcome of an accepted submission."""
    QUEUED = "queued"
    ALREADY_QUEUED = "already_queued"


@dataclass(frozen=True)
class SubmitResult:
    """
    Result of QueueBoard.submit().

    Attributes:
        item_id: Canonical identifier of the submitted video.
        status: QUEUED for a new entry, ALREADY_QUEUED for a duplicate.
        item: The queued item as it stands after the submission.
    """
    item_id: str
    status: SubmitStatus
    item: Item | None = None

    @property
    def queued(self) -> bool:
        return self.status is SubmitStatus.QUEUED


class QueueBoard:
    """
    Presentation boundary over the shared queue.

    Attributes:
        engine: The queue engine (exposed for tests and advanced callers).
        player: The playback coordinator.
    """

    def __init__(
        self,
        engine: QueueEngine,
        enrichment: EnrichmentClient,
        poll_interval: float,
        on_refresh: Callable[[], None] | None = None,
        closers: tuple[Callable[[], None], ...] = ()
    ) -> None:
        """
        Args:
            engine: Queue engine to drive.
            enrichment: Metadata lookup used by submit().
            poll_interval: Seconds between periodic reconciliations.
            on_refresh: Called after every periodic reconciliation.
            closers: Extra cleanup callables run by close(), e.g. HTTP
                     session close methods.
        """
        self.engine = engine
        self.player = PlaybackCoordinator(engine)
        self._enrichment = enrichment
        self._timer = ReconcileTimer(engine.refresh, interval=poll_interval, on_tick=on_refresh)
        self._closers = closers

    @classmethod
    def from_config(
        cls,
        config: Config,
        notify: Callable[[str], None] | None = None,
        on_refresh: Callable[[], None] | None = None
    ) -> "QueueBoard":
        """
        Build a board talking to the services named in the configuration.

        Args:
            config: Loaded application configuration.
            notify: Receives vote confirmation notices.
            on_refresh: Called after every periodic reconciliation.
        """
        api = ApiSession.from_config(config.server)
        enrichment = EnrichmentClient(
            endpoint=config.enrichment.endpoint,
            timeout=config.enrichment.timeout
        )
        engine = QueueEngine(
            ledger=VoteLedgerClient(api),
            fetcher=QueueFetchClient(api),
            notify=notify,
            max_workers=config.sync.vote_workers
        )
        return cls(
            engine,
            enrichment,
            poll_interval=config.sync.poll_interval,
            on_refresh=on_refresh,
            closers=(api.close, enrichment.close)
        )

    # =========================================================================
    # View surface
    # =========================================================================

    def items(self) -> tuple[Item, ...]:
        """Current queue, highest ranked first."""
        return self.engine.snapshot()

    @property
    def currently_playing(self) -> str | None:
        return self.player.currently_playing

    def preview(self, raw_text: str) -> str | None:
        """Identifier the input would resolve to, without any network call."""
        return resolve(raw_text)

    def submit(self, raw_text: str) -> SubmitResult:
        """
        Resolve user input, look up its metadata and queue it.

        Args:
            raw_text: Whatever the user typed or pasted.

        Returns:
            SubmitResult with status QUEUED, or ALREADY_QUEUED when the
            video is in the queue already (its score is not touched).

        Raises:
            ResolveError: No video identifier in the input. Nothing is
                          looked up or queued.
            UnknownMediaError: The lookup found no such video.
            EnrichmentError: The lookup service could not be reached.
        """
        video_id = resolve(raw_text)
        if video_id is None:
            log_rejected_submission(logger, raw_text, "no video identifier found")
            raise ResolveError(
                "Not a recognizable video link",
                details={"input": raw_text[:200]}
            )

        existing = self.engine.get(video_id)
        if existing is not None:
            logger.info(f"Already queued: {existing.title}")
            return SubmitResult(video_id, SubmitStatus.ALREADY_QUEUED, existing)

        try:
            info = self._enrichment.lookup(video_id)
        except UnknownMediaError as e:
            log_rejected_submission(logger, raw_text, e.message)
            raise

        queued = self.engine.enqueue(info.to_item())
        status = SubmitStatus.QUEUED if queued else SubmitStatus.ALREADY_QUEUED
        return SubmitResult(video_id, status, self.engine.get(video_id))

    def toggle_vote(self, item_id: str) -> Future:
        """Flip the local user's vote. See QueueEngine.toggle_vote()."""
        return self.engine.toggle_vote(item_id)

    def play_next(self) -> str | None:
        """Advance playback. See PlaybackCoordinator.play_next()."""
        return self.player.play_next()

    def refresh(self) -> bool:
        """Reconcile once, synchronously."""
        return self.engine.refresh()

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def activate(self) -> None:
        """Start periodic reconciliation (first refresh happens at once)."""
        self._timer.start()

    def close(self) -> None:
        """Stop the timer, close the engine and release HTTP sessions."""
        self._timer.stop()
        self.engine.close()
        for closer in self._closers:
            closer()

    def __enter__(self) -> "QueueBoard":
        self.activate()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
