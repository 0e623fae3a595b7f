"""
votequeue: a shared, vote-ranked playback queue.

Participants paste video links into a common queue, vote items up or
down, and the host plays the top-ranked item on demand. The queue itself
lives on a queue service; this package keeps a local copy that reacts to
the user's own votes immediately and converges with the service by
polling.

Architecture:
    media/      - Link resolution and metadata lookup
        - Extract the 11-character video id from pasted text
        - Fetch title and thumbnails (noembed-compatible endpoint)

    remote/     - Queue service clients
        - GET  /api/streams/my        queue snapshot
        - POST /api/streams/upvote    vote up
        - POST /api/streams/downvote  vote down

    sync/       - Local queue state
        - QueueEngine: optimistic votes, pending-vote bookkeeping,
          snapshot reconciliation, stable ordering
        - ReconcileTimer: periodic refresh thread
        - PlaybackCoordinator: explicit play-next

    board.py    - QueueBoard, the surface a front-end talks to
    cli.py      - Command-line interface
    core/       - Configuration, logging, exceptions, terminal display

Usage:
    Command Line:
        votequeue --server http://localhost:3000 show
        votequeue add "https://youtu.be/dQw4w9WgXcQ"
        votequeue vote dQw4w9WgXcQ
        votequeue play-next
        votequeue watch

    Python API:
        from votequeue import QueueBoard, load_config, setup_logging

        config = load_config()
        setup_logging(config.logging.directory)

        with QueueBoard.from_config(config) as board:
            result = board.submit("https://youtu.be/dQw4w9WgXcQ")
            board.toggle_vote(result.item_id).result()
            print([item.title for item in board.items()])

Dependencies:
    - requests: HTTP for the queue service and metadata lookup
    - pyyaml: Configuration file parsing
    - tqdm: Console log handler that cooperates with progress output
    - rich: Queue tables and the live watch view
    - rich-click: CLI framework with colored help
"""

__version__ = "0.1.0"
__author__ = "votequeue"
__license__ = "MIT"

# Convenience imports for common usage
from votequeue.board import QueueBoard, SubmitResult, SubmitStatus
from votequeue.core import (
    Config,
    ConfigError,
    EnrichmentError,
    FetchError,
    RemoteError,
    ResolveError,
    UnknownItemError,
    UnknownMediaError,
    VoteError,
    VoteQueueError,
    get_logger,
    load_config,
    setup_logging,
)
from votequeue.media import resolve
from votequeue.sync import Item, QueueEngine, VoteDirection

__all__ = [
    # Version
    "__version__",
    # Core
    "Config",
    "load_config",
    "setup_logging",
    "get_logger",
    # Queue
    "QueueBoard",
    "SubmitResult",
    "SubmitStatus",
    "QueueEngine",
    "Item",
    "VoteDirection",
    "resolve",
    # Exceptions
    "VoteQueueError",
    "ConfigError",
    "ResolveError",
    "EnrichmentError",
    "UnknownMediaError",
    "UnknownItemError",
    "RemoteError",
    "VoteError",
    "FetchError",
]
