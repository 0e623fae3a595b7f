"""
Queue state and synchronization.

Components:
    - models: Item and VoteDirection
    - QueueEngine: Local queue with optimistic votes and reconciliation
    - ReconcileTimer: Periodic refresh thread
    - PlaybackCoordinator: Explicit play-next tracking
"""

from votequeue.sync.engine import PendingVote, QueueEngine
from votequeue.sync.models import Item, VoteDirection
from votequeue.sync.playback import PlaybackCoordinator
from votequeue.sync.poller import ReconcileTimer

__all__ = [
    "Item",
    "VoteDirection",
    "QueueEngine",
    "PendingVote",
    "ReconcileTimer",
    "PlaybackCoordinator",
]
