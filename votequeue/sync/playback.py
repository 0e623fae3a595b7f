"""
Playback coordination for votequeue.

Playback is explicit: the host asks for the next item, the top of the
queue is removed and becomes the current item. Nothing advances on its
own when a video ends.
"""

import threading

from votequeue.core.logger import get_logger
from votequeue.media.resolver import embed_url
from votequeue.sync.engine import QueueEngine
from votequeue.sync.models import Item

logger = get_logger(__name__)


class PlaybackCoordinator:
    """
    Tracks the currently playing item.

    Example:
        player = PlaybackCoordinator(engine)
        video_id = player.play_next()
        print(player.now_playing_url)
    """

    def __init__(self, engine: QueueEngine) -> None:
        self._engine = engine
        self._lock = threading.Lock()
        self._current: Item | None = None

    @property
    def currently_playing(self) -> str | None:
        """Identifier of the current item, or None."""
        with self._lock:
            return self._current.id if self._current else None

    @property
    def current_item(self) -> Item | None:
        with self._lock:
            return self._current

    @property
    def now_playing_url(self) -> str | None:
        """Autoplay embed URL for the current item, or None."""
        video_id = self.currently_playing
        return embed_url(video_id, autoplay=True) if video_id else None

    def play_next(self) -> str | None:
        """
        Move the top-ranked item out of the queue and make it current.

        Returns:
            The new current id, or None if the queue was empty. In that
            case the current item is left as it was.
        """
        item = self._engine.dequeue_next()
        if item is None:
            logger.info("Queue empty, nothing to play")
            return None

        with self._lock:
            self._current = item

        logger.info(f"Now playing: {item.title} ({item.id})")
        return item.id

    def stop(self) -> None:
        """Clear the current item."""
        with self._lock:
            self._current = None
