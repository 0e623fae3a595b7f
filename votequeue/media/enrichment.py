"""
Display metadata lookup for votequeue.

Given a canonical video identifier, asks a noembed-compatible service for
the title and thumbnail. A response without a title means the identifier
does not name a real video; the submission is rejected rather than queued
with placeholder text.

Usage:
    from votequeue.media.enrichment import EnrichmentClient

    client = EnrichmentClient()
    info = client.lookup("dQw4w9WgXcQ")
    item = info.to_item()
"""

from dataclasses import dataclass

import requests

from votequeue.core.config import DEFAULT_ENRICHMENT_ENDPOINT, DEFAULT_TIMEOUT
from votequeue.core.exceptions import EnrichmentError, UnknownMediaError
from votequeue.core.logger import get_logger
from votequeue.media.resolver import watch_url
from votequeue.sync.models import (
    PLACEHOLDER_THUMBNAIL_LARGE,
    PLACEHOLDER_THUMBNAIL_SMALL,
    Item,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class MediaInfo:
    """
    Display metadata for one video.

    Attributes:
        video_id: Canonical identifier the lookup was made for.
        title: Video title. Never empty.
        thumbnail_small: Thumbnail for list rows (placeholder if none).
        thumbnail_large: Thumbnail for large previews (placeholder if none).
        author: Channel name, when the service reports one.
    """
    video_id: str
    title: str
    thumbnail_small: str = PLACEHOLDER_THUMBNAIL_SMALL
    thumbnail_large: str = PLACEHOLDER_THUMBNAIL_LARGE
    author: str | None = None

    def to_item(self) -> Item:
        """Build the queue item for a fresh submission (score 0, not voted)."""
        return Item(
            id=self.video_id,
            title=self.title,
            thumbnail_small=self.thumbnail_small,
            thumbnail_large=self.thumbnail_large,
        )


class EnrichmentClient:
    """
    HTTP client for the metadata lookup service.

    Attributes:
        endpoint: Lookup endpoint, queried as {endpoint}?url=<watch url>.
        timeout: Per-request timeout in seconds.

    Thread Safety:
        lookup() may be called from several threads; requests.Session is
        safe for concurrent simple GETs.
    """

    def __init__(
        self,
        endpoint: str = DEFAULT_ENRICHMENT_ENDPOINT,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None
    ) -> None:
        self.endpoint = endpoint
        self.timeout = timeout
        self._session = session or requests.Session()

    def lookup(self, video_id: str) -> MediaInfo:
        """
        Fetch display metadata for a video.

        Args:
            video_id: Canonical identifier from the resolver.

        Returns:
            MediaInfo with title and thumbnails.

        Raises:
            UnknownMediaError: If the service answered without a title.
            EnrichmentError: If the service is unreachable, answers with an
                             error status, or returns something that is not
                             a JSON object.
        """
        url = watch_url(video_id)
        logger.debug(f"Looking up metadata for {video_id}")

        try:
            response = self._session.get(
                self.endpoint,
                params={"url": url},
                timeout=self.timeout
            )
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.RequestException as e:
            raise EnrichmentError(
                f"Metadata lookup failed for {video_id}: {e}",
                details={"item_id": video_id, "url": url, "original_error": str(e)}
            ) from e
        except ValueError as e:
            raise EnrichmentError(
                f"Metadata lookup returned invalid JSON for {video_id}",
                details={"item_id": video_id, "original_error": str(e)}
            ) from e

        if not isinstance(data, dict):
            raise EnrichmentError(
                f"Metadata lookup returned unexpected payload for {video_id}",
                details={"item_id": video_id}
            )

        title = data.get("title")
        if not isinstance(title, str) or not title.strip():
            raise UnknownMediaError(
                f"Invalid video URL: no title found for {video_id}",
                details={"item_id": video_id, "service_error": data.get("error")}
            )

        thumbnail = data.get("thumbnail_url")
        return MediaInfo(
            video_id=video_id,
            title=title.strip(),
            thumbnail_small=thumbnail or PLACEHOLDER_THUMBNAIL_SMALL,
            thumbnail_large=thumbnail or PLACEHOLDER_THUMBNAIL_LARGE,
            author=data.get("author_name"),
        )

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self._session.close()
