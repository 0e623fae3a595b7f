"""
Media handling for votequeue.

Components:
    - resolve: Extract canonical video identifiers from user input
    - EnrichmentClient: Fetch title and thumbnails for an identifier
    - MediaInfo: Display metadata returned by the lookup

Usage:
    from votequeue.media import resolve, EnrichmentClient

    video_id = resolve("https://youtu.be/dQw4w9WgXcQ")
    info = EnrichmentClient().lookup(video_id)
"""

from votequeue.media.enrichment import EnrichmentClient, MediaInfo
from votequeue.media.resolver import embed_url, is_resolvable, resolve, watch_url

__all__ = [
    "resolve",
    "is_resolvable",
    "watch_url",
    "embed_url",
    "EnrichmentClient",
    "MediaInfo",
]
