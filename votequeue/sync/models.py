"""
Data models for the shared playback queue.

Design Decisions:
    - Item is frozen: the engine swaps whole items instead of mutating
      fields, so snapshots handed to other components never change under
      them.
    - The vote flag and the score only move together, through
      Item.with_vote_toggled().
    - Field names follow Python conventions; from_api()/to_api() translate
      to the queue service's JSON keys.

Usage:
    from votequeue.sync.models import Item, VoteDirection

    item = Item.from_api({"id": "dQw4w9WgXcQ", "title": "Song", "upvotes": 3})
    direction = VoteDirection.for_toggle(item.voted_by_local_user)
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any


PLACEHOLDER_THUMBNAIL_SMALL = "/api/placeholder/120/90"
PLACEHOLDER_THUMBNAIL_LARGE = "/api/placeholder/480/360"


class VoteDirection(Enum):
    """
    Direction of a vote intent.

    The value is the path segment of the matching endpoint on the queue
    service (/api/streams/upvote, /api/streams/downvote).
    """
    UPVOTE = "upvote"
    DOWNVOTE = "downvote"

    @classmethod
    def for_toggle(cls, currently_voted: bool) -> "VoteDirection":
        """Direction that flips the given vote state."""
        return cls.DOWNVOTE if currently_voted else cls.UPVOTE

    @property
    def delta(self) -> int:
        """Score adjustment this direction applies."""
        return 1 if self is VoteDirection.UPVOTE else -1

    @property
    def notice(self) -> str:
        """Confirmation text shown once the service accepts the vote."""
        if self is VoteDirection.UPVOTE:
            return "Successfully Upvoted !!"
        return "Successfully Downvoted !!"


@dataclass(frozen=True)
class Item:
    """
    Immutable representation of one queued video.

    Attributes:
        id: Canonical identifier. An 11-character YouTube id in practice,
            but treated as an opaque key everywhere in the engine.
            Example: "dQw4w9WgXcQ"

        title: Display title from the metadata lookup.
               Example: "Rick Astley - Never Gonna Give You Up"

        thumbnail_small: Small thumbnail reference for list rows.

        thumbnail_large: Large thumbnail reference.

        score: Net vote count. May be negative.

        voted_by_local_user: Whether this client's user has voted the item
                             up. Local-only flag; the service reports its
                             own view as "hasUpvoted".
    """

    id: str
    title: str
    thumbnail_small: str = PLACEHOLDER_THUMBNAIL_SMALL
    thumbnail_large: str = PLACEHOLDER_THUMBNAIL_LARGE
    score: int = 0
    voted_by_local_user: bool = False

    def with_vote_toggled(self) -> "Item":
        """
        Return a copy with the vote flag flipped and the score adjusted.

        Toggling on adds one to the score, toggling off removes one.
        Applying it twice returns an equal item.
        """
        direction = VoteDirection.for_toggle(self.voted_by_local_user)
        return replace(
            self,
            score=self.score + direction.delta,
            voted_by_local_user=not self.voted_by_local_user,
        )

    def fresh(self, voted: bool | None = None) -> "Item":
        """
        Return a copy reset to the state of a newly queued item.

        Args:
            voted: Initial vote state. None or False means not voted and
                   score 0; True means voted with score 1.
        """
        voted_flag = bool(voted)
        return replace(self, score=1 if voted_flag else 0, voted_by_local_user=voted_flag)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Item":
        """
        Create an Item from one entry of the queue service's stream list.

        Args:
            data: Dictionary with keys id, title, upvotes, smlImg, bigImg,
                  hasUpvoted. Only id and title are required.

        Returns:
            Item populated from the response.

        Raises:
            ValueError: If id or title is missing or empty, or upvotes is
                        not an integer.
        """
        item_id = data.get("id")
        title = data.get("title")
        if not isinstance(item_id, str) or not item_id:
            raise ValueError(f"Stream entry without id: {data!r}")
        if not isinstance(title, str) or not title:
            raise ValueError(f"Stream entry without title: {item_id}")

        upvotes = data.get("upvotes", 0)
        # bool is an int subclass; reject it explicitly
        if isinstance(upvotes, bool) or not isinstance(upvotes, int):
            raise ValueError(f"Stream entry {item_id} has non-integer upvotes: {upvotes!r}")

        return cls(
            id=item_id,
            title=title,
            thumbnail_small=data.get("smlImg") or PLACEHOLDER_THUMBNAIL_SMALL,
            thumbnail_large=data.get("bigImg") or PLACEHOLDER_THUMBNAIL_LARGE,
            score=upvotes,
            voted_by_local_user=bool(data.get("hasUpvoted", False)),
        )

    def to_api(self) -> dict[str, Any]:
        """Convert back to the queue service's JSON layout."""
        return {
            "id": self.id,
            "title": self.title,
            "upvotes": self.score,
            "smlImg": self.thumbnail_small,
            "bigImg": self.thumbnail_large,
            "hasUpvoted": self.voted_by_local_user,
        }
