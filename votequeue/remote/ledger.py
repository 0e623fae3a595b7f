"""
Vote submission to the authoritative queue service.

One endpoint per direction, keyed by the item identifier:

    POST /api/streams/upvote     {"streamId": "<id>"}
    POST /api/streams/downvote   {"streamId": "<id>"}

The service treats a repeated vote in the same direction as a no-op, so
submissions are safe to repeat. This client never retries on its own; a
failed vote is recovered by the engine through a full reconciliation.
"""

from dataclasses import dataclass
from typing import Any

from votequeue.core.exceptions import VoteError
from votequeue.core.logger import get_logger
from votequeue.remote.session import ApiSession
from votequeue.sync.models import VoteDirection

logger = get_logger(__name__)


VOTE_PATH_TEMPLATE = "/api/streams/{direction}"


@dataclass(frozen=True)
class VoteReceipt:
    """
    Confirmation returned by the service for an accepted vote.

    Attributes:
        item_id: Identifier the vote was for.
        direction: Direction that was submitted.
        message: The service's confirmation flag/text, if any.
    """
    item_id: str
    direction: VoteDirection
    message: Any = None


class VoteLedgerClient:
    """
    Sends upvote/downvote intents to the queue service.

    Example:
        ledger = VoteLedgerClient(api)
        receipt = ledger.submit_vote("dQw4w9WgXcQ", VoteDirection.UPVOTE)
    """

    def __init__(self, api: ApiSession) -> None:
        self._api = api

    def submit_vote(self, item_id: str, direction: VoteDirection) -> VoteReceipt:
        """
        Submit one vote.

        Args:
            item_id: Identifier of the queued item.
            direction: UPVOTE or DOWNVOTE.

        Returns:
            VoteReceipt when the service accepted the vote.

        Raises:
            VoteError: If the service rejected the vote or could not be
                       reached. is_network_error tells the two apart for
                       logging; the engine handles both the same way.
        """
        path = VOTE_PATH_TEMPLATE.format(direction=direction.value)
        logger.debug(f"Submitting {direction.value} for {item_id}")

        data = self._api.request_json(
            "POST",
            path,
            error_cls=VoteError,
            json={"streamId": item_id}
        )

        message = data.get("message") if isinstance(data, dict) else None
        return VoteReceipt(item_id=item_id, direction=direction, message=message)
