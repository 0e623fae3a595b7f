"""
Queue snapshot fetching from the authoritative queue service.

    GET /api/streams/my  ->  {"streams": [ {id, title, upvotes, ...}, ... ]}

The returned list is the service's view of the requesting session's queue,
in the service's order. Malformed entries are skipped with a warning so a
single bad row does not block reconciliation of the rest.
"""

from votequeue.core.exceptions import FetchError
from votequeue.core.logger import get_logger
from votequeue.remote.session import ApiSession
from votequeue.sync.models import Item

logger = get_logger(__name__)


QUEUE_PATH = "/api/streams/my"


class QueueFetchClient:
    """
    Reads the authoritative queue snapshot.

    Example:
        fetcher = QueueFetchClient(api)
        items = fetcher.fetch_queue()
    """

    def __init__(self, api: ApiSession) -> None:
        self._api = api

    def fetch_queue(self) -> list[Item]:
        """
        Fetch the current queue from the service.

        Returns:
            Items in the order the service listed them.

        Raises:
            FetchError: If the request fails or the response has no
                        'streams' list.
        """
        data = self._api.request_json("GET", QUEUE_PATH, error_cls=FetchError)

        streams = data.get("streams") if isinstance(data, dict) else None
        if not isinstance(streams, list):
            raise FetchError(
                "Queue response has no 'streams' list",
                details={"url": self._api.url_for(QUEUE_PATH)}
            )

        items: list[Item] = []
        for entry in streams:
            if not isinstance(entry, dict):
                logger.warning(f"Skipping non-object stream entry: {entry!r}")
                continue
            try:
                items.append(Item.from_api(entry))
            except ValueError as e:
                logger.warning(f"Skipping malformed stream entry: {e}")

        logger.debug(f"Fetched {len(items)} queued items")
        return items
