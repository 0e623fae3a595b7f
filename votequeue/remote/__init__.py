"""
Clients for the authoritative queue service.

Components:
    - ApiSession: Shared requests session bound to the service URL
    - VoteLedgerClient: Upvote/downvote submission
    - QueueFetchClient: Queue snapshot retrieval

Usage:
    from votequeue.remote import ApiSession, QueueFetchClient, VoteLedgerClient

    api = ApiSession.from_config(config.server)
    ledger = VoteLedgerClient(api)
    fetcher = QueueFetchClient(api)
"""

from votequeue.remote.fetcher import QueueFetchClient
from votequeue.remote.ledger import VoteLedgerClient, VoteReceipt
from votequeue.remote.session import ApiSession

__all__ = [
    "ApiSession",
    "VoteLedgerClient",
    "VoteReceipt",
    "QueueFetchClient",
]
