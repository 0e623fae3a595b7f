"""
Exception classes for votequeue.

This module defines all custom exceptions used throughout the application.
Each exception carries a human-readable message plus a details dictionary,
so callers can show the message and log the context.

Exception Hierarchy:
    VoteQueueError (base)
        ConfigError - Configuration file issues
        ResolveError - No media identifier in user input
        EnrichmentError - Metadata lookup transport issues
            UnknownMediaError - Lookup returned no title for the identifier
        UnknownItemError - Operation on an identifier that is not queued
        RemoteError - Authority (queue service) issues
            VoteError - Vote submission rejected or unreachable
            FetchError - Queue fetch failed
"""


class VoteQueueError(Exception):
    """
    Base exception for all votequeue errors.

    All custom exceptions in this project inherit from this class,
    allowing callers to catch every votequeue error with a single
    except clause.

    Attributes:
        message: Human-readable error description.
        details: Dictionary with additional context (e.g., item id, URL).

    Example:
        try:
            board.submit(text)
        except VoteQueueError as e:
            logger.error(f"Submit failed: {e.message}")
            if e.details:
                logger.debug(f"Details: {e.details}")
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        """
        Initialize the base exception.

        Args:
            message: Human-readable error description shown to the user.
            details: Optional dictionary with additional context. Common keys:
                     - 'item_id': Media identifier involved in the error
                     - 'url': URL that caused the error
                     - 'original_error': The wrapped exception, as text
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return the error message for display."""
        return self.message


class ConfigError(VoteQueueError):
    """
    Raised when there's an issue with the configuration file.

    This is a CRITICAL error that should stop program execution.

    Common causes:
        - config.yaml not found
        - config.yaml has invalid YAML syntax
        - Required fields missing (server.base_url)
        - Invalid field values (e.g., non-positive poll interval)
    """
    pass


class ResolveError(VoteQueueError):
    """
    Raised when user input contains no recognizable media identifier.

    Submission is rejected before any network call and no queue state
    changes.

    Example:
        raise ResolveError(
            "No video identifier found in input",
            details={'input': 'not a url'}
        )
    """
    pass


class EnrichmentError(VoteQueueError):
    """
    Raised when the metadata lookup service cannot be reached or
    returns an unusable response.

    Submission is rejected and no item is created.
    """
    pass


class UnknownMediaError(EnrichmentError):
    """
    Raised when the lookup service answers but reports no title.

    A missing title means the identifier is well-formed but does not
    name a real video. The queue never receives a placeholder item.
    """
    pass


class UnknownItemError(VoteQueueError):
    """
    Raised when an operation names an identifier that is not queued.
    """
    pass


class RemoteError(VoteQueueError):
    """
    Base class for failures talking to the authoritative queue service.

    Attributes:
        status_code: HTTP status code, or None when no response arrived.
        is_network_error: True when the service was unreachable
                          (timeout, connection refused, DNS failure).
    """

    def __init__(
        self,
        message: str,
        details: dict | None = None,
        status_code: int | None = None,
        is_network_error: bool = False
    ) -> None:
        """
        Initialize remote error with transport information.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional context.
            status_code: HTTP status of the rejecting response, if any.
            is_network_error: Set to True when no response was received.
        """
        super().__init__(message, details)
        self.status_code = status_code
        self.is_network_error = is_network_error


class VoteError(RemoteError):
    """
    Raised when a vote submission fails.

    The engine does not distinguish rejection from unreachability: both
    clear the pending vote and force a full reconciliation. The flags
    inherited from RemoteError only feed the logs.
    """
    pass


class FetchError(RemoteError):
    """
    Raised when the queue snapshot cannot be fetched or parsed.

    This is a NON-CRITICAL error: the engine keeps its local state and
    waits for the next periodic attempt.
    """
    pass
