"""
Core module for votequeue.

This module provides the foundational components used throughout the application:
    - exceptions: Custom exception classes for error handling
    - config: Configuration loading and validation
    - logger: Logging system with console and file outputs
    - display: Rich rendering of queue snapshots for the terminal

Usage:
    from votequeue.core import (
        Config, load_config,
        setup_logging, get_logger,
        VoteQueueError, ConfigError
    )
"""

from votequeue.core.config import (
    Config,
    EnrichmentConfig,
    LoggingConfig,
    ServerConfig,
    SyncConfig,
    load_config,
    parse_config,
)
from votequeue.core.exceptions import (
    ConfigError,
    EnrichmentError,
    FetchError,
    RemoteError,
    ResolveError,
    UnknownItemError,
    UnknownMediaError,
    VoteError,
    VoteQueueError,
)
from votequeue.core.logger import (
    get_logger,
    log_rejected_submission,
    log_vote_failure,
    setup_logging,
    shutdown_logging,
)

__all__ = [
    # Config
    "Config",
    "ServerConfig",
    "EnrichmentConfig",
    "SyncConfig",
    "LoggingConfig",
    "load_config",
    "parse_config",
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
    # Logger
    "setup_logging",
    "get_logger",
    "log_vote_failure",
    "log_rejected_submission",
    "shutdown_logging",
]
