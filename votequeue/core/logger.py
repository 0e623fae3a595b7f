"""
Logging configuration for votequeue.

This module sets up the logging system with multiple outputs:
    - Console: Colored, tqdm-compatible output (INFO and above)
    - log_full.log: Complete log of all events (DEBUG and above)
    - log_errors.log: Only ERROR and CRITICAL level messages
    - vote_failures.log: Votes the queue service did not confirm
    - rejected_submissions.log: Inputs refused before reaching the queue

File outputs are only created when a log directory is configured.
Each run gets its own timestamped files.

Usage:
    from votequeue.core.logger import setup_logging, get_logger

    setup_logging(log_dir)  # Call once at startup (log_dir may be None)
    logger = get_logger(__name__)  # Get logger for each module

    logger.info("Queue refreshed")
    log_vote_failure(logger, "dQw4w9WgXcQ", "Song", "upvote", "HTTP 500")
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import TextIO

from tqdm import tqdm


VOTE_FAILURES_FILENAME = "vote_failures"
REJECTED_SUBMISSIONS_FILENAME = "rejected_submissions"

# Log format for file output (detailed with timestamp)
FILE_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(threadName)s | %(name)s | %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class Colors:
    """ANSI color codes for terminal output."""
    RESET = "\033[0m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    CYAN = "\033[36m"
    WHITE = "\033[37m"
    BOLD = "\033[1m"


class ColoredConsoleFormatter(logging.Formatter):
    """
    Formatter that colors the level name for console output.

    Colors:
        - DEBUG: Blue
        - INFO: Green
        - WARNING: Yellow
        - ERROR: Red
        - CRITICAL: Bold Red
    """

    LEVEL_COLORS = {
        logging.DEBUG: Colors.BLUE,
        logging.INFO: Colors.GREEN,
        logging.WARNING: Colors.YELLOW,
        logging.ERROR: Colors.RED,
        logging.CRITICAL: Colors.BOLD + Colors.RED,
    }

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno, Colors.WHITE)
        return f"{color}{record.levelname}{Colors.RESET}: {record.getMessage()}"


class TqdmLoggingHandler(logging.Handler):
    """
    Console handler that writes through tqdm.write().

    Keeps log lines from tearing any active progress display on stderr.
    """

    def __init__(self, stream: TextIO = sys.stderr) -> None:
        super().__init__()
        self.stream = stream

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            tqdm.write(msg, file=self.stream)
        except Exception:
            self.handleError(record)


class ReportHandler(logging.Handler):
    """
    Base handler writing selected records to a plain report file.

    Only records carrying the `marker` attribute (set through the
    `extra` argument of a logging call) are written; everything else is
    ignored. Subclasses define the marker and the entry layout.

    Attributes:
        report_path: Path to the report file.
        report_file: Open file handle, or None before open().
    """

    marker = ""

    def __init__(self, report_path: Path) -> None:
        super().__init__()
        self.report_path = report_path
        self.report_file: TextIO | None = None

    def open(self) -> None:
        """
        Open the report file for writing.

        Called by setup_logging() after the handler is created.
        """
        self.report_file = open(self.report_path, "w", encoding="utf-8")

    def emit(self, record: logging.LogRecord) -> None:
        if not hasattr(record, self.marker):
            return

        if self.report_file is None:
            return

        try:
            self.acquire()
            try:
                self.report_file.write(self.format_entry(record))
                self.report_file.flush()
            finally:
                self.release()
        except Exception:
            self.handleError(record)

    def format_entry(self, record: logging.LogRecord) -> str:
        raise NotImplementedError

    def close(self) -> None:
        """
        Close the report file handle.

        Safe to call multiple times.
        """
        if self.report_file is not None:
            try:
                self.report_file.close()
            except OSError:
                pass
            self.report_file = None
        super().close()


class VoteFailureHandler(ReportHandler):
    """
    Captures vote submissions the queue service did not confirm.

    Entry format:

        2024-01-15 10:30:00 upvote dQw4w9WgXcQ Never Gonna Give You Up
        HTTP 500 from /api/streams/upvote

    Picks up records logged through log_vote_failure().
    """

    marker = "vote_failed_item_id"

    def format_entry(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime(FILE_DATE_FORMAT)
        item_id = getattr(record, "vote_failed_item_id", "")
        title = getattr(record, "vote_failed_title", "") or "??"
        direction = getattr(record, "vote_failed_direction", "")
        reason = getattr(record, "vote_failed_reason", "")
        return f"{timestamp} {direction} {item_id} {title}\n{reason}\n\n"


class RejectedSubmissionHandler(ReportHandler):
    """
    Captures user inputs that never made it into the queue.

    Entry format:

        not a url
        No video identifier found in input

    Picks up records logged through log_rejected_submission().
    """

    marker = "rejected_input"

    def format_entry(self, record: logging.LogRecord) -> str:
        raw_input = getattr(record, "rejected_input", "")
        reason = getattr(record, "rejected_reason", "")
        return f"{raw_input}\n{reason}\n\n"


class ErrorOnlyFilter(logging.Filter):
    """Filter that only allows ERROR and CRITICAL level records."""

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= logging.ERROR


def setup_logging(log_dir: Path | None = None, verbose: bool = False) -> None:
    """
    Configure the logging system for the application.

    This function should be called ONCE at application startup, after
    the configuration is loaded but before the board is activated.

    Args:
        log_dir: Directory for log files, or None for console output only.
                 Created if it doesn't exist.
        verbose: Lower the console threshold from INFO to DEBUG.

    Behavior:
        1. Reset root logger handlers, level DEBUG
        2. Console handler (TqdmLoggingHandler, colored)
        3. If log_dir is given:
           - log_full_{timestamp}.log (DEBUG+)
           - log_errors_{timestamp}.log (ERROR+ via ErrorOnlyFilter)
           - vote_failures_{timestamp}.log (VoteFailureHandler)
           - rejected_submissions_{timestamp}.log (RejectedSubmissionHandler)
        4. Quiet urllib3 connection chatter

    Thread Safety:
        NOT thread-safe. Call from the main thread before the reconcile
        timer or vote workers start.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    console_handler = TqdmLoggingHandler()
    console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    console_handler.setFormatter(ColoredConsoleFormatter())
    root_logger.addHandler(console_handler)

    logging.getLogger("urllib3").setLevel(logging.WARNING)

    if log_dir is None:
        return

    log_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")

    full_handler = logging.FileHandler(log_dir / f"log_full_{timestamp}.log", mode="w", encoding="utf-8")
    full_handler.setLevel(logging.DEBUG)
    full_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, FILE_DATE_FORMAT))
    root_logger.addHandler(full_handler)

    error_handler = logging.FileHandler(log_dir / f"log_errors_{timestamp}.log", mode="w", encoding="utf-8")
    error_handler.setLevel(logging.DEBUG)  # Filter handles the level restriction
    error_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, FILE_DATE_FORMAT))
    error_handler.addFilter(ErrorOnlyFilter())
    root_logger.addHandler(error_handler)

    vote_handler = VoteFailureHandler(log_dir / f"{VOTE_FAILURES_FILENAME}_{timestamp}.log")
    vote_handler.open()
    root_logger.addHandler(vote_handler)

    rejected_handler = RejectedSubmissionHandler(log_dir / f"{REJECTED_SUBMISSIONS_FILENAME}_{timestamp}.log")
    rejected_handler.open()
    root_logger.addHandler(rejected_handler)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: The logger name, typically __name__ of the calling module.

    Returns:
        logging.Logger configured by setup_logging().

    Note:
        Loggers obtained before setup_logging() is called have no
        handlers of their own and only propagate to the root logger.
    """
    return logging.getLogger(name)


def log_vote_failure(
    logger: logging.Logger,
    item_id: str,
    title: str | None,
    direction: str,
    reason: str
) -> None:
    """
    Log a vote the queue service did not confirm.

    Logs a WARNING (the engine recovers by reconciling) and attaches the
    extra fields VoteFailureHandler writes to vote_failures.log.

    Example:
        log_vote_failure(
            logger,
            item_id="dQw4w9WgXcQ",
            title="Never Gonna Give You Up",
            direction="upvote",
            reason="HTTP 500 from /api/streams/upvote"
        )
    """
    logger.warning(
        f"Vote not confirmed ({direction} {item_id}): {reason}",
        extra={
            "vote_failed_item_id": item_id,
            "vote_failed_title": title,
            "vote_failed_direction": direction,
            "vote_failed_reason": reason,
        }
    )


def log_rejected_submission(logger: logging.Logger, raw_input: str, reason: str) -> None:
    """
    Log a submission that was refused before reaching the queue.

    Logs a WARNING with the extra fields RejectedSubmissionHandler
    writes to rejected_submissions.log.
    """
    logger.warning(
        f"Submission rejected: {reason}",
        extra={
            "rejected_input": raw_input,
            "rejected_reason": reason,
        }
    )


def shutdown_logging() -> None:
    """
    Flush, close and detach every root handler.

    Called at application exit, typically from a finally block.
    """
    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:
        try:
            handler.flush()
            handler.close()
        except Exception:
            pass
        root_logger.removeHandler(handler)
