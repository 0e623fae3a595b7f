"""
Configuration management for votequeue.

This module handles loading, validating, and providing access to the
application configuration stored in config.yaml.

The configuration file contains:
    - Queue service base URL, request timeout and extra headers
    - Metadata lookup endpoint
    - Polling interval and vote worker count
    - Optional directory for log files

Configuration File Location:
    By default config.yaml is read from the current working directory.
    The CLI accepts --config to point elsewhere.

Example config.yaml:
    server:
      base_url: "http://localhost:3000"
      timeout: 10
      headers:
        Cookie: "next-auth.session-token=..."

    enrichment:
      endpoint: "https://noembed.com/embed"
      timeout: 10

    sync:
      poll_interval: 8
      vote_workers: 4

    logging:
      directory: null  # Optional: write log files here
"""

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import yaml

from votequeue.core.exceptions import ConfigError


# Default configuration file name (looked up in current working directory)
CONFIG_FILENAME = "config.yaml"

DEFAULT_TIMEOUT = 10.0
DEFAULT_ENRICHMENT_ENDPOINT = "https://noembed.com/embed"
DEFAULT_POLL_INTERVAL = 8.0
DEFAULT_VOTE_WORKERS = 4


@dataclass(frozen=True)
class ServerConfig:
    """
    Queue service connection settings.

    Attributes:
        base_url: Root URL of the queue service, without trailing slash.
                  Example: "http://localhost:3000"
        timeout: Per-request timeout in seconds.
        headers: Extra headers sent with every request (for example a
                 session cookie issued by the service).
    """
    base_url: str
    timeout: float = DEFAULT_TIMEOUT
    headers: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class EnrichmentConfig:
    """
    Metadata lookup settings.

    Attributes:
        endpoint: noembed-compatible endpoint returning title/thumbnail
                  for a watch URL.
        timeout: Per-request timeout in seconds.
    """
    endpoint: str = DEFAULT_ENRICHMENT_ENDPOINT
    timeout: float = DEFAULT_TIMEOUT


@dataclass(frozen=True)
class SyncConfig:
    """
    Synchronization behavior.

    Attributes:
        poll_interval: Seconds between reconciliation fetches. Default: 8.
        vote_workers: Threads available for in-flight vote submissions
                      and forced refreshes. Default: 4.
    """
    poll_interval: float = DEFAULT_POLL_INTERVAL
    vote_workers: int = DEFAULT_VOTE_WORKERS


@dataclass(frozen=True)
class LoggingConfig:
    """
    Log file settings.

    Attributes:
        directory: Directory for log files, or None for console only.
    """
    directory: Path | None = None


@dataclass(frozen=True)
class Config:
    """
    Complete application configuration.

    Created by load_config() and treated as immutable.

    Example:
        config = load_config()
        print(f"Queue service: {config.server.base_url}")
        print(f"Polling every {config.sync.poll_interval}s")
    """
    server: ServerConfig
    enrichment: EnrichmentConfig = field(default_factory=EnrichmentConfig)
    sync: SyncConfig = field(default_factory=SyncConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def with_base_url(self, base_url: str) -> "Config":
        """Return a copy pointing at another queue service."""
        return replace(
            self,
            server=replace(self.server, base_url=_normalize_url(base_url, "server.base_url"))
        )


def load_config(config_path: Path | None = None) -> Config:
    """
    Load and validate configuration from config.yaml.

    Args:
        config_path: Optional explicit path to config file.
                     If None, looks for config.yaml in current working directory.

    Returns:
        Config: A frozen dataclass containing all configuration values.

    Raises:
        ConfigError: If the config file is not found, has invalid YAML syntax,
                     is missing required fields, or contains invalid values.

    Behavior:
        1. Locate config file (explicit path or CWD/config.yaml)
        2. Read and parse YAML content
        3. Validate structure (required sections exist)
        4. Parse each section, applying defaults for optional ones
        5. Create and return frozen Config object
    """
    if config_path is None:
        config_path = Path.cwd() / CONFIG_FILENAME

    if not config_path.exists():
        raise ConfigError(
            f"Configuration file not found: {config_path}",
            details={"file_path": str(config_path)}
        )

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            content = f.read()
    except IOError as e:
        raise ConfigError(
            f"Failed to read configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e

    try:
        raw_config = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Invalid YAML syntax in configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e

    if not isinstance(raw_config, dict):
        raise ConfigError(
            "Configuration file must contain a YAML dictionary",
            details={"file_path": str(config_path)}
        )

    return parse_config(raw_config)


def parse_config(raw_config: dict[str, Any]) -> Config:
    """
    Build a Config from an already-parsed dictionary.

    Args:
        raw_config: Dictionary with the same layout as config.yaml.

    Returns:
        Config: Validated configuration.

    Raises:
        ConfigError: If validation fails.
    """
    _validate_config(raw_config)

    return Config(
        server=_parse_server_config(raw_config["server"]),
        enrichment=_parse_enrichment_config(_optional_section(raw_config, "enrichment")),
        sync=_parse_sync_config(_optional_section(raw_config, "sync")),
        logging=_parse_logging_config(_optional_section(raw_config, "logging")),
    )


def _validate_config(raw_config: dict[str, Any]) -> None:
    """
    Validate the raw configuration dictionary structure.

    Raises:
        ConfigError: If the required 'server' section is missing or
                     not a dictionary.
    """
    if "server" not in raw_config:
        raise ConfigError(
            "Missing required section: 'server'",
            details={"missing_section": "server"}
        )

    if not isinstance(raw_config["server"], dict):
        raise ConfigError(
            "Section 'server' must be a dictionary",
            details={"section": "server"}
        )


def _optional_section(raw_config: dict[str, Any], name: str) -> dict[str, Any]:
    section = raw_config.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigError(
            f"Section '{name}' must be a dictionary",
            details={"section": name}
        )
    return section


def _normalize_url(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(
            f"'{field_name}' must be a non-empty string",
            details={"field": field_name}
        )
    url = value.strip().rstrip("/")
    if not url.startswith(("http://", "https://")):
        raise ConfigError(
            f"'{field_name}' must be an http(s) URL",
            details={"field": field_name, "value": value}
        )
    return url


def _positive_number(value: Any, field_name: str, default: float) -> float:
    if value is None:
        return default
    # bool is an int subclass; "true" is never a valid timeout
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigError(
            f"'{field_name}' must be a positive number",
            details={"field": field_name, "value": value}
        )
    return float(value)


def _parse_server_config(server_section: dict[str, Any]) -> ServerConfig:
    """
    Parse and validate the server configuration section.

    Raises:
        ConfigError: If base_url is missing, empty or not http(s), if
                     timeout is not positive, or if headers is not a
                     mapping of strings.
    """
    base_url = _normalize_url(server_section.get("base_url", ""), "server.base_url")
    timeout = _positive_number(server_section.get("timeout"), "server.timeout", DEFAULT_TIMEOUT)

    raw_headers = server_section.get("headers") or {}
    if not isinstance(raw_headers, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in raw_headers.items()
    ):
        raise ConfigError(
            "'server.headers' must be a mapping of strings",
            details={"field": "server.headers"}
        )

    return ServerConfig(base_url=base_url, timeout=timeout, headers=dict(raw_headers))


def _parse_enrichment_config(section: dict[str, Any]) -> EnrichmentConfig:
    endpoint = section.get("endpoint")
    if endpoint is None:
        endpoint = DEFAULT_ENRICHMENT_ENDPOINT
    else:
        endpoint = _normalize_url(endpoint, "enrichment.endpoint")

    return EnrichmentConfig(
        endpoint=endpoint,
        timeout=_positive_number(section.get("timeout"), "enrichment.timeout", DEFAULT_TIMEOUT),
    )


def _parse_sync_config(section: dict[str, Any]) -> SyncConfig:
    """
    Parse and validate the sync configuration section.

    Applies defaults if section is missing or fields are not specified.

    Raises:
        ConfigError: If poll_interval is not positive or vote_workers is
                     not a positive integer.
    """
    poll_interval = _positive_number(
        section.get("poll_interval"), "sync.poll_interval", DEFAULT_POLL_INTERVAL
    )

    vote_workers = DEFAULT_VOTE_WORKERS
    raw_workers = section.get("vote_workers")
    if raw_workers is not None:
        if isinstance(raw_workers, bool) or not isinstance(raw_workers, int) or raw_workers < 1:
            raise ConfigError(
                "'sync.vote_workers' must be a positive integer",
                details={"field": "sync.vote_workers", "value": raw_workers}
            )
        vote_workers = raw_workers

    return SyncConfig(poll_interval=poll_interval, vote_workers=vote_workers)


def _parse_logging_config(section: dict[str, Any]) -> LoggingConfig:
    raw_directory = section.get("directory")
    if raw_directory is None:
        return LoggingConfig()

    if not isinstance(raw_directory, str) or not raw_directory.strip():
        raise ConfigError(
            "'logging.directory' must be a non-empty string or null",
            details={"field": "logging.directory"}
        )

    # Expand ~ and make absolute; created by setup_logging()
    return LoggingConfig(directory=Path(raw_directory.strip()).expanduser().resolve())
