"""
HTTP session for the authoritative queue service.

Wraps a requests.Session bound to the service base URL and translates
transport failures into the project's RemoteError subclasses, so the
ledger and fetch clients only deal with decoded JSON or one exception
type each.

Usage:
    from votequeue.remote.session import ApiSession
    from votequeue.core.exceptions import FetchError

    api = ApiSession("http://localhost:3000", timeout=10)
    data = api.request_json("GET", "/api/streams/my", error_cls=FetchError)
"""

from typing import Any

import requests

from votequeue.core.config import DEFAULT_TIMEOUT, ServerConfig
from votequeue.core.exceptions import RemoteError
from votequeue.core.logger import get_logger

logger = get_logger(__name__)


USER_AGENT = "votequeue/0.1"


class ApiSession:
    """
    Shared HTTP session for one queue service.

    Attributes:
        base_url: Service root without trailing slash.
        timeout: Per-request timeout in seconds.

    Thread Safety:
        Used concurrently by the reconcile timer thread and the vote
        workers. requests.Session is safe for this pattern as long as
        its configuration is not changed after construction.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        headers: dict[str, str] | None = None,
        session: requests.Session | None = None
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update({"User-Agent": USER_AGENT, "Accept": "application/json"})
        if headers:
            self._session.headers.update(headers)

    @classmethod
    def from_config(cls, server: ServerConfig) -> "ApiSession":
        """Create a session from the 'server' configuration section."""
        return cls(server.base_url, timeout=server.timeout, headers=server.headers)

    def url_for(self, path: str) -> str:
        """Absolute URL for a service path."""
        return f"{self.base_url}/{path.lstrip('/')}"

    def request_json(
        self,
        method: str,
        path: str,
        error_cls: type[RemoteError] = RemoteError,
        **kwargs: Any
    ) -> Any:
        """
        Perform a request and decode the JSON response.

        Args:
            method: HTTP method ("GET", "POST").
            path: Service path, e.g. "/api/streams/my".
            error_cls: RemoteError subclass to raise on failure.
            **kwargs: Passed to requests.Session.request (json=, params=).

        Returns:
            Decoded JSON body.

        Raises:
            error_cls: With is_network_error=True if no response arrived,
                       with status_code set on non-2xx responses, or
                       without either when the body is not valid JSON.
        """
        url = self.url_for(path)
        kwargs.setdefault("timeout", self.timeout)

        try:
            response = self._session.request(method, url, **kwargs)
        except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as e:
            raise error_cls(
                f"Queue service unreachable: {method} {path}",
                details={"url": url, "original_error": str(e)},
                is_network_error=True
            ) from e
        except requests.exceptions.RequestException as e:
            raise error_cls(
                f"Request failed: {method} {path}: {e}",
                details={"url": url, "original_error": str(e)}
            ) from e

        if not response.ok:
            raise error_cls(
                f"HTTP {response.status_code} from {path}",
                details={"url": url, "http_status": response.status_code, "body": response.text[:200]},
                status_code=response.status_code
            )

        try:
            return response.json()
        except ValueError as e:
            raise error_cls(
                f"Invalid JSON from {path}",
                details={"url": url, "original_error": str(e)},
                status_code=response.status_code
            ) from e

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self._session.close()
