"""HTTP fetching for the upstream feed and article pages."""

import requests

from .exceptions import FetchError, NetworkError
from .logging_config import create_execution_logger


class HttpFetcher:
    """Retrieves raw response bodies, one request at a time."""

    def __init__(
        self,
        user_agent: str,
        timeout: float = 30,
        execution_id: str | None = None,
        session: requests.Session | None = None,
    ):
        """Initialize HttpFetcher.

        Args:
            user_agent: User-Agent header sent with every request
            timeout: HTTP request timeout in seconds
            execution_id: Execution ID for logging context
            session: Optional pre-built session
        """
        self.timeout = timeout
        self.logger = create_execution_logger("fetcher", execution_id)
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": user_agent, "Accept": "*/*"})

        self.logger.info("HttpFetcher initialized", timeout=timeout)

    def fetch(self, url: str) -> bytes:
        """Download a URL and return its body.

        Args:
            url: Absolute URL to GET

        Returns:
            The raw response body

        Raises:
            NetworkError: If the server cannot be reached
            FetchError: If the response status is not 2xx
        """
        self.logger.debug("Fetching URL", feed_url=url)
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            self.logger.warning(f"Failed to reach {url}: {e}", feed_url=url)
            raise NetworkError(url, str(e)) from e

        if not 200 <= response.status_code < 300:
            self.logger.warning(
                f"Unexpected status for {url}: {response.status_code}",
                feed_url=url,
                status_code=response.status_code,
            )
            raise FetchError(url, response.status_code)

        self.logger.debug(
            "Fetched URL",
            feed_url=url,
            status_code=response.status_code,
            content_length=len(response.content),
        )
        return response.content

    def close(self) -> None:
        """Release pooled connections."""
        self.session.close()
