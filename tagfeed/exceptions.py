"""Error types raised by the feed filter components."""


class TagFeedError(Exception):
    """Base class for all feed filter errors."""


class FetchError(TagFeedError):
    """Raised when a URL answers with a non-2xx status."""

    def __init__(self, url: str, status_code: int | None, message: str | None = None):
        self.url = url
        self.status_code = status_code
        super().__init__(message or f"Fetch {url} failed: {status_code}")


class NetworkError(FetchError):
    """Raised when a URL cannot be reached at all (DNS, timeout, reset)."""

    def __init__(self, url: str, reason: str):
        self.reason = reason
        super().__init__(url, None, f"Fetch {url} failed: {reason}")


class ParseError(TagFeedError):
    """Raised when the upstream feed is not well-formed RSS."""


class ClassifyError(TagFeedError):
    """Raised when an article page cannot be turned into a classification signal."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Cannot classify {url}: {reason}")
