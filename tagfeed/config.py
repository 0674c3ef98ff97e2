"""Configuration management for the feed filter."""

import os
from dataclasses import dataclass
from enum import Enum


class MatchMode(str, Enum):
    """How an article's relevance is decided."""

    CONTENT = "content"
    TAGS = "tags"


@dataclass(frozen=True)
class FeedConfig:
    """Immutable settings for one run."""

    source_url: str
    keywords: tuple[str, ...]
    self_url: str
    feed_title: str
    user_agent: str
    match_mode: MatchMode = MatchMode.TAGS
    tag_prefix: str = "/blog/tags/"
    output_file: str = "nutrient-ios-swift.xml"
    request_timeout: float = 30.0

    @property
    def keyword_set(self) -> frozenset[str]:
        """Keywords normalized for comparison."""
        return frozenset(keyword.lower() for keyword in self.keywords)


def parse_keywords(raw: str) -> list[str]:
    """Split a comma-separated keyword list.

    Entries are trimmed, empty entries dropped and case-insensitive duplicates
    removed, keeping the first spelling for display.
    """
    keywords = []
    seen = set()
    for part in raw.split(","):
        keyword = part.strip()
        if not keyword or keyword.lower() in seen:
            continue
        seen.add(keyword.lower())
        keywords.append(keyword)
    return keywords


def normalize_tag_prefix(prefix: str) -> str:
    """Return the tag prefix as an absolute path ending with a slash."""
    prefix = prefix.strip()
    if not prefix.startswith("/"):
        prefix = "/" + prefix
    if not prefix.endswith("/"):
        prefix += "/"
    return prefix


class Config:
    """Main configuration manager."""

    DEFAULT_SOURCE = "https://www.nutrient.io/blog/feed.xml"
    DEFAULT_KEYWORDS = "iOS,Objective-C,Swift,SwiftUI"
    DEFAULT_FEED_TITLE = "Nutrient Blog: iOS & Swift (filtered)"
    DEFAULT_OUTPUT_FILE = "nutrient-ios-swift.xml"
    DEFAULT_TAG_PREFIX = "/blog/tags/"
    PLACEHOLDER_OWNER = "YOUR_USERNAME"
    USER_AGENT = "TagFeed/1.0"

    def __init__(self):
        """Initialize configuration from environment variables."""
        self.source_url = os.getenv("SOURCE") or self.DEFAULT_SOURCE
        self.raw_keywords = os.getenv("KEYWORDS") or self.DEFAULT_KEYWORDS
        self.owner = os.getenv("GITHUB_REPOSITORY_OWNER", "").strip()
        self.self_url = os.getenv("SELF_URL", "").strip()
        self.feed_title = os.getenv("FEED_TITLE") or self.DEFAULT_FEED_TITLE
        self.output_file = os.getenv("OUTPUT_FILE") or self.DEFAULT_OUTPUT_FILE
        self.match_mode = os.getenv("MATCH_MODE") or MatchMode.TAGS.value
        self.tag_prefix = os.getenv("TAG_PREFIX") or self.DEFAULT_TAG_PREFIX
        self.request_timeout = os.getenv("REQUEST_TIMEOUT", "30")
        self.log_level = os.getenv("LOG_LEVEL", "INFO")

    def get_keywords(self) -> list[str]:
        """Get the configured filter terms."""
        keywords = parse_keywords(self.raw_keywords)
        if not keywords:
            raise ValueError("KEYWORDS must contain at least one non-empty term")
        return keywords

    def get_self_url(self) -> str:
        """Get the URL the output feed is published at."""
        if self.self_url:
            return self.self_url
        owner = self.owner or self.PLACEHOLDER_OWNER
        filename = os.path.basename(self.output_file)
        return f"https://{owner}.github.io/{filename}"

    def get_user_agent(self) -> str:
        """Get the User-Agent header sent with every request."""
        if self.owner:
            return f"{self.USER_AGENT} (+https://github.com/{self.owner})"
        return self.USER_AGENT

    def get_match_mode(self) -> MatchMode:
        """Get the classification mode."""
        try:
            return MatchMode(self.match_mode.strip().lower())
        except ValueError:
            choices = ", ".join(mode.value for mode in MatchMode)
            raise ValueError(
                f"Invalid MATCH_MODE {self.match_mode!r}, expected one of: {choices}"
            ) from None

    def get_request_timeout(self) -> float:
        """Get the per-request timeout in seconds."""
        try:
            timeout = float(self.request_timeout)
        except ValueError:
            raise ValueError(
                f"Invalid REQUEST_TIMEOUT {self.request_timeout!r}"
            ) from None
        if timeout <= 0:
            raise ValueError(f"REQUEST_TIMEOUT must be positive, got {timeout}")
        return timeout

    def get_feed_config(self) -> FeedConfig:
        """Get the immutable configuration for a run."""
        return FeedConfig(
            source_url=self.source_url.strip(),
            keywords=tuple(self.get_keywords()),
            self_url=self.get_self_url(),
            feed_title=self.feed_title,
            user_agent=self.get_user_agent(),
            match_mode=self.get_match_mode(),
            tag_prefix=normalize_tag_prefix(self.tag_prefix),
            output_file=self.output_file,
            request_timeout=self.get_request_timeout(),
        )
