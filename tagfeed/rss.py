"""RSS feed parsing and item normalization for the feed filter."""

import hashlib
import re
import xml.sax
from dataclasses import replace
from datetime import UTC, datetime
from email.utils import format_datetime, parsedate_to_datetime

import feedparser
from dateutil import parser as date_parser

from .exceptions import ParseError
from .logging_config import create_execution_logger
from .models import FeedItem

GUID_SCHEME = "urn:guid:"

# Values that already carry a zone in RFC-822 style are passed through as is.
_RFC822_ZONE = re.compile(r"GMT|[+-]\d{4}")


def derive_guid(link: str, title: str) -> str:
    """Build a stable identifier for an item that has no guid upstream."""
    digest = hashlib.sha1(f"{link}|{title}".encode("utf-8")).hexdigest()
    return f"{GUID_SCHEME}{digest}"


def format_rfc822(moment: datetime) -> str:
    """Render a datetime as an RFC-822 date in GMT."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return format_datetime(moment.astimezone(UTC), usegmt=True)


def _default_moment(now: datetime | None) -> datetime:
    """Naive UTC midnight of now, the base that partial dates are completed from."""
    moment = now or datetime.now(UTC)
    if moment.tzinfo is not None:
        moment = moment.astimezone(UTC)
    return moment.replace(hour=0, minute=0, second=0, microsecond=0, tzinfo=None)


def parse_pub_date(value: str, now: datetime | None = None) -> datetime | None:
    """Parse a publish date into an aware datetime, or None if it is unreadable.

    Parts missing from a partial date such as "10:00" or "Tuesday" are taken
    from the UTC day of now.
    """
    if not value or not value.strip():
        return None
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        try:
            parsed = date_parser.parse(value, default=_default_moment(now))
        except (ValueError, OverflowError):
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def normalize_pub_date(value: str, now: datetime) -> str:
    """Return the publish date as RFC-822 text.

    Args:
        value: Raw pubDate from the upstream feed
        now: Time used when the value is missing or unreadable

    Returns:
        The value unchanged if it already looks RFC-822, otherwise a
        reformatted GMT date
    """
    if value and _RFC822_ZONE.search(value):
        return value
    parsed = parse_pub_date(value, now)
    return format_rfc822(parsed or now)


def enrich_item(item: FeedItem, now: datetime) -> FeedItem:
    """Fill in the guid and normalize the publish date of an included item."""
    return replace(
        item,
        guid=item.guid or derive_guid(item.link, item.title),
        pub_date=normalize_pub_date(item.pub_date, now),
    )


class FeedParser:
    """Turns an upstream RSS document into FeedItem candidates."""

    def __init__(self, execution_id: str | None = None):
        self.logger = create_execution_logger("feed_parser", execution_id)

    def parse_feed(self, content: bytes, feed_url: str = "") -> list[FeedItem]:
        """Parse an RSS document.

        Documents recognized as RSS but without a channel, or with an empty one,
        yield no items.

        Args:
            content: Raw feed bytes
            feed_url: Source URL, used for logging only

        Returns:
            Items in upstream order

        Raises:
            ParseError: If the document is not well-formed XML or not RSS
        """
        feed = feedparser.parse(
            content, sanitize_html=False, resolve_relative_uris=False
        )

        if feed.get("bozo"):
            exc = feed.get("bozo_exception")
            if isinstance(exc, xml.sax.SAXException):
                raise ParseError(f"Feed {feed_url} is not well-formed XML: {exc}")
            self.logger.warning(
                f"Feed parsing warning for {feed_url}: {exc}",
                feed_url=feed_url,
            )

        version = feed.get("version", "")
        if not version.startswith("rss"):
            raise ParseError(
                f"Feed {feed_url} is not an RSS document (detected: {version or 'unknown'})"
            )

        items = [self.normalize_item(entry) for entry in feed.entries]
        self.logger.log_feed_processing(feed_url, len(items))
        return items

    def normalize_item(self, entry: dict) -> FeedItem:
        """Map a feedparser entry to a FeedItem, using empty strings for missing text."""
        categories = tuple(
            tag.get("term") for tag in entry.get("tags") or [] if tag.get("term")
        )
        return FeedItem(
            title=entry.get("title") or "",
            link=(entry.get("link") or "").strip(),
            guid=entry.get("id") or "",
            pub_date=entry.get("published") or "",
            description=entry.get("summary") or "",
            categories=categories,
        )
