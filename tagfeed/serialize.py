"""RSS 2.0 rendering of the filtered feed."""

import re
from collections.abc import Sequence
from datetime import datetime
from xml.sax.saxutils import escape, quoteattr

from .config import FeedConfig, MatchMode
from .models import FeedItem
from .rss import format_rfc822, parse_pub_date

CHANNEL_LANGUAGE = "en"
CHANNEL_TTL_MINUTES = 30

# Everything outside the XML 1.0 Char production.
_INVALID_XML_CHARS = re.compile(
    r"[^\x09\x0a\x0d\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]"
)


def clean_text(value: str) -> str:
    """Remove characters that cannot appear in an XML document."""
    return _INVALID_XML_CHARS.sub("", value)


def cdata(value: str) -> str:
    """Wrap text in a CDATA section, splitting any embedded terminator."""
    value = clean_text(value).replace("]]>", "]]]]><![CDATA[>")
    return f"<![CDATA[{value}]]>"


def text(value: str) -> str:
    """Escape a plain-text element value."""
    return escape(clean_text(value))


def last_build_date(items: Sequence[FeedItem], now: datetime) -> str:
    """Latest publish date among the items, or now when there is none."""
    dates = [parse_pub_date(item.pub_date, now) for item in items]
    dates = [moment for moment in dates if moment is not None]
    return format_rfc822(max(dates) if dates else now)


def describe_filter(config: FeedConfig) -> str:
    """Human-readable statement of the filter criteria."""
    terms = ", ".join(config.keywords)
    if config.match_mode is MatchMode.CONTENT:
        return f"Filtered by content-only keywords: {terms}"
    return f"Filtered by article tags: {terms}"


def render_item(item: FeedItem) -> str:
    """Render one item element."""
    lines = [
        "    <item>",
        f"      <title>{cdata(item.title)}</title>",
        f"      <link>{text(item.link)}</link>",
        f'      <guid isPermaLink="false">{text(item.guid)}</guid>',
        f"      <pubDate>{text(item.pub_date)}</pubDate>",
        f"      <description>{cdata(item.description)}</description>",
    ]
    for category in item.categories:
        lines.append(f"      <category>{text(category)}</category>")
    lines.append("    </item>")
    return "\n".join(lines)


def render_feed(items: Sequence[FeedItem], config: FeedConfig, now: datetime) -> bytes:
    """Render the filtered items as a UTF-8 encoded RSS 2.0 document.

    Args:
        items: Enriched items, in output order
        config: Run configuration (title, self URL, keywords)
        now: Run time, used for lastBuildDate when there are no items

    Returns:
        The encoded document
    """
    parts = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<rss version="2.0"',
        '  xmlns:atom="http://www.w3.org/2005/Atom">',
        "  <channel>",
        f"    <title>{text(config.feed_title)}</title>",
        f"    <link>{text(config.self_url)}</link>",
        f"    <description>{text(describe_filter(config))}</description>",
        f"    <language>{CHANNEL_LANGUAGE}</language>",
        f"    <lastBuildDate>{last_build_date(items, now)}</lastBuildDate>",
        f"    <ttl>{CHANNEL_TTL_MINUTES}</ttl>",
        f"    <atom:link href={quoteattr(clean_text(config.self_url))} "
        'rel="self" type="application/rss+xml"/>',
    ]
    parts.extend(render_item(item) for item in items)
    parts.extend(["  </channel>", "</rss>", ""])
    return "\n".join(parts).encode("utf-8")
