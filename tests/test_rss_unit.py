"""Unit tests for RSS feed parsing and item normalization."""

from datetime import UTC, datetime, timedelta, timezone

import pytest

from tagfeed.exceptions import ParseError
from tagfeed.models import FeedItem
from tagfeed.rss import (
    FeedParser,
    derive_guid,
    enrich_item,
    normalize_pub_date,
    parse_pub_date,
)

NOW = datetime(2024, 5, 6, 7, 8, 9, tzinfo=UTC)

DESCRIPTION_HTML = (
    '<p>Views and <a href="/blog/modifiers">modifiers</a></p>'
    "<script>track()</script>"
    '<iframe src="https://video.example.com/embed"></iframe>'
    '<img src="hero.png" onerror="fallback()">'
)

RSS_FEED = b"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>Example Blog</title>
    <link>https://example.com/blog</link>
    <description>All posts</description>
    <item>
      <title>Building with SwiftUI</title>
      <link>https://example.com/blog/swiftui</link>
      <guid isPermaLink="false">post-1</guid>
      <pubDate>Mon, 01 Jan 2024 10:00:00 GMT</pubDate>
      <description><![CDATA[%b]]></description>
      <category>iOS</category>
      <category domain="https://example.com/tags">Swift</category>
    </item>
    <item>
      <title>Kotlin coroutines</title>
      <link>https://example.com/blog/kotlin</link>
      <pubDate>2024-01-02T08:30:00Z</pubDate>
    </item>
    <item>
      <title>Draft without a link</title>
    </item>
  </channel>
</rss>
""" % DESCRIPTION_HTML.encode("utf-8")


class TestFeedParserUnit:
    """Unit tests for FeedParser."""

    def setup_method(self):
        self.parser = FeedParser()

    def test_rss_2_0_parsing(self):
        """Items come back in upstream order with every field extracted."""
        items = self.parser.parse_feed(RSS_FEED, "https://example.com/feed.xml")

        assert len(items) == 3
        first = items[0]
        assert isinstance(first, FeedItem)
        assert first.title == "Building with SwiftUI"
        assert first.link == "https://example.com/blog/swiftui"
        assert first.guid == "post-1"
        assert first.pub_date == "Mon, 01 Jan 2024 10:00:00 GMT"
        assert first.description == DESCRIPTION_HTML
        assert first.categories == ("iOS", "Swift")

    def test_missing_fields_become_empty_strings(self):
        items = self.parser.parse_feed(RSS_FEED)

        second = items[1]
        assert second.guid == ""
        assert second.description == ""
        assert second.categories == ()

        third = items[2]
        assert third.title == "Draft without a link"
        assert third.link == ""
        assert third.pub_date == ""

    def test_single_category_is_a_sequence(self):
        feed = b"""<rss version="2.0"><channel><title>t</title>
        <item><title>One</title><link>https://example.com/1</link>
        <category>Solo</category></item></channel></rss>"""

        items = self.parser.parse_feed(feed)

        assert items[0].categories == ("Solo",)

    def test_malformed_xml_raises_parse_error(self):
        feed = b"<rss version='2.0'><channel><item><title>Broken</channel></rss>"

        with pytest.raises(ParseError, match="not well-formed"):
            self.parser.parse_feed(feed, "https://example.com/feed.xml")

    def test_non_rss_document_raises_parse_error(self):
        atom = b"""<?xml version="1.0" encoding="utf-8"?>
        <feed xmlns="http://www.w3.org/2005/Atom"><title>Atom</title></feed>"""

        with pytest.raises(ParseError, match="not an RSS document"):
            self.parser.parse_feed(atom)

    def test_rss_without_channel_yields_no_items(self):
        assert self.parser.parse_feed(b'<rss version="2.0"></rss>') == []

    def test_empty_channel_yields_no_items(self):
        feed = b'<rss version="2.0"><channel><title>Empty</title></channel></rss>'

        assert self.parser.parse_feed(feed) == []


class TestItemNormalizationUnit:
    """Unit tests for guid and date normalization."""

    def test_derived_guid_format(self):
        guid = derive_guid("https://example.com/a", "A")

        assert guid.startswith("urn:guid:")
        assert len(guid) == len("urn:guid:") + 40
        assert guid == derive_guid("https://example.com/a", "A")
        assert guid != derive_guid("https://example.com/b", "A")

    @pytest.mark.parametrize(
        "value",
        [
            "Mon, 01 Jan 2024 10:00:00 GMT",
            "Mon, 01 Jan 2024 10:00:00 +0100",
            "Mon, 01 Jan 2024 10:00:00 -0500",
        ],
    )
    def test_rfc822_dates_pass_through(self, value):
        assert normalize_pub_date(value, NOW) == value

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("2024-01-02T08:30:00Z", "Tue, 02 Jan 2024 08:30:00 GMT"),
            ("2024-01-02T08:30:00+02:00", "Tue, 02 Jan 2024 06:30:00 GMT"),
            ("2024-01-02", "Tue, 02 Jan 2024 00:00:00 GMT"),
            ("January 3, 2024 12:00", "Wed, 03 Jan 2024 12:00:00 GMT"),
        ],
    )
    def test_other_dates_are_reformatted(self, value, expected):
        assert normalize_pub_date(value, NOW) == expected

    @pytest.mark.parametrize("value", ["", "   ", "not a date"])
    def test_unreadable_dates_fall_back_to_now(self, value):
        assert normalize_pub_date(value, NOW) == "Mon, 06 May 2024 07:08:09 GMT"

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("10:00", "Mon, 06 May 2024 10:00:00 GMT"),
            ("Tuesday", "Tue, 07 May 2024 00:00:00 GMT"),
            ("March 5", "Tue, 05 Mar 2024 00:00:00 GMT"),
        ],
    )
    def test_partial_dates_are_completed_from_now(self, value, expected):
        assert normalize_pub_date(value, NOW) == expected

    def test_partial_dates_use_the_utc_day_of_now(self):
        late_evening = datetime(2024, 5, 6, 23, 30, tzinfo=timezone(timedelta(hours=-5)))

        assert normalize_pub_date("10:00", late_evening) == "Tue, 07 May 2024 10:00:00 GMT"

    def test_parse_pub_date_handles_both_forms(self):
        expected = datetime(2024, 1, 1, 10, 0, tzinfo=UTC)

        assert parse_pub_date("Mon, 01 Jan 2024 10:00:00 GMT") == expected
        assert parse_pub_date("2024-01-01T10:00:00Z") == expected
        assert parse_pub_date("") is None
        assert parse_pub_date("garbage") is None

    def test_enrich_item_keeps_upstream_guid(self):
        item = FeedItem(title="A", link="https://example.com/a", guid="upstream")

        enriched = enrich_item(item, NOW)

        assert enriched.guid == "upstream"
        assert enriched.pub_date == "Mon, 06 May 2024 07:08:09 GMT"
        assert item.pub_date == ""

    def test_enrich_item_derives_missing_guid(self):
        item = FeedItem(
            title="A",
            link="https://example.com/a",
            pub_date="Mon, 01 Jan 2024 10:00:00 GMT",
        )

        enriched = enrich_item(item, NOW)

        assert enriched.guid == derive_guid("https://example.com/a", "A")
        assert enriched.pub_date == "Mon, 01 Jan 2024 10:00:00 GMT"
