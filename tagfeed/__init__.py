"""
tagfeed

Builds a filtered copy of a blog's RSS feed: every linked article is fetched
and classified, and only articles tagged with (or mentioning) one of the
configured keywords are kept.

Pipeline: fetch feed -> parse -> fetch and classify each article -> match ->
render RSS 2.0 -> write file.
"""
from .config import Config, FeedConfig, MatchMode
from .handler import build_feed, main, run
from .models import FeedItem, TagSignal, TextSignal

__all__ = [
    "Config",
    "FeedConfig",
    "FeedItem",
    "MatchMode",
    "TagSignal",
    "TextSignal",
    "build_feed",
    "main",
    "run",
]
