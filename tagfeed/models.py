"""Data models for the feed filter."""

from dataclasses import dataclass


@dataclass(frozen=True)
class FeedItem:
    """Represents a single item of the upstream RSS feed."""

    title: str
    link: str
    guid: str = ""
    pub_date: str = ""
    description: str = ""
    categories: tuple[str, ...] = ()


@dataclass(frozen=True)
class TextSignal:
    """Lowercased, whitespace-collapsed text of an article's content region."""

    text: str


@dataclass(frozen=True)
class TagSignal:
    """Lowercased tag slugs linked from an article's content region."""

    slugs: frozenset[str]


ClassificationSignal = TextSignal | TagSignal
