"""Inclusion decision for classified articles."""

from collections.abc import Iterable

from .models import ClassificationSignal, TagSignal, TextSignal


def text_matches(text: str, keywords: Iterable[str]) -> bool:
    """True if any keyword occurs in the text, case-insensitively.

    This is plain substring containment, so "swift" also matches "swiftly".
    """
    haystack = text.lower()
    return any(keyword.lower() in haystack for keyword in keywords if keyword)


def tags_match(slugs: Iterable[str], keywords: Iterable[str]) -> bool:
    """True if any slug equals a keyword, case-insensitively."""
    wanted = {keyword.lower() for keyword in keywords}
    return any(slug.lower() in wanted for slug in slugs)


def matches(signal: ClassificationSignal, keywords: Iterable[str]) -> bool:
    """Decide whether a classified article belongs in the output feed."""
    if isinstance(signal, TextSignal):
        return text_matches(signal.text, keywords)
    if isinstance(signal, TagSignal):
        return tags_match(signal.slugs, keywords)
    raise TypeError(f"Unsupported signal type: {type(signal).__name__}")
