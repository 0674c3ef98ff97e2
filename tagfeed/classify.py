"""Article classification: turns an article page into a relevance signal."""

from urllib.parse import unquote, urljoin, urlsplit

from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup
from bs4.element import Tag

from .config import FeedConfig, MatchMode
from .exceptions import ClassifyError
from .fetch import HttpFetcher
from .logging_config import create_execution_logger
from .models import ClassificationSignal, TagSignal, TextSignal

CONTENT_REGION_TAGS = ("article", "main")


def find_content_region(soup: BeautifulSoup) -> Tag:
    """Return the primary content region: article, then main, then the body."""
    for name in CONTENT_REGION_TAGS:
        region = soup.find(name)
        if region is not None:
            return region
    return soup.body or soup


def extract_text(region: Tag) -> str:
    """Return the lowercased text of a region with whitespace runs collapsed."""
    for element in region(["script", "style"]):
        element.decompose()
    return " ".join(region.get_text().split()).lower()


def slug_from_href(href: str, tag_prefix: str, base_url: str = "") -> str | None:
    """Return the tag slug an href points to, or None if it is not a tag link.

    >>> slug_from_href("/blog/tags/Swift-UI?utm=x", "/blog/tags/")
    'swift-ui'
    """
    try:
        path = urlsplit(urljoin(base_url, href.strip())).path
    except ValueError:
        return None
    if not path.startswith(tag_prefix):
        return None
    segment = path[len(tag_prefix):].split("/", 1)[0]
    slug = unquote(segment).strip().lower()
    return slug or None


def extract_tag_slugs(region: Tag, tag_prefix: str, base_url: str = "") -> frozenset[str]:
    """Collect the slugs of every tag link inside a region."""
    slugs = set()
    for anchor in region.find_all("a", href=True):
        slug = slug_from_href(anchor["href"], tag_prefix, base_url)
        if slug:
            slugs.add(slug)
    return frozenset(slugs)


class FullTextStrategy:
    """Uses the article text as the signal."""

    def extract(self, soup: BeautifulSoup, url: str) -> TextSignal:
        return TextSignal(extract_text(find_content_region(soup)))


class TagSlugStrategy:
    """Uses the slugs of the article's tag links as the signal."""

    def __init__(self, tag_prefix: str):
        self.tag_prefix = tag_prefix

    def extract(self, soup: BeautifulSoup, url: str) -> TagSignal:
        region = find_content_region(soup)
        return TagSignal(extract_tag_slugs(region, self.tag_prefix, url))


def build_strategy(config: FeedConfig) -> FullTextStrategy | TagSlugStrategy:
    """Pick the extraction strategy for the configured match mode."""
    if config.match_mode is MatchMode.CONTENT:
        return FullTextStrategy()
    return TagSlugStrategy(config.tag_prefix)


class ArticleClassifier:
    """Fetches article pages and extracts their classification signal."""

    def __init__(
        self,
        fetcher: HttpFetcher,
        strategy: FullTextStrategy | TagSlugStrategy,
        execution_id: str | None = None,
    ):
        self.fetcher = fetcher
        self.strategy = strategy
        self.logger = create_execution_logger("classifier", execution_id)

    def classify(self, url: str) -> ClassificationSignal:
        """Fetch an article and return its signal.

        Raises:
            FetchError: If the page cannot be downloaded
            ClassifyError: If the page cannot be parsed as HTML
        """
        html = self.fetcher.fetch(url)
        return self.classify_html(html, url)

    def classify_html(self, html: bytes | str, url: str = "") -> ClassificationSignal:
        """Extract the signal from an already downloaded page."""
        try:
            soup = BeautifulSoup(html, "html.parser")
        except ParserRejectedMarkup as e:
            raise ClassifyError(url, str(e)) from e

        signal = self.strategy.extract(soup, url)
        self.logger.debug("Classified article", item_link=url)
        return signal
