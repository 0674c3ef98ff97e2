"""Main entry point for the feed filter."""

import sys
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from .classify import ArticleClassifier, build_strategy
from .config import Config, FeedConfig
from .exceptions import TagFeedError
from .fetch import HttpFetcher
from .logging_config import create_execution_logger, setup_structured_logging
from .match import matches
from .models import FeedItem
from .output import write_feed
from .rss import FeedParser, enrich_item
from .serialize import render_feed


@dataclass
class BuildResult:
    """Outcome of one feed build."""

    document: bytes
    items: list[FeedItem]
    metrics: dict[str, Any] = field(default_factory=dict)


def build_feed(
    config: FeedConfig,
    fetcher: HttpFetcher,
    now: datetime | None = None,
    execution_id: str | None = None,
) -> BuildResult:
    """
    Fetch the upstream feed, keep the matching items and render the result.

    Items are processed strictly one after another. A failure to fetch or
    classify one article drops that article; a failure to fetch or parse the
    upstream feed propagates.

    Args:
        config: Run configuration
        fetcher: Source of upstream and article bytes
        now: Run time; defaults to the current UTC time
        execution_id: Execution ID for logging context

    Returns:
        The rendered document, the included items and run metrics

    Raises:
        FetchError: If the upstream feed cannot be downloaded
        ParseError: If the upstream feed is not valid RSS
    """
    now = now or datetime.now(UTC)
    logger = create_execution_logger("main", execution_id)

    metrics = {
        "items_found": 0,
        "items_without_link": 0,
        "items_classified": 0,
        "items_skipped": 0,
        "items_matched": 0,
    }

    content = fetcher.fetch(config.source_url)
    candidates = FeedParser(execution_id).parse_feed(content, config.source_url)
    metrics["items_found"] = len(candidates)

    classifier = ArticleClassifier(fetcher, build_strategy(config), execution_id)

    included = []
    for item in candidates:
        if not item.link:
            metrics["items_without_link"] += 1
            continue

        try:
            signal = classifier.classify(item.link)
        except TagFeedError as e:
            logger.log_item_processing(item.link, f"skipped ({e})", success=False)
            metrics["items_skipped"] += 1
            continue

        metrics["items_classified"] += 1
        if matches(signal, config.keywords):
            included.append(enrich_item(item, now))
            logger.log_item_processing(item.link, "included")
        else:
            logger.debug(f"Item not matched: {item.link}", item_link=item.link)

    metrics["items_matched"] = len(included)
    document = render_feed(included, config, now)
    return BuildResult(document=document, items=included, metrics=metrics)


def run(
    config: FeedConfig,
    fetcher: HttpFetcher | None = None,
    now: datetime | None = None,
    execution_id: str | None = None,
) -> BuildResult:
    """Build the filtered feed and write it to the configured output file."""
    own_fetcher = fetcher is None
    if own_fetcher:
        fetcher = HttpFetcher(
            config.user_agent, timeout=config.request_timeout, execution_id=execution_id
        )
    try:
        result = build_feed(config, fetcher, now=now, execution_id=execution_id)
    finally:
        if own_fetcher:
            fetcher.close()

    write_feed(config.output_file, result.document, execution_id)
    return result


def main() -> int:
    """
    Process entry point: configure from the environment and run once.

    Returns:
        Exit code, 0 on success and 1 on any failure
    """
    config_manager = Config()
    setup_structured_logging(config_manager.log_level)

    execution_id = f"run_{datetime.now(UTC).strftime('%Y%m%d_%H%M%S_%f')}"
    main_logger = create_execution_logger("main", execution_id)
    main_logger.log_execution_start()

    try:
        config = config_manager.get_feed_config()
        main_logger.info(
            "Configuration initialized",
            feed_url=config.source_url,
            match_mode=config.match_mode.value,
            keywords=list(config.keywords),
        )

        result = run(config, execution_id=execution_id)
    except Exception as e:
        error_msg = f"Critical error building feed: {e}"
        main_logger.error(error_msg, error=str(e))
        main_logger.log_execution_end(success=False, error=error_msg)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    main_logger.log_metrics(result.metrics)
    main_logger.log_execution_end(success=True, metrics=result.metrics)
    print(f"Wrote {config.output_file} with {len(result.items)} items")
    return 0
