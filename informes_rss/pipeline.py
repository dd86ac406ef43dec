"""Command-line entry point that refreshes the informes feed."""

import sys
from dataclasses import replace
from datetime import UTC, datetime
from typing import Any

from .config import Config
from .errors import FeedNotFoundError
from .feed_store import FeedStore
from .logging_config import (
    ExecutionLogger,
    create_execution_logger,
    setup_structured_logging,
)
from .reconcile import reconcile
from .run_log import write_run_log
from .scraper import InformeScraper

USAGE = "Uso: informes-rss <arquivo_de_saida.xml>"


def run(
    output_path: str,
    config: Config,
    scraper: InformeScraper | None = None,
    execution_id: str | None = None,
) -> dict[str, Any]:
    """Scrape the page, merge it into the feed at output_path and log changes.

    The feed is written only after every item has been reconciled, and the
    run log only after the feed, so a failure leaves the previous feed intact.

    Args:
        output_path: Location of the RSS document to maintain
        config: Loaded configuration
        scraper: Scraper to use; built from config when omitted
        execution_id: Execution ID for logging context

    Returns:
        Run metrics

    Raises:
        InformesError: On any fetch, parse, storage or entropy failure
    """
    logger = create_execution_logger("main", execution_id)
    logger.log_execution_start(feed_path=output_path)

    try:
        metrics = _refresh(output_path, config, scraper, logger)
    except Exception as e:
        logger.log_execution_end(success=False, error=str(e))
        raise

    logger.log_metrics(metrics)
    logger.log_execution_end(success=True)
    return metrics


def _refresh(
    output_path: str,
    config: Config,
    scraper: InformeScraper | None,
    logger: ExecutionLogger,
) -> dict[str, Any]:
    if scraper is None:
        scraper_config = config.get_scraper_config()
        scraper = InformeScraper(
            source_url=scraper_config.source_url,
            timeout=scraper_config.timeout,
            execution_id=logger.execution_id,
        )
    candidates = scraper.fetch()

    store = FeedStore(output_path, execution_id=logger.execution_id)
    try:
        persisted = store.load()
    except FeedNotFoundError:
        logger.info("Starting a new feed", feed_path=output_path)
        persisted = []

    result = reconcile(persisted, candidates, config.max_items)
    for title in result.changed_titles:
        action = "rejected_by_bound" if title in result.rejected_titles else "updated"
        logger.log_item_processing(title, action)

    channel = replace(config.get_channel(), last_build_date=datetime.now(UTC))
    store.save(result.items, channel)
    write_run_log(config.run_log_path, result)

    metrics = {
        "items_scraped": len(candidates),
        "items_persisted": len(result.items),
        "items_changed": len(result.changed_titles),
        "items_rejected": len(result.rejected_titles),
        "bootstrap": result.bootstrap,
    }
    return metrics


def main(argv: list[str] | None = None) -> int:
    """Run the feed builder from the command line.

    Returns:
        Process exit code: 0 on success or on a usage message, 1 on failure
    """
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 1:
        print(USAGE)
        return 0

    logger = create_execution_logger("main")
    try:
        config = Config()
        setup_structured_logging(config.log_level)
        run(args[0], config, execution_id=logger.execution_id)
    except Exception as e:
        logger.critical(f"Fatal error while updating feed: {e}", error=str(e))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
