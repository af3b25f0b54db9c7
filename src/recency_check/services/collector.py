from __future__ import annotations

import logging
from datetime import datetime
from typing import List

from recency_check.config import CheckConfig
from recency_check.models import ListingEntry
from recency_check.services.fetchers import PageFetcher
from recency_check.services.timeparse import parse_time_label
from recency_check.utils.retry import retry_with_backoff

log = logging.getLogger(__name__)


def load_listing(fetcher: PageFetcher, config: CheckConfig) -> None:
    """Navigate to the listing, retrying with exponential backoff."""
    log.info("Navigating to %s", config.url)
    retry_with_backoff(
        lambda: fetcher.goto(config.url, wait_until=config.wait_until),
        max_retries=config.max_retries,
        base_delay=config.retry_base_delay,
        description=f"navigation to {config.url}",
    )


def collect_entries(fetcher: PageFetcher, config: CheckConfig, now: datetime) -> List[ListingEntry]:
    """Load the listing and return its entries in presentation order.

    Every label is parsed against the same ``now``. A row missing its title or
    time element raises ``ExtractionError`` and aborts collection.
    """
    load_listing(fetcher, config)

    log.info("Collecting up to %d items", config.max_items)
    entries: List[ListingEntry] = []
    for position, item in enumerate(fetcher.items(limit=config.max_items)):
        title = fetcher.read_title(item, position)
        label = fetcher.read_time_label(item, position)
        parsed = parse_time_label(label, now)
        if not parsed.ok:
            log.warning("Row %d (%s): %s", position, title, parsed.anomaly)
        entries.append(
            ListingEntry(
                position=position,
                title=title,
                label=label,
                instant=parsed.instant,
                anomaly=parsed.anomaly,
            )
        )
    if not entries:
        log.warning("No items matched %r", config.selectors.item)
    log.info("Collected %d items", len(entries))
    return entries
