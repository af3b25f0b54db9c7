"""Service layer for the listing recency checker."""

from .collector import collect_entries
from .fetchers import HtmlPageFetcher, PageFetcher, SeleniumPageFetcher, make_fetcher
from .timeparse import parse_time_ago, parse_time_label
from .validator import OrderValidator, validate_order

__all__ = [
    "HtmlPageFetcher",
    "OrderValidator",
    "PageFetcher",
    "SeleniumPageFetcher",
    "collect_entries",
    "make_fetcher",
    "parse_time_ago",
    "parse_time_label",
    "validate_order",
]
