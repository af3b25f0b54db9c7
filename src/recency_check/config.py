from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Optional


_FALSE_WORDS = frozenset({"0", "false", "no", "n", "off", "none", ""})


def _env_bool(name: str, default: bool) -> bool:
    val = os.environ.get(name)
    if val is None:
        return default
    return val.strip().lower() not in _FALSE_WORDS


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.environ.get(name, str(default)))
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.environ.get(name, str(default)))
    except ValueError:
        return default


DEFAULT_URL = "https://news.ycombinator.com/newest"
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/128.0.0.0 Safari/537.36"
)


@dataclass
class ListingSelectors:
    """Where items, titles and time labels live in the listing markup.

    The time label is read from a "metadata" row that follows each item row.
    """

    item: str = "tr.athing"
    title: str = ".titleline a"
    metadata: str = "./following-sibling::tr[1]"
    time_label: str = ".age a"


@dataclass
class CheckConfig:
    url: str = field(default_factory=lambda: os.environ.get("RECENCY_URL", DEFAULT_URL))
    fetcher: str = field(default_factory=lambda: os.environ.get("RECENCY_FETCHER", "selenium"))
    headless: bool = field(default_factory=lambda: _env_bool("RECENCY_HEADLESS", True))
    max_retries: int = field(default_factory=lambda: _env_int("RECENCY_MAX_RETRIES", 3))
    retry_base_delay: float = field(default_factory=lambda: _env_float("RECENCY_RETRY_DELAY", 1.0))
    max_items: int = field(default_factory=lambda: _env_int("RECENCY_MAX_ITEMS", 100))
    artifact_dir: Path = field(
        default_factory=lambda: Path(os.environ.get("RECENCY_ARTIFACT_DIR", "artifacts"))
    )
    viewport_width: int = 1280
    viewport_height: int = 720
    # "load" waits for the full page, "domcontentloaded" only for the DOM
    wait_until: str = "load"
    timeout: float = field(default_factory=lambda: _env_float("RECENCY_TIMEOUT", 15.0))
    user_agent: str = field(default_factory=lambda: os.environ.get("HTTP_USER_AGENT", DEFAULT_USER_AGENT))
    exhaustive: bool = False
    selectors: ListingSelectors = field(default_factory=ListingSelectors)

    def with_overrides(self, **overrides: Optional[object]) -> "CheckConfig":
        """Return a copy with every non-``None`` override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes)
