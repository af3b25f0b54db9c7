from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

import pytest

from recency_check.config import CheckConfig
from recency_check.errors import ExtractionError
from recency_check.services.fetchers import PageFetcher


ROW = """
    <tr class="athing" id="{i}">
      <td class="title"><span class="titleline"><a href="item?id={i}">{title}</a></span></td>
    </tr>
    <tr>
      <td class="subtext"><span class="subline">
        <span class="score">1 point</span>
        <span class="age" title="2024-01-01T00:00:00"><a href="item?id={i}">{label}</a></span>
      </span></td>
    </tr>
    <tr class="spacer"></tr>
"""


def render_listing(rows: Sequence[Tuple[str, str]]) -> str:
    body = "".join(ROW.format(i=i, title=title, label=label) for i, (title, label) in enumerate(rows))
    return f"<html><body><table>{body}</table></body></html>"


class FakeFetcher(PageFetcher):
    """In-memory fetcher: items are (title, label) pairs, ``None`` marks a missing field."""

    def __init__(self, rows: Sequence[Tuple[Optional[str], Optional[str]]], goto_failures: int = 0) -> None:
        self.rows = list(rows)
        self.goto_failures = goto_failures
        self.goto_calls: List[str] = []
        self.captured: List[Path] = []
        self.closed = False

    def goto(self, url: str, wait_until: str = "load") -> None:
        self.goto_calls.append(url)
        if len(self.goto_calls) <= self.goto_failures:
            raise ConnectionError("connection reset")

    def items(self, limit: Optional[int] = None) -> list:
        return self.rows[:limit] if limit is not None else list(self.rows)

    def read_title(self, item, position: int) -> str:
        if item[0] is None:
            raise ExtractionError(position, "title")
        return item[0]

    def read_time_label(self, item, position: int) -> str:
        if item[1] is None:
            raise ExtractionError(position, "time label")
        return item[1]

    def capture(self, stem: Path) -> Optional[Path]:
        path = stem.with_suffix(".txt")
        path.write_text("snapshot", encoding="utf-8")
        self.captured.append(path)
        return path

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def now() -> datetime:
    return datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def config(tmp_path: Path) -> CheckConfig:
    return CheckConfig(
        url="http://example.com/newest",
        max_retries=3,
        retry_base_delay=0.0,
        artifact_dir=tmp_path / "artifacts",
    )


@pytest.fixture
def fake_fetcher() -> Callable[..., FakeFetcher]:
    return FakeFetcher


@pytest.fixture
def listing_html() -> Callable[[Sequence[Tuple[str, str]]], str]:
    return render_listing
