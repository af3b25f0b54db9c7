"""Page fetchers: the boundary between the checker and a rendered listing."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, List, Optional

import requests
from scrapy.http import HtmlResponse

from recency_check.config import CheckConfig, ListingSelectors
from recency_check.errors import ExtractionError

log = logging.getLogger(__name__)


class PageFetcher:
    """Capability interface for one page session.

    Item handles returned by ``items`` are opaque to callers and only passed
    back to ``read_title`` / ``read_time_label``.
    """

    selectors: ListingSelectors

    def goto(self, url: str, wait_until: str = "load") -> None:
        raise NotImplementedError

    def items(self, limit: Optional[int] = None) -> List[Any]:
        raise NotImplementedError

    def read_title(self, item: Any, position: int) -> str:
        raise NotImplementedError

    def read_time_label(self, item: Any, position: int) -> str:
        raise NotImplementedError

    def capture(self, stem: Path) -> Optional[Path]:
        """Persist a snapshot of the current page next to ``stem``."""
        raise NotImplementedError

    def close(self) -> None:
        pass

    def __enter__(self) -> "PageFetcher":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


class HtmlPageFetcher(PageFetcher):
    """Static fetcher: plain HTTP download parsed with Scrapy selectors."""

    def __init__(
        self,
        selectors: ListingSelectors | None = None,
        timeout: float = 15.0,
        user_agent: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.selectors = selectors or ListingSelectors()
        self.timeout = timeout
        self.session = session or requests.Session()
        if user_agent:
            self.session.headers["User-Agent"] = user_agent
        self.response: Optional[HtmlResponse] = None

    @classmethod
    def from_html(
        cls, html: str, url: str = "http://localhost/", selectors: ListingSelectors | None = None
    ) -> "HtmlPageFetcher":
        """Build a fetcher already pointing at ``html`` (no network)."""
        fetcher = cls(selectors=selectors)
        fetcher.response = HtmlResponse(url=url, body=html, encoding="utf-8")
        return fetcher

    def goto(self, url: str, wait_until: str = "load") -> None:
        # Static HTML has no load phases; wait_until is accepted for parity.
        resp = self.session.get(url, timeout=self.timeout)
        resp.raise_for_status()
        self.response = HtmlResponse(
            url=resp.url, body=resp.content, encoding=resp.encoding or "utf-8"
        )
        log.debug("Fetched %s (%d bytes)", resp.url, len(resp.content))

    def _page(self) -> HtmlResponse:
        if self.response is None:
            raise RuntimeError("goto() must be called before reading items")
        return self.response

    def items(self, limit: Optional[int] = None) -> List[Any]:
        rows = self._page().css(self.selectors.item)
        return list(rows[:limit] if limit is not None else rows)

    @staticmethod
    def _text(sel: Any) -> Optional[str]:
        if not sel:
            return None
        text = sel[0].xpath("string(.)").get()
        return text.strip() if text is not None else None

    def read_title(self, item: Any, position: int) -> str:
        title = self._text(item.css(self.selectors.title))
        if not title:
            raise ExtractionError(position, "title", self.selectors.title)
        return title

    def read_time_label(self, item: Any, position: int) -> str:
        meta = item.xpath(self.selectors.metadata)
        if not meta:
            raise ExtractionError(position, "metadata row", self.selectors.metadata)
        label = self._text(meta[0].css(self.selectors.time_label))
        if not label:
            raise ExtractionError(position, "time label", self.selectors.time_label)
        return label

    def capture(self, stem: Path) -> Optional[Path]:
        if self.response is None:
            return None
        path = stem.with_suffix(".html")
        path.write_bytes(self.response.body)
        return path

    def close(self) -> None:
        self.session.close()


class SeleniumPageFetcher(PageFetcher):
    """Headless Chrome session for listings that need JS rendering."""

    # Selenium page load strategies matching the wait policies we accept.
    LOAD_STRATEGIES = {
        "load": "normal",
        "domcontentloaded": "eager",
        "commit": "none",
    }

    def __init__(
        self,
        selectors: ListingSelectors | None = None,
        headless: bool = True,
        viewport: tuple[int, int] = (1280, 720),
        wait_until: str = "load",
        user_agent: Optional[str] = None,
        driver: Any = None,
    ) -> None:
        self.selectors = selectors or ListingSelectors()
        if driver is None:
            from selenium import webdriver  # type: ignore[import-not-found]

            options = self.build_options(headless, viewport, wait_until, user_agent)
            driver = webdriver.Chrome(options=options)
        self.driver = driver

    @classmethod
    def build_options(
        cls,
        headless: bool = True,
        viewport: tuple[int, int] = (1280, 720),
        wait_until: str = "load",
        user_agent: Optional[str] = None,
    ) -> Any:
        from selenium.webdriver.chrome.options import Options  # type: ignore[import-not-found]

        options = Options()
        if headless:
            options.add_argument("--headless")
        options.add_argument(f"--window-size={viewport[0]},{viewport[1]}")
        options.add_argument("--no-sandbox")
        options.add_argument("--disable-dev-shm-usage")
        if user_agent:
            options.add_argument(f"--user-agent={user_agent}")
        options.page_load_strategy = cls.LOAD_STRATEGIES.get(wait_until, "normal")
        return options

    def goto(self, url: str, wait_until: str = "load") -> None:
        """Load ``url``.

        Chrome applies its page load strategy per session, so the wait policy
        is the one given to the constructor; ``wait_until`` here is ignored.
        """
        self.driver.get(url)

    def items(self, limit: Optional[int] = None) -> List[Any]:
        from selenium.webdriver.common.by import By  # type: ignore[import-not-found]

        rows = self.driver.find_elements(By.CSS_SELECTOR, self.selectors.item)
        return rows[:limit] if limit is not None else rows

    def _find(self, element: Any, by: str, selector: str, position: int, field: str) -> Any:
        from selenium.common.exceptions import NoSuchElementException  # type: ignore[import-not-found]

        try:
            return element.find_element(by, selector)
        except NoSuchElementException as e:
            raise ExtractionError(position, field, selector) from e

    def read_title(self, item: Any, position: int) -> str:
        from selenium.webdriver.common.by import By  # type: ignore[import-not-found]

        title = self._find(item, By.CSS_SELECTOR, self.selectors.title, position, "title").text.strip()
        if not title:
            raise ExtractionError(position, "title", self.selectors.title)
        return title

    def read_time_label(self, item: Any, position: int) -> str:
        from selenium.webdriver.common.by import By  # type: ignore[import-not-found]

        meta = self._find(item, By.XPATH, self.selectors.metadata, position, "metadata row")
        el = self._find(meta, By.CSS_SELECTOR, self.selectors.time_label, position, "time label")
        label = el.text.strip()
        if not label:
            raise ExtractionError(position, "time label", self.selectors.time_label)
        return label

    def capture(self, stem: Path) -> Optional[Path]:
        path = stem.with_suffix(".png")
        if self.driver.save_screenshot(str(path)):
            return path
        return None

    def close(self) -> None:
        self.driver.quit()


def make_fetcher(config: CheckConfig) -> PageFetcher:
    """Factory selecting the fetcher named by ``config.fetcher``."""
    if config.fetcher == "selenium":
        return SeleniumPageFetcher(
            selectors=config.selectors,
            headless=config.headless,
            viewport=(config.viewport_width, config.viewport_height),
            wait_until=config.wait_until,
            user_agent=config.user_agent,
        )
    if config.fetcher == "html":
        return HtmlPageFetcher(
            selectors=config.selectors,
            timeout=config.timeout,
            user_agent=config.user_agent,
        )
    raise ValueError(f"unknown fetcher {config.fetcher!r} (expected 'html' or 'selenium')")
