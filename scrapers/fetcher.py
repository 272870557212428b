"""Headless browser page fetching for JS-rendered schedule pages."""

import logging
from typing import Callable, Optional, TypeVar

from bs4 import BeautifulSoup
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TIMEOUT_MS = 30000


class FetchError(Exception):
    """A page did not load, or its expected markup never appeared."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"Failed to fetch {url}: {reason}")
        self.url = url
        self.reason = reason


class PageFetcher:
    """
    Loads one page per call in a fresh Chromium browser.

    The browser is always closed before fetch() returns, so no page is held
    across pacing delays or between items.
    """

    def __init__(self, headless: bool = True):
        self.headless = headless

    def fetch(
        self,
        url: str,
        extract: Callable[[BeautifulSoup, str], T],
        wait_for: Optional[str] = None,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
    ) -> T:
        """
        Render a page and run an extraction over it.

        Args:
            url: Page to load
            extract: Called with the parsed page and its final URL
            wait_for: CSS selector that must appear before the page is read
            timeout_ms: Budget for navigation and for the selector wait

        Returns:
            Whatever extract returns

        Raises:
            FetchError: If the page fails to load within the budget
        """
        logger.debug(f"Fetching {url}")
        html, page_url = self._load_html(url, wait_for, timeout_ms)
        logger.debug(f"Page content length: {len(html)}")

        soup = BeautifulSoup(html, "html.parser")
        return extract(soup, page_url)

    def _load_html(self, url: str, wait_for: Optional[str], timeout_ms: int) -> tuple[str, str]:
        """Return the rendered HTML and final URL of a page."""
        try:
            with sync_playwright() as p:
                browser = p.chromium.launch(headless=self.headless)
                try:
                    page = browser.new_page()
                    page.goto(url, wait_until="networkidle", timeout=timeout_ms)

                    if wait_for:
                        page.wait_for_selector(wait_for, timeout=timeout_ms)

                    return page.content(), page.url
                finally:
                    browser.close()

        except PlaywrightError as e:
            raise FetchError(url, str(e)) from e
