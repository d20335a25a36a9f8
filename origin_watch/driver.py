"""Page driving: the abstract interface the watcher consumes and a Playwright implementation."""

import logging
import re
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Iterator, List, Optional

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Page, sync_playwright

from .config import Settings
from .scrape import extract_first_heading, extract_links, extract_meta

log = logging.getLogger(__name__)

LABELLED_CONTROL = "labelled-control"
LINK_TEXT = "link-text"
EXACT_TEXT = "exact-text"
CONTAINS_TEXT = "contains-text"


class NavigationError(RuntimeError):
    """Raised when a page cannot be loaded within the call timeout."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"Navigation to {url} failed: {reason}")
        self.url = url
        self.reason = reason


class PageDriver(ABC):
    """A single driven page shared by every step of a run."""

    @abstractmethod
    def navigate(self, url: str, timeout: float) -> None:
        """Load *url*; raise NavigationError on failure or timeout."""

    @abstractmethod
    def select_by_strategy(self, kind: str, pattern: str, timeout: float) -> bool:
        """Activate the first element matched by *kind*/*pattern*; False if none could be."""

    @abstractmethod
    def extract_links(self, href_prefix: str) -> List[str]:
        """Raw href values on the current view containing *href_prefix*, in document order."""

    @abstractmethod
    def read_metadata(self, field: str) -> Optional[str]:
        pass

    @abstractmethod
    def read_first_heading_text(self) -> Optional[str]:
        pass

    @abstractmethod
    def read_document_title(self) -> Optional[str]:
        pass

    @abstractmethod
    def settle(self, seconds: float) -> None:
        """Give client-side rendering time to finish after an interaction."""


class PlaywrightPageDriver(PageDriver):
    def __init__(self, page: Page):
        self.page = page

    def navigate(self, url: str, timeout: float) -> None:
        log.debug("Navigating to %s", url)
        try:
            self.page.goto(url, wait_until="domcontentloaded", timeout=timeout * 1000)
        except PlaywrightError as exc:
            raise NavigationError(url, str(exc).splitlines()[0]) from exc

    def _locator(self, kind: str, pattern: str):
        name = re.compile(re.escape(pattern), re.I)
        if kind == LABELLED_CONTROL:
            return self.page.get_by_role("button", name=name)
        if kind == LINK_TEXT:
            return self.page.get_by_role("link", name=name)
        if kind == EXACT_TEXT:
            return self.page.get_by_text(re.compile(rf"^{re.escape(pattern)}$", re.I))
        if kind == CONTAINS_TEXT:
            return self.page.get_by_text(name)
        raise ValueError(f"Unknown selection strategy: {kind}")

    def select_by_strategy(self, kind: str, pattern: str, timeout: float) -> bool:
        locator = self._locator(kind, pattern)
        try:
            locator.first.click(timeout=timeout * 1000)
        except PlaywrightError as exc:
            log.debug("Strategy %s for %r failed: %s", kind, pattern, str(exc).splitlines()[0])
            return False
        return True

    def _html(self) -> str:
        try:
            return self.page.content()
        except PlaywrightError as exc:
            log.debug("Could not read page content: %s", exc)
            return ""

    def extract_links(self, href_prefix: str) -> List[str]:
        return extract_links(self._html(), href_prefix)

    def read_metadata(self, field: str) -> Optional[str]:
        return extract_meta(self._html(), field)

    def read_first_heading_text(self) -> Optional[str]:
        return extract_first_heading(self._html())

    def read_document_title(self) -> Optional[str]:
        try:
            return self.page.title()
        except PlaywrightError as exc:
            log.debug("Could not read document title: %s", exc)
            return None

    def settle(self, seconds: float) -> None:
        self.page.wait_for_timeout(seconds * 1000)


@contextmanager
def open_driver(settings: Settings) -> Iterator[PlaywrightPageDriver]:
    """Launch headless Chromium and yield a driver bound to one page."""
    with sync_playwright() as pw:
        browser = pw.chromium.launch(headless=settings.headless)
        try:
            page = browser.new_page(viewport={"width": 1280, "height": 720})
            page.set_default_timeout(settings.call_timeout * 1000)
            yield PlaywrightPageDriver(page)
        finally:
            browser.close()
