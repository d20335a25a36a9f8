from pathlib import Path
from typing import Dict, List, Optional

import pytest

from origin_watch.config import Settings
from origin_watch.driver import NavigationError, PageDriver
from origin_watch.notify import DeliveryResult, NotificationSink

BASE = "https://7origin.netmarble.com"
BOARD = f"{BASE}/en/"


class FakeDriver(PageDriver):
    """Scripted site: each tab shows a fixed list of hrefs, each article URL a fixed set of fields.

    ``tabs`` maps tab text -> hrefs shown once that tab is selected.
    ``articles`` maps absolute article URL -> {"og:title", "twitter:title", "h1", "title"}.
    """

    def __init__(self, tabs: Dict[str, List[str]], articles: Optional[Dict[str, dict]] = None,
                 clickable: Optional[Dict[str, str]] = None, broken_urls=()):
        self.tabs = tabs
        self.articles = articles or {}
        # tab text -> the only strategy kind that works for it (default: any)
        self.clickable = clickable or {}
        self.broken_urls = set(broken_urls)
        self.current_url: Optional[str] = None
        self.current_tab: Optional[str] = None
        self.calls: List[tuple] = []

    def navigate(self, url, timeout):
        self.calls.append(("navigate", url))
        if url in self.broken_urls:
            raise NavigationError(url, "Timeout 60000ms exceeded")
        self.current_url = url
        self.current_tab = None

    def select_by_strategy(self, kind, pattern, timeout):
        self.calls.append(("select", kind, pattern, timeout))
        if pattern not in self.tabs:
            return pattern == "News" and kind == "link-text" and self.current_url == BOARD
        allowed = self.clickable.get(pattern)
        if allowed is not None and allowed != kind:
            return False
        self.current_tab = pattern
        return True

    def extract_links(self, href_prefix):
        if self.current_tab is None:
            return []
        return [h for h in self.tabs[self.current_tab] if href_prefix in h]

    def _field(self, name):
        return self.articles.get(self.current_url, {}).get(name)

    def read_metadata(self, field):
        return self._field(field)

    def read_first_heading_text(self):
        return self._field("h1")

    def read_document_title(self):
        return self._field("title")

    def settle(self, seconds):
        self.calls.append(("settle", seconds))


class RecordingSink(NotificationSink):
    def __init__(self, fail_on: Optional[str] = None):
        self.messages: List[dict] = []
        self.fail_on = fail_on

    def send(self, message):
        if self.fail_on and message["embeds"][0]["url"] == self.fail_on:
            return DeliveryResult(ok=False, status=500, body="upstream error")
        self.messages.append(message)
        return DeliveryResult(ok=True, status=204)

    @property
    def urls(self):
        return [m["embeds"][0]["url"] for m in self.messages]


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        webhook_url="https://discord.com/api/webhooks/1/test",
        state_file=tmp_path / "state.json",
        board_settle=0,
        tab_settle=0,
        article_settle=0,
    )
