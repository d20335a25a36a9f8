import logging
import re
from typing import List, Optional, Pattern
from urllib.parse import urlparse

from .driver import PageDriver

log = logging.getLogger(__name__)


def absolute_url(href: Optional[str], base_url: str) -> Optional[str]:
    """Resolve *href* against the site origin.

    Values with a scheme pass through unchanged; protocol-relative values
    take the origin's scheme; root-relative values are joined to the
    origin; anything else is joined with a single "/".
    """
    if not href:
        return None
    if urlparse(href).scheme:
        return href
    if href.startswith("//"):
        return f"{urlparse(base_url).scheme}:{href}"
    origin = base_url.rstrip("/")
    if href.startswith("/"):
        return f"{origin}{href}"
    return f"{origin}/{href}"


def compile_article_pattern(template: str) -> Pattern[str]:
    """Turn "/en/news/{id}/{id}" into a full-match regex; each {id} is a run of digits."""
    parts = template.split("{id}")
    return re.compile("^" + r"\d+".join(re.escape(p) for p in parts) + "$")


def link_prefix(template: str) -> str:
    """Literal start of the item template, used to pre-filter hrefs."""
    return template.split("{id}", 1)[0]


def _dedupe(hrefs: List[str]) -> List[str]:
    seen = set()
    unique = []
    for h in hrefs:
        if h in seen:
            continue
        seen.add(h)
        unique.append(h)
    return unique


class ArticleLocator:
    """Finds the topmost item link on the current section view."""

    def __init__(self, driver: PageDriver, base_url: str, article_url_pattern: str):
        self.driver = driver
        self.base_url = base_url
        self.pattern = compile_article_pattern(article_url_pattern)
        self.link_prefix = link_prefix(article_url_pattern)
        self._host = (urlparse(base_url).hostname or "").lower()

    def is_article(self, href: str) -> bool:
        parsed = urlparse(href)
        if parsed.scheme or parsed.netloc:
            if (parsed.hostname or "").lower() != self._host:
                return False
        return bool(self.pattern.match(parsed.path))

    def candidates(self) -> List[str]:
        hrefs = self.driver.extract_links(self.link_prefix)
        return _dedupe([absolute_url(h, self.base_url) for h in hrefs if self.is_article(h)])

    def latest(self) -> Optional[str]:
        found = self.candidates()
        if not found:
            log.info("No article links on the current view")
            return None
        return found[0]
