import logging
from typing import Callable, List, Optional, Tuple

from .driver import PageDriver
from .scrape import normalize_text

log = logging.getLogger(__name__)

PRIMARY_TITLE_FIELD = "og:title"
ALTERNATE_TITLE_FIELD = "twitter:title"


class TitleResolver:
    """Best-effort human title for the article currently on the page.

    Candidates, in order: og:title, twitter:title, the first <h1>, then the
    document title unless it is only the brand name. Each is whitespace
    normalized; the first non-empty one wins.
    """

    def __init__(self, driver: PageDriver, brand_name: str = "Netmarble"):
        self.driver = driver
        self.brand_name = brand_name

    def _document_title(self) -> Optional[str]:
        title = normalize_text(self.driver.read_document_title())
        if title.casefold() == normalize_text(self.brand_name).casefold():
            return None
        return title

    def _chain(self) -> List[Tuple[str, Callable[[], Optional[str]]]]:
        return [
            (PRIMARY_TITLE_FIELD, lambda: self.driver.read_metadata(PRIMARY_TITLE_FIELD)),
            (ALTERNATE_TITLE_FIELD, lambda: self.driver.read_metadata(ALTERNATE_TITLE_FIELD)),
            ("h1", self.driver.read_first_heading_text),
            ("title", self._document_title),
        ]

    def resolve(self) -> Optional[str]:
        for name, read in self._chain():
            candidate = normalize_text(read())
            if candidate:
                log.debug("Title resolved from %s: %s", name, candidate)
                return candidate
        log.info("No usable title on the article page")
        return None
