import logging

from .config import Settings
from .driver import CONTAINS_TEXT, EXACT_TEXT, LABELLED_CONTROL, LINK_TEXT, PageDriver
from .models import Section

log = logging.getLogger(__name__)

# Tried in order, first success wins
SELECTION_STRATEGIES = (LABELLED_CONTROL, LINK_TEXT, EXACT_TEXT, CONTAINS_TEXT)


class SectionNavigator:
    def __init__(self, driver: PageDriver, settings: Settings):
        self.driver = driver
        self.settings = settings

    def open_board(self) -> None:
        """Load the board and open its top-menu entry.

        Navigation errors propagate. The menu click is best-effort: the board
        is sometimes already showing the news view.
        """
        self.driver.navigate(self.settings.board_url, self.settings.call_timeout)
        if not self.driver.select_by_strategy(LINK_TEXT, self.settings.board_menu_text, self.settings.select_timeout):
            log.debug("Board menu %r not clickable, assuming board view", self.settings.board_menu_text)
        self.driver.settle(self.settings.board_settle)

    def select(self, section: Section) -> bool:
        for kind in SELECTION_STRATEGIES:
            if self.driver.select_by_strategy(kind, section.selector, self.settings.select_timeout):
                log.debug("Selected %s via %s", section.key, kind)
                self.driver.settle(self.settings.tab_settle)
                return True
        log.warning("Cannot select section %s (%r), skipping", section.key, section.selector)
        return False
