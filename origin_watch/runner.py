import logging
from dataclasses import replace
from typing import Optional

import click

from .config import Settings, get_settings
from .driver import NavigationError, PageDriver, open_driver
from .locate import ArticleLocator
from .models import (
    BOOTSTRAPPED,
    CHANGED,
    DUPLICATE,
    SKIPPED_EMPTY,
    SKIPPED_SELECTION,
    UNCHANGED,
    ArticleRef,
    NotificationEvent,
    RunContext,
    RunReport,
    Section,
)
from .navigate import SectionNavigator
from .notify import DeliveryError, DiscordWebhookSink, LogSink, NotificationSink, notify
from .state import ObservedState, StateStore
from .title import TitleResolver

log = logging.getLogger(__name__)


class RunCoordinator:
    """One full pass over the configured sections.

    State is loaded once, mutated on a private copy, and committed once after
    every section is done. Any exception raised by a section (navigation to
    an article, delivery) aborts the run before the commit, so the previous
    record stays on disk and the next run re-detects the same change.
    """

    def __init__(
        self,
        driver: PageDriver,
        sink: NotificationSink,
        store: StateStore,
        settings: Settings,
        commit: bool = True,
    ):
        self.driver = driver
        self.sink = sink
        self.store = store
        self.settings = settings
        self.commit = commit
        self.navigator = SectionNavigator(driver, settings)
        self.locator = ArticleLocator(driver, settings.base_url, settings.article_url_pattern)
        self.titles = TitleResolver(driver, brand_name=settings.brand_name)

    def run(self) -> RunReport:
        previous = self.store.load()
        state: ObservedState = dict(previous)
        ctx = RunContext(is_bootstrap=self.store.is_bootstrap(previous))
        report = RunReport(state=state)

        if ctx.is_bootstrap:
            log.info("No previous state, recording a baseline without notifying")

        self.navigator.open_board()
        for section in self.settings.sections:
            outcome = self._process_section(section, state, ctx, report)
            report.outcomes[section.key] = outcome
            log.info("%s: %s", section.key, outcome)

        if self.commit:
            self.store.commit(state)
            report.committed = True
        return report

    def _process_section(
        self,
        section: Section,
        state: ObservedState,
        ctx: RunContext,
        report: RunReport,
    ) -> str:
        if not self.navigator.select(section):
            return SKIPPED_SELECTION

        url = self.locator.latest()
        if url is None:
            return SKIPPED_EMPTY

        current = state.get(section.key)

        if ctx.is_bootstrap and current is None:
            state[section.key] = url
            ctx.sent_this_run.add(url)
            return BOOTSTRAPPED

        if url in ctx.sent_this_run:
            state[section.key] = url
            return DUPLICATE

        if url == current:
            return UNCHANGED

        self.driver.navigate(url, self.settings.call_timeout)
        self.driver.settle(self.settings.article_settle)
        article = ArticleRef(url=url)
        article.title = self.titles.resolve()
        event = NotificationEvent(category=section.label, url=article.url, title=article.title)
        notify(self.sink, event, self.settings)
        report.notified.append(event)

        ctx.sent_this_run.add(url)
        state[section.key] = url
        self.navigator.open_board()
        return CHANGED


def run_once(settings: Settings, dry_run: bool = False, driver: Optional[PageDriver] = None) -> RunReport:
    """Run the watcher against a fresh browser unless *driver* is given."""
    store = StateStore(settings.state_file, settings.sections)
    sink: NotificationSink
    if dry_run:
        sink = LogSink()
    else:
        sink = DiscordWebhookSink(settings.webhook_url, timeout=settings.call_timeout)

    if driver is not None:
        return RunCoordinator(driver, sink, store, settings, commit=not dry_run).run()
    with open_driver(settings) as page_driver:
        return RunCoordinator(page_driver, sink, store, settings, commit=not dry_run).run()


@click.command()
@click.option("--dry-run", is_flag=True, default=False, help="Log notifications instead of sending; do not write state.")
@click.option("--state-file", default=None, help="Override the state file path.")
@click.option("--headed", is_flag=True, default=False, help="Show the browser window.")
@click.option("--verbose", is_flag=True, default=False, help="Debug logging.")
def main(dry_run, state_file, headed, verbose):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = get_settings(dry_run=dry_run, state_file=state_file)
    except RuntimeError as exc:
        raise click.ClickException(str(exc))
    if headed:
        settings = replace(settings, headless=False)

    try:
        report = run_once(settings, dry_run=dry_run)
    except (DeliveryError, NavigationError) as exc:
        raise click.ClickException(f"{exc} (state not committed)")

    for key, outcome in report.outcomes.items():
        click.echo(f"  [{outcome}] {key} -> {report.state.get(key) or '-'}")
    click.echo(f"Sent {len(report.notified)} notification(s); state {'committed' if report.committed else 'not written'}.")


if __name__ == "__main__":
    main()
