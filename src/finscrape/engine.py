"""Main loop orchestrating the scrape-classify-persist cycle."""

import asyncio
import signal as signal_mod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

import structlog

from finscrape.browser.base import BrowserDriver, PageDriver
from finscrape.config import AppConfig
from finscrape.models import NewsArticle
from finscrape.pacing import Pacer
from finscrape.scraper.discovery import LinkDiscovery
from finscrape.scraper.extractor import ArticleExtractor
from finscrape.state.json_backend import NewsFileStore, VisitedStateStore

logger = structlog.get_logger(__name__)


class CycleStage(str, Enum):
    IDLE = "idle"
    NAVIGATING = "navigating"
    SCROLLING = "scrolling"
    EXTRACTING_LINKS = "extracting_links"
    PROCESSING_ARTICLES = "processing_articles"
    PERSISTING = "persisting"


@dataclass
class CycleReport:
    """What one cycle did, and where it stopped if it failed."""

    cycle: int = 0
    stage: CycleStage = CycleStage.IDLE
    links_found: int = 0
    new_links: int = 0
    outcomes: dict[str, int] = field(default_factory=dict)
    articles: list[NewsArticle] = field(default_factory=list)
    error: Optional[str] = None
    failed_stage: Optional[CycleStage] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class ScrapeContext:
    """Long-lived collaborators shared by every cycle."""

    config: AppConfig
    browser: BrowserDriver
    pacer: Pacer
    visited_store: VisitedStateStore
    news_store: NewsFileStore
    discovery: LinkDiscovery
    extractor: ArticleExtractor

    @classmethod
    def build(
        cls,
        config: AppConfig,
        browser: BrowserDriver,
        pacer: Optional[Pacer] = None,
    ) -> "ScrapeContext":
        pacer = pacer or Pacer()
        return cls(
            config=config,
            browser=browser,
            pacer=pacer,
            visited_store=VisitedStateStore(
                config.storage.state_file, config.storage.max_visited_urls
            ),
            news_store=NewsFileStore(config.storage.news_file, config.storage.max_articles),
            discovery=LinkDiscovery(config.scraper.homepage_url, config.discovery, pacer),
            extractor=ArticleExtractor(config.extractor, config.scraper.source_fallback, pacer),
        )


async def run_cycle(ctx: ScrapeContext, cycle: int = 0) -> CycleReport:
    """Run one discovery -> extraction -> persist pass.

    Never raises: any failure is logged and recorded on the report, and the
    page is closed before returning.
    """
    report = CycleReport(cycle=cycle)
    page: Optional[PageDriver] = None

    try:
        report.stage = CycleStage.NAVIGATING
        page = await ctx.browser.new_page()
        visited = ctx.visited_store.load()
        await ctx.discovery.open_homepage(page)

        report.stage = CycleStage.SCROLLING
        await ctx.discovery.scroll(page)

        report.stage = CycleStage.EXTRACTING_LINKS
        discovered = await ctx.discovery.collect_links(page, set(visited.visited_urls))
        report.links_found = len(discovered.found)
        report.new_links = len(discovered.new)

        report.stage = CycleStage.PROCESSING_ARTICLES
        extraction = await ctx.extractor.process(page, discovered.new)
        report.outcomes = extraction.counts()
        report.articles = extraction.articles

        report.stage = CycleStage.PERSISTING
        if extraction.articles:
            news = ctx.news_store.load()
            news.articles.extend(extraction.articles)
            saved = ctx.news_store.save(news)
            logger.info(
                "scraper.articles_persisted",
                cycle=cycle,
                new=len(extraction.articles),
                total=len(saved.articles),
            )

        visited.remember(extraction.visited_urls())
        ctx.visited_store.save(visited)

        report.stage = CycleStage.IDLE
    except Exception as e:
        report.error = str(e)
        report.failed_stage = report.stage
        logger.error(
            "scraper.cycle_error",
            cycle=cycle,
            stage=report.stage.value,
            error=str(e),
            error_type=type(e).__name__,
            exc_info=True,
        )
    finally:
        if page is not None:
            try:
                await page.close()
            except Exception as e:
                logger.warning("scraper.page_close_failed", cycle=cycle, error=str(e))

    return report


class ScraperEngine:
    """Runs scrape cycles forever on a fixed interval."""

    def __init__(self, ctx: ScrapeContext):
        self._ctx = ctx
        self._config = ctx.config
        self._running = False
        self._cycle_count = 0
        self._failed_cycles = 0
        self._articles_collected = 0

    @property
    def cycle_count(self) -> int:
        return self._cycle_count

    async def start(self) -> None:
        """Start the engine. Runs until shutdown is requested."""
        logger.info(
            "scraper.starting",
            homepage=self._config.scraper.homepage_url,
            interval_s=self._config.scraper.interval_seconds,
            state_file=str(self._ctx.visited_store.path),
            news_file=str(self._ctx.news_store.path),
        )

        self._running = True

        try:
            self._register_signal_handlers()
            self._preflight_checks()

            while self._running:
                await self._tick()
                if not self._running:
                    break
                logger.info(
                    "scraper.waiting",
                    seconds=self._config.scraper.interval_seconds,
                )
                # Sleep until next cycle, but check for shutdown every second
                for _ in range(self._config.scraper.interval_seconds):
                    if not self._running:
                        break
                    await self._ctx.pacer.pause(1)
        except asyncio.CancelledError:
            logger.info("scraper.cancelled")
        finally:
            await self._shutdown()

    async def _tick(self) -> CycleReport:
        self._cycle_count += 1
        started = datetime.now(timezone.utc)

        report = await run_cycle(self._ctx, self._cycle_count)

        if report.ok:
            self._articles_collected += len(report.articles)
        else:
            self._failed_cycles += 1

        logger.info(
            "scraper.cycle_complete",
            cycle=self._cycle_count,
            ok=report.ok,
            failed_stage=report.failed_stage.value if report.failed_stage else None,
            links_found=report.links_found,
            new_links=report.new_links,
            articles=len(report.articles),
            duration_s=round((datetime.now(timezone.utc) - started).total_seconds(), 2),
            **report.outcomes,
        )
        return report

    def _register_signal_handlers(self) -> None:
        """Register SIGINT/SIGTERM handlers for graceful shutdown."""
        loop = asyncio.get_running_loop()
        for sig in (signal_mod.SIGINT, signal_mod.SIGTERM):
            try:
                loop.add_signal_handler(sig, self.request_shutdown)
            except (NotImplementedError, RuntimeError):
                logger.debug("scraper.signal_handler_unavailable", signal=sig.name)

    def _preflight_checks(self) -> None:
        """Make sure both data files can be created and report what is on disk."""
        for path in (self._ctx.visited_store.path, self._ctx.news_store.path):
            path.parent.mkdir(parents=True, exist_ok=True)

        visited = self._ctx.visited_store.load()
        news = self._ctx.news_store.load()
        logger.info(
            "scraper.preflight",
            visited_urls=len(visited.visited_urls),
            stored_articles=len(news.articles),
            last_updated=news.last_updated.isoformat() if news.last_updated else None,
        )

    def request_shutdown(self) -> None:
        """Signal the main loop to stop after the current step."""
        logger.info("scraper.shutdown_requested")
        self._running = False

    async def _shutdown(self) -> None:
        logger.info("scraper.shutting_down")
        try:
            await self._ctx.browser.close()
        except Exception as e:
            logger.warning("scraper.browser_close_failed", error=str(e))
        logger.info(
            "scraper.final_stats",
            cycles=self._cycle_count,
            failed_cycles=self._failed_cycles,
            articles_collected=self._articles_collected,
        )
        logger.info("scraper.stopped")
