"""Listing page loading and article link discovery."""

from dataclasses import dataclass, field

import structlog

from finscrape.browser.base import PageDriver
from finscrape.config import DiscoveryConfig
from finscrape.models import LinkCandidate
from finscrape.pacing import Pacer

logger = structlog.get_logger(__name__)


@dataclass
class DiscoveryResult:
    found: list[LinkCandidate] = field(default_factory=list)
    new: list[LinkCandidate] = field(default_factory=list)


class LinkDiscovery:
    """Finds unseen article links on the news homepage.

    Navigation, scrolling and DOM errors are not handled here; they
    propagate so the orchestrator can abandon the cycle.
    """

    def __init__(self, homepage_url: str, config: DiscoveryConfig, pacer: Pacer):
        self._homepage_url = homepage_url
        self._config = config
        self._pacer = pacer

    async def discover(self, page: PageDriver, visited: set[str]) -> DiscoveryResult:
        """Load the homepage, trigger lazy content and return candidate links."""
        await self.open_homepage(page)
        await self.scroll(page)
        return await self.collect_links(page, visited)

    async def open_homepage(self, page: PageDriver) -> None:
        logger.info("discovery.navigating", url=self._homepage_url)
        await page.goto(self._homepage_url, self._config.navigation_timeout_ms)
        await self._pacer.pause(self._config.settle_seconds)
        await self._dismiss_consent(page)

    async def _dismiss_consent(self, page: PageDriver) -> None:
        if await page.click_if_visible(self._config.consent_selector, self._config.consent_timeout_ms):
            logger.debug("discovery.consent_dismissed")
            await self._pacer.pause(self._config.consent_settle_seconds)

    async def scroll(self, page: PageDriver) -> int:
        """Scroll down a random number of steps, then return to the top."""
        steps = self._pacer.pick(self._config.scroll_steps_min, self._config.scroll_steps_max)
        for step in range(steps):
            logger.debug("discovery.scrolling", step=step + 1, of=steps)
            await page.scroll_by_viewport(self._config.scroll_fraction)
            await self._pacer.jitter(
                self._config.scroll_pause_min_seconds,
                self._config.scroll_pause_max_seconds,
            )

        await page.scroll_to_top()
        await self._pacer.pause(self._config.top_settle_seconds)
        return steps

    async def collect_links(self, page: PageDriver, visited: set[str]) -> DiscoveryResult:
        """Extract headline links in DOM order and drop those already visited."""
        anchors = await page.collect_anchors(
            self._config.anchor_selector, self._config.heading_selector
        )

        seen: set[str] = set()
        found: list[LinkCandidate] = []
        for anchor in anchors:
            if not anchor.href or anchor.href in seen:
                continue
            if not any(pattern in anchor.href for pattern in self._config.link_patterns):
                continue
            text = anchor.text or anchor.heading_text
            # Short previews are navigation chrome, not headlines
            if len(text) < self._config.min_preview_chars:
                continue
            seen.add(anchor.href)
            found.append(LinkCandidate(url=anchor.href, headline=text))

        new = [link for link in found if link.url not in visited]

        logger.info(
            "discovery.links_found",
            anchors=len(anchors),
            found=len(found),
            new=len(new),
        )
        return DiscoveryResult(found=found, new=new)
