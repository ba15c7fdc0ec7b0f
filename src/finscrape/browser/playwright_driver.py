"""Playwright implementation of the browser capabilities."""

import structlog
from playwright.async_api import Browser, Page, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError

from finscrape.browser.base import Anchor, BrowserDriver, NavigationError, PageDriver
from finscrape.config import BrowserConfig

logger = structlog.get_logger(__name__)

_ANCHORS_JS = """
(anchors, headingSelector) => anchors.map((a) => {
    const heading = a.querySelector(headingSelector);
    return {
        href: a.href || "",
        text: (a.textContent || "").trim(),
        heading: heading ? (heading.textContent || "").trim() : "",
    };
})
"""


class PlaywrightPage(PageDriver):
    """Wraps a Playwright Page."""

    def __init__(self, page: Page):
        self._page = page

    async def goto(self, url: str, timeout_ms: int) -> None:
        try:
            await self._page.goto(url, wait_until="domcontentloaded", timeout=timeout_ms)
        except PlaywrightError as e:
            raise NavigationError(url, e.message) from e

    async def click_if_visible(self, selector: str, timeout_ms: int) -> bool:
        locator = self._page.locator(selector).first
        try:
            await locator.wait_for(state="visible", timeout=timeout_ms)
            await locator.click(timeout=timeout_ms)
        except PlaywrightError:
            return False
        return True

    async def scroll_by_viewport(self, fraction: float) -> None:
        await self._page.evaluate("(f) => window.scrollBy(0, window.innerHeight * f)", fraction)

    async def scroll_to_top(self) -> None:
        await self._page.evaluate("() => window.scrollTo(0, 0)")

    async def collect_anchors(self, selector: str, heading_selector: str) -> list[Anchor]:
        raw = await self._page.eval_on_selector_all(selector, _ANCHORS_JS, heading_selector)
        return [
            Anchor(href=item["href"], text=item["text"], heading_text=item["heading"])
            for item in raw
        ]

    async def first_text(self, selectors: list[str]) -> str:
        for selector in selectors:
            element = await self._page.query_selector(selector)
            if element is None:
                continue
            text = (await element.text_content() or "").strip()
            if text:
                return text
        return ""

    async def close(self) -> None:
        await self._page.close()


class PlaywrightBrowser(BrowserDriver):
    """Owns the Playwright session and a launched browser."""

    def __init__(self, playwright: Playwright, browser: Browser):
        self._playwright = playwright
        self._browser = browser

    @classmethod
    async def launch(cls, config: BrowserConfig) -> "PlaywrightBrowser":
        """Start Playwright and launch the configured browser engine."""
        playwright = await async_playwright().start()
        try:
            browser_type = getattr(playwright, config.engine)
            browser = await browser_type.launch(headless=config.headless, args=config.launch_args)
        except Exception:
            await playwright.stop()
            raise

        logger.info(
            "browser.launched",
            engine=config.engine,
            headless=config.headless,
            version=browser.version,
        )
        return cls(playwright, browser)

    async def new_page(self) -> PageDriver:
        page = await self._browser.new_page()
        return PlaywrightPage(page)

    async def close(self) -> None:
        try:
            await self._browser.close()
        finally:
            await self._playwright.stop()
        logger.info("browser.closed")
