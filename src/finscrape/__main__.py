"""Entry point: python -m finscrape"""

import asyncio
import sys

import structlog
from pydantic import ValidationError

from finscrape.browser.playwright_driver import PlaywrightBrowser
from finscrape.config import AppConfig, RuntimeSettings, apply_overrides, load_config
from finscrape.engine import ScrapeContext, ScraperEngine
from finscrape.logging_config import configure_logging

logger = structlog.get_logger("finscrape")


async def run(config: AppConfig) -> int:
    """Launch the browser and scrape until stopped. Returns the exit status."""
    logger.info("finscrape.launching_browser", engine=config.browser.engine, headless=config.browser.headless)
    try:
        browser = await PlaywrightBrowser.launch(config.browser)
    except Exception as e:
        logger.critical("finscrape.browser_launch_failed", error=str(e), exc_info=True)
        return 1

    engine = ScraperEngine(ScrapeContext.build(config, browser))
    await engine.start()
    return 0


def main():
    try:
        settings = RuntimeSettings()
        config = apply_overrides(load_config(settings.config_path), settings)
    except (OSError, ValidationError) as e:
        print(f"Failed to load configuration: {e}")
        print("Ensure config/settings.yaml exists or set FINSCRAPE_CONFIG_PATH")
        sys.exit(1)

    configure_logging(config.logging)

    status = asyncio.run(run(config))
    if status:
        sys.exit(status)


if __name__ == "__main__":
    main()
