"""Probe the news homepage: launch the browser, run discovery, print what it finds.

Nothing is written to the state or news files.
"""

import asyncio
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from finscrape.browser.playwright_driver import PlaywrightBrowser
from finscrape.classifier import categorize
from finscrape.config import RuntimeSettings, apply_overrides, load_config
from finscrape.pacing import Pacer
from finscrape.scraper.discovery import LinkDiscovery
from finscrape.state.json_backend import VisitedStateStore


async def check_discovery(config) -> bool:
    """Load the homepage and list candidate links, marking already-visited ones."""
    print(f"Launching {config.browser.engine} (headless={config.browser.headless})...")
    try:
        browser = await PlaywrightBrowser.launch(config.browser)
    except Exception as e:
        print(f"  Browser: FAILED - {e}")
        return False
    print("  Browser: OK")

    visited = VisitedStateStore(config.storage.state_file).load()
    discovery = LinkDiscovery(config.scraper.homepage_url, config.discovery, Pacer())

    print(f"\nLoading {config.scraper.homepage_url}...")
    page = await browser.new_page()
    try:
        result = await discovery.discover(page, set(visited.visited_urls))
    except Exception as e:
        print(f"  Discovery: FAILED - {e}")
        return False
    finally:
        await page.close()
        await browser.close()

    new_urls = {link.url for link in result.new}
    print(f"  Found {len(result.found)} links, {len(result.new)} not yet visited")
    for link in result.found[:20]:
        marker = "+" if link.url in new_urls else " "
        print(f"  {marker} [{categorize(link.headline).tag_label:8}] {link.headline[:70]}")
    print("  Discovery: OK")
    return bool(result.found)


def main():
    print("=" * 50)
    print("finscrape - Homepage Check")
    print("=" * 50)

    settings = RuntimeSettings()
    try:
        config = apply_overrides(load_config(settings.config_path), settings)
    except Exception as e:
        print(f"\nFailed to load {settings.config_path}: {e}")
        sys.exit(1)

    ok = asyncio.run(check_discovery(config))

    print("\n" + "=" * 50)
    if ok:
        print("Homepage reachable and headlines found.")
    else:
        print("Check failed. Fix the issues above.")
        sys.exit(1)


if __name__ == "__main__":
    main()
