"""Shared test fixtures."""

import pytest

from fakes import HOMEPAGE, FakeBrowser, FakeSite, InstantPacer, article_url
from finscrape.browser.base import Anchor
from finscrape.config import AppConfig
from finscrape.engine import ScrapeContext


@pytest.fixture
def test_config(tmp_path) -> AppConfig:
    """Provide a test configuration writing into a temp directory."""
    return AppConfig(
        scraper={
            "homepage_url": HOMEPAGE,
            "interval_seconds": 3,
            "source_fallback": "Yahoo Finance",
        },
        storage={
            "state_file": str(tmp_path / "data" / "scraper-state.json"),
            "news_file": str(tmp_path / "data" / "scraped-news.json"),
        },
        logging={
            "level": "DEBUG",
            "app_log": str(tmp_path / "logs" / "app.log"),
            "article_log": str(tmp_path / "logs" / "articles.log"),
        },
    )


@pytest.fixture
def pacer() -> InstantPacer:
    return InstantPacer()


@pytest.fixture
def sites() -> dict[str, FakeSite]:
    """A homepage listing three articles, each with its own page."""
    return {
        HOMEPAGE: FakeSite(
            anchors=[
                Anchor(href=article_url("apple-chip"), text="Apple unveils new AI chip for servers"),
                Anchor(href="https://finance.example.com/quote/AAPL", text="Apple Inc. (AAPL) stock quote"),
                Anchor(href=article_url("bitcoin"), text="", heading_text="Bitcoin climbs past record high"),
                Anchor(href=article_url("bakery"), text="Local bakery opens downtown today"),
            ],
        ),
        article_url("apple-chip"): FakeSite(
            texts={
                "header h1": "Apple unveils new AI chip",
                '[class*="byline"] a': "Reuters",
            },
        ),
        article_url("bitcoin"): FakeSite(
            texts={'h1[data-test-locator="headline"]': "Bitcoin climbs past record high"},
        ),
        article_url("bakery"): FakeSite(
            texts={"h1": "Local bakery opens downtown", '[class*="author"] a': "Jane Doe"},
        ),
    }


@pytest.fixture
def browser(sites) -> FakeBrowser:
    return FakeBrowser(sites)


@pytest.fixture
def context(test_config, browser, pacer) -> ScrapeContext:
    return ScrapeContext.build(test_config, browser, pacer)
