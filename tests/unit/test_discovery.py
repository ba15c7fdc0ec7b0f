"""Tests for homepage link discovery against a fake page."""

import asyncio

import pytest

from fakes import HOMEPAGE, FakePage, FakeSite, article_url
from finscrape.browser.base import Anchor, NavigationError
from finscrape.config import DiscoveryConfig
from finscrape.scraper.discovery import LinkDiscovery


class TestLinkDiscovery:
    @pytest.fixture
    def discovery(self, test_config, pacer):
        return LinkDiscovery(HOMEPAGE, test_config.discovery, pacer)

    def test_discover_returns_headline_links_in_dom_order(self, discovery, sites):
        page = FakePage(sites)
        result = asyncio.run(discovery.discover(page, set()))

        assert [link.url for link in result.found] == [
            article_url("apple-chip"),
            article_url("bitcoin"),
            article_url("bakery"),
        ]
        assert result.new == result.found

    def test_heading_text_used_when_anchor_text_empty(self, discovery, sites):
        result = asyncio.run(discovery.discover(FakePage(sites), set()))
        assert result.found[1].headline == "Bitcoin climbs past record high"

    def test_homepage_loaded_with_30s_timeout(self, discovery, sites):
        page = FakePage(sites)
        asyncio.run(discovery.discover(page, set()))
        assert page.visited == [(HOMEPAGE, 30_000)]

    def test_visited_urls_filtered_out(self, discovery, sites):
        visited = {article_url("apple-chip"), article_url("bakery")}
        result = asyncio.run(discovery.discover(FakePage(sites), visited))

        assert len(result.found) == 3
        assert [link.url for link in result.new] == [article_url("bitcoin")]
        assert not {link.url for link in result.new} & visited

    def test_idempotent_for_unchanged_page(self, discovery, sites):
        visited = {article_url("bakery")}
        first = asyncio.run(discovery.discover(FakePage(sites), visited))
        second = asyncio.run(discovery.discover(FakePage(sites), visited))
        assert first == second

    def test_preview_length_gate(self, pacer):
        sites = {
            HOMEPAGE: FakeSite(
                anchors=[
                    Anchor(href=article_url("fourteen"), text="x" * 14),
                    Anchor(href=article_url("fifteen"), text="y" * 15),
                ]
            )
        }
        discovery = LinkDiscovery(HOMEPAGE, DiscoveryConfig(), pacer)
        result = asyncio.run(discovery.discover(FakePage(sites), set()))
        assert [link.url for link in result.found] == [article_url("fifteen")]

    def test_duplicate_hrefs_keep_first(self, pacer):
        sites = {
            HOMEPAGE: FakeSite(
                anchors=[
                    Anchor(href=article_url("dup"), text="First preview of the story"),
                    Anchor(href=article_url("dup"), text="Second preview of the story"),
                ]
            )
        }
        discovery = LinkDiscovery(HOMEPAGE, DiscoveryConfig(), pacer)
        result = asyncio.run(discovery.discover(FakePage(sites), set()))
        assert len(result.found) == 1
        assert result.found[0].headline == "First preview of the story"

    def test_short_duplicate_does_not_hide_later_headline(self, pacer):
        """An icon link to the same article must not block its headline link."""
        sites = {
            HOMEPAGE: FakeSite(
                anchors=[
                    Anchor(href=article_url("story"), text=""),
                    Anchor(href=article_url("story"), text="The real headline of the story"),
                ]
            )
        }
        discovery = LinkDiscovery(HOMEPAGE, DiscoveryConfig(), pacer)
        result = asyncio.run(discovery.discover(FakePage(sites), set()))
        assert [link.headline for link in result.found] == ["The real headline of the story"]

    def test_mobile_links_included(self, pacer):
        sites = {
            HOMEPAGE: FakeSite(
                anchors=[Anchor(href="https://finance.example.com/m/abc/story.html", text="Mobile story headline here")]
            )
        }
        discovery = LinkDiscovery(HOMEPAGE, DiscoveryConfig(), pacer)
        result = asyncio.run(discovery.discover(FakePage(sites), set()))
        assert len(result.found) == 1

    def test_scrolls_three_or_four_times_then_returns_to_top(self, discovery, sites, pacer):
        page = FakePage(sites)
        steps = asyncio.run(discovery.scroll(page))

        assert steps in (3, 4)
        assert page.scrolls == steps
        assert page.scrolled_to_top
        scroll_pauses = pacer.pauses[:steps]
        assert all(1.5 <= p <= 3.0 for p in scroll_pauses)
        assert pacer.pauses[-1] == 1.0

    def test_consent_dismissed_when_visible(self, discovery, sites, pacer):
        sites[HOMEPAGE].consent_visible = True
        page = FakePage(sites)
        asyncio.run(discovery.open_homepage(page))

        assert page.clicked == ['button:has-text("Accept All")']
        assert pacer.pauses == [2.0, 1.0]

    def test_missing_consent_ignored(self, discovery, sites, pacer):
        page = FakePage(sites)
        asyncio.run(discovery.open_homepage(page))
        assert page.clicked == []
        assert pacer.pauses == [2.0]

    def test_navigation_failure_propagates(self, discovery):
        page = FakePage({})
        with pytest.raises(NavigationError):
            asyncio.run(discovery.discover(page, set()))
        assert page.scrolls == 0

    def test_anchor_selector_built_from_patterns(self):
        config = DiscoveryConfig()
        assert config.anchor_selector == 'a[href*="/news/"], a[href*="/m/"]'
