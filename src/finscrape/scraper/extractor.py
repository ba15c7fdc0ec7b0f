"""Per-article visits: headline and byline extraction with pacing."""

from collections import Counter
from dataclasses import dataclass, field

import structlog

from finscrape.browser.base import PageDriver
from finscrape.classifier import categorize
from finscrape.config import ExtractorConfig
from finscrape.logging_config import get_article_logger
from finscrape.models import LinkCandidate, NewsArticle, VisitOutcome
from finscrape.pacing import Pacer

logger = structlog.get_logger(__name__)

# Outcomes after which a URL is remembered and never visited again.
# Failed articles are included: a permanently broken page is skipped, not retried.
MARKS_VISITED = frozenset({VisitOutcome.PROCESSED, VisitOutcome.DISCARDED, VisitOutcome.FAILED})


@dataclass
class ExtractionResult:
    articles: list[NewsArticle] = field(default_factory=list)
    outcomes: dict[str, VisitOutcome] = field(default_factory=dict)

    def visited_urls(self) -> list[str]:
        """URLs to remember, in processing order."""
        return [url for url, outcome in self.outcomes.items() if outcome in MARKS_VISITED]

    def counts(self) -> dict[str, int]:
        counter = Counter(outcome.value for outcome in self.outcomes.values())
        return {outcome.value: counter.get(outcome.value, 0) for outcome in VisitOutcome}


class ArticleExtractor:
    """Visits candidate links one by one and turns them into articles."""

    def __init__(self, config: ExtractorConfig, source_fallback: str, pacer: Pacer):
        self._config = config
        self._source_fallback = source_fallback
        self._pacer = pacer
        self._article_log = get_article_logger()

    async def process(self, page: PageDriver, links: list[LinkCandidate]) -> ExtractionResult:
        """Visit every link in order. A failing article never stops the batch."""
        result = ExtractionResult()

        for link in links:
            try:
                article = await self._visit(page, link)
            except Exception as e:
                logger.warning(
                    "extractor.article_failed",
                    url=link.url[:80],
                    error=str(e),
                    error_type=type(e).__name__,
                )
                result.outcomes[link.url] = VisitOutcome.FAILED
                continue

            if article is None:
                result.outcomes[link.url] = VisitOutcome.DISCARDED
            else:
                result.outcomes[link.url] = VisitOutcome.PROCESSED
                result.articles.append(article)

            await self._pacer.jitter(self._config.pacing_min_seconds, self._config.pacing_max_seconds)

        logger.info("extractor.batch_complete", links=len(links), **result.counts())
        return result

    async def _visit(self, page: PageDriver, link: LinkCandidate) -> NewsArticle | None:
        """Load one article page. Returns None when the headline is too short to keep."""
        logger.debug("extractor.visiting", url=link.url[:80])
        await page.goto(link.url, self._config.navigation_timeout_ms)
        await self._pacer.pause(self._config.settle_seconds)

        extracted_headline = await page.first_text(self._config.headline_selectors)
        extracted_source = await page.first_text(self._config.source_selectors)

        headline = extracted_headline or link.headline
        source = extracted_source or self._source_fallback

        if len(headline) < self._config.min_headline_chars:
            logger.debug("extractor.headline_too_short", url=link.url[:80], headline=headline)
            return None

        category = categorize(headline)
        article = NewsArticle(
            tag=category.tag,
            tag_label=category.tag_label,
            headline=headline,
            url=link.url,
            source=source,
        )

        self._article_log.info(
            "article.collected",
            tag=article.tag.value,
            headline=article.headline,
            url=article.url,
            source=article.source,
        )
        return article
