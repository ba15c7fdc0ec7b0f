"""JSON file state management backend."""

import json
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import structlog
from pydantic import TypeAdapter, ValidationError

from finscrape.models import NewsArticle, NewsStore, VisitedState

logger = structlog.get_logger(__name__)

_LAST_UPDATED = TypeAdapter(Optional[datetime])


def _read_document(path: Path) -> dict | None:
    """Return the parsed JSON object at path, or None if absent or unusable."""
    if not path.exists():
        logger.debug("store.no_file", path=str(path))
        return None
    try:
        with open(path, encoding="utf-8") as f:
            raw = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.warning("store.load_failed", path=str(path), error=str(e))
        return None
    if not isinstance(raw, dict):
        logger.warning("store.load_failed", path=str(path), error="document is not an object")
        return None
    return raw


def _write_document(path: Path, document: dict) -> None:
    """Replace path with document in one step; readers never see a partial file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(document, f, indent=2, ensure_ascii=False)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except Exception:
        Path(tmp_name).unlink(missing_ok=True)
        raise


class VisitedStateStore:
    """Persists the URLs already handled, keeping only the most recent ones."""

    def __init__(self, path: Path, max_urls: int = 500):
        self._path = Path(path)
        self._max_urls = max_urls

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> VisitedState:
        """Load visited URLs.

        Missing or corrupt files yield an empty state. Entries that are not
        strings are dropped one by one; the rest of the list is kept.
        """
        raw = _read_document(self._path)
        if raw is None:
            return VisitedState()
        entries = raw.get("visitedUrls", [])
        if not isinstance(entries, list):
            logger.warning(
                "store.state_invalid", path=str(self._path), error="visitedUrls is not a list"
            )
            return VisitedState()

        urls = [url for url in entries if isinstance(url, str) and url]
        if len(urls) != len(entries):
            logger.warning(
                "store.visited_entries_dropped",
                path=str(self._path),
                dropped=len(entries) - len(urls),
            )
        state = VisitedState(visited_urls=urls)

        logger.debug("store.state_loaded", path=str(self._path), visited=len(state.visited_urls))
        return state

    def save(self, state: VisitedState) -> VisitedState:
        """Trim to the newest max_urls entries and overwrite the file."""
        trimmed = VisitedState(visited_urls=state.visited_urls[-self._max_urls:])
        _write_document(self._path, trimmed.model_dump(mode="json", by_alias=True))
        logger.debug(
            "store.state_saved",
            path=str(self._path),
            visited=len(trimmed.visited_urls),
            dropped=len(state.visited_urls) - len(trimmed.visited_urls),
        )
        return trimmed


class NewsFileStore:
    """Persists collected articles for the dashboard, newest max_articles kept."""

    def __init__(self, path: Path, max_articles: int = 100):
        self._path = Path(path)
        self._max_articles = max_articles

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> NewsStore:
        """Load the news document.

        Missing or corrupt files yield an empty store. Each article is
        validated on its own, so one bad record is logged and dropped while
        the others survive.
        """
        raw = _read_document(self._path)
        if raw is None:
            return NewsStore()
        entries = raw.get("articles", [])
        if not isinstance(entries, list):
            logger.warning(
                "store.news_invalid", path=str(self._path), error="articles is not a list"
            )
            return NewsStore()

        articles = []
        for index, entry in enumerate(entries):
            try:
                articles.append(NewsArticle.model_validate(entry))
            except ValidationError as e:
                logger.warning(
                    "store.article_invalid",
                    path=str(self._path),
                    index=index,
                    error_count=e.error_count(),
                    error=str(e),
                )

        try:
            last_updated = _LAST_UPDATED.validate_python(raw.get("lastUpdated"))
        except ValidationError:
            logger.warning("store.last_updated_invalid", path=str(self._path))
            last_updated = None

        news = NewsStore(articles=articles, last_updated=last_updated)
        logger.debug("store.news_loaded", path=str(self._path), articles=len(news.articles))
        return news

    def save(self, news: NewsStore) -> NewsStore:
        """Trim to the newest max_articles, stamp lastUpdated and overwrite the file."""
        saved = NewsStore(
            articles=news.articles[-self._max_articles:],
            last_updated=datetime.now(timezone.utc),
        )
        _write_document(self._path, saved.model_dump(mode="json", by_alias=True))
        logger.info(
            "store.news_saved",
            path=str(self._path),
            articles=len(saved.articles),
            dropped=len(news.articles) - len(saved.articles),
        )
        return saved

    def read_articles(self) -> list[dict]:
        """Articles as the external dashboard reads them: raw dicts, empty if unreadable.

        Nothing in the scrape loop calls this; it is the reference reader for
        consumers of the news file and pins the read contract in tests.
        """
        raw = _read_document(self._path)
        if raw is None:
            return []
        articles = raw.get("articles", [])
        return articles if isinstance(articles, list) else []
