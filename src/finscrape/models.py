"""Domain models for the finscrape headline pipeline."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class CategoryTag(str, Enum):
    EARNINGS = "earnings"
    TECH = "tech"
    CRYPTO = "crypto"
    FED = "fed"
    ENERGY = "energy"
    MARKET = "market"


class VisitOutcome(str, Enum):
    """What happened to a candidate URL during article extraction."""

    PROCESSED = "processed"
    DISCARDED = "discarded"
    FAILED = "failed"


class Category(BaseModel):
    tag: CategoryTag
    tag_label: str = Field(alias="tagLabel")

    model_config = {"populate_by_name": True}


class LinkCandidate(BaseModel):
    """An article link found on the listing page, with its preview text."""

    url: str
    headline: str


class NewsArticle(BaseModel):
    """A classified headline as stored in the news file."""

    tag: CategoryTag
    tag_label: str = Field(alias="tagLabel")
    headline: str = Field(min_length=10)
    url: str
    source: str

    model_config = {"populate_by_name": True}


class VisitedState(BaseModel):
    """URLs already handled by earlier cycles, oldest first."""

    visited_urls: list[str] = Field(default_factory=list, alias="visitedUrls")

    model_config = {"populate_by_name": True}

    @field_validator("visited_urls")
    @classmethod
    def drop_duplicates(cls, v):
        return list(dict.fromkeys(v))

    def remember(self, urls: list[str]) -> int:
        """Append URLs not seen before. Returns how many were added."""
        known = set(self.visited_urls)
        added = 0
        for url in urls:
            if url in known:
                continue
            known.add(url)
            self.visited_urls.append(url)
            added += 1
        return added


class NewsStore(BaseModel):
    """Document read by the dashboard: recent articles plus a save timestamp."""

    articles: list[NewsArticle] = Field(default_factory=list)
    last_updated: Optional[datetime] = Field(default=None, alias="lastUpdated")

    model_config = {"populate_by_name": True}
