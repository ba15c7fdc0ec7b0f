"""Configuration loading and validation using Pydantic."""

from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings


class ScraperConfig(BaseModel):
    homepage_url: str = "https://finance.yahoo.com/"
    interval_seconds: int = Field(default=120, ge=1)
    source_fallback: str = Field(default="Yahoo Finance", min_length=1)


class DiscoveryConfig(BaseModel):
    """Listing page navigation, scrolling and link filtering."""

    navigation_timeout_ms: int = Field(default=30_000, gt=0)
    settle_seconds: float = Field(default=2.0, ge=0)
    consent_selector: str = 'button:has-text("Accept All")'
    consent_timeout_ms: int = Field(default=2_000, gt=0)
    consent_settle_seconds: float = Field(default=1.0, ge=0)
    scroll_steps_min: int = Field(default=3, ge=0)
    scroll_steps_max: int = Field(default=4, ge=0)
    scroll_fraction: float = Field(default=0.8, gt=0, le=1)
    scroll_pause_min_seconds: float = Field(default=1.5, ge=0)
    scroll_pause_max_seconds: float = Field(default=3.0, ge=0)
    top_settle_seconds: float = Field(default=1.0, ge=0)
    link_patterns: list[str] = Field(default_factory=lambda: ["/news/", "/m/"], min_length=1)
    heading_selector: str = "h3"
    min_preview_chars: int = Field(default=15, ge=0)

    @field_validator("scroll_steps_max")
    @classmethod
    def steps_max_gte_min(cls, v, info):
        if "scroll_steps_min" in info.data and v < info.data["scroll_steps_min"]:
            raise ValueError("scroll_steps_max must be >= scroll_steps_min")
        return v

    @field_validator("scroll_pause_max_seconds")
    @classmethod
    def pause_max_gte_min(cls, v, info):
        if "scroll_pause_min_seconds" in info.data and v < info.data["scroll_pause_min_seconds"]:
            raise ValueError("scroll_pause_max_seconds must be >= scroll_pause_min_seconds")
        return v

    @property
    def anchor_selector(self) -> str:
        """CSS selector matching any anchor whose href contains a link pattern."""
        return ", ".join(f'a[href*="{pattern}"]' for pattern in self.link_patterns)


class ExtractorConfig(BaseModel):
    """Per-article visit, selectors and pacing."""

    navigation_timeout_ms: int = Field(default=15_000, gt=0)
    settle_seconds: float = Field(default=1.5, ge=0)
    min_headline_chars: int = Field(default=10, ge=10)
    pacing_min_seconds: float = Field(default=0.8, ge=0)
    pacing_max_seconds: float = Field(default=1.5, ge=0)
    headline_selectors: list[str] = Field(
        default_factory=lambda: [
            'h1[data-test-locator="headline"]',
            "header h1",
            "article h1",
            "h1",
        ],
        min_length=1,
    )
    source_selectors: list[str] = Field(
        default_factory=lambda: [
            '[class*="byline"] a',
            '[class*="provider"] a',
            '[data-test-locator="byline"] a',
            '[class*="author"] a',
        ],
        min_length=1,
    )

    @field_validator("pacing_max_seconds")
    @classmethod
    def pacing_max_gte_min(cls, v, info):
        if "pacing_min_seconds" in info.data and v < info.data["pacing_min_seconds"]:
            raise ValueError("pacing_max_seconds must be >= pacing_min_seconds")
        return v


class StorageConfig(BaseModel):
    state_file: Path = Path("data/scraper-state.json")
    news_file: Path = Path("data/scraped-news.json")
    max_visited_urls: int = Field(default=500, ge=1)
    max_articles: int = Field(default=100, ge=1)


class BrowserConfig(BaseModel):
    engine: Literal["chromium", "firefox", "webkit"] = "chromium"
    headless: bool = False
    launch_args: list[str] = Field(default_factory=list)


class LoggingConfig(BaseModel):
    level: str = "INFO"
    app_log: str
    article_log: str
    max_bytes: int = 10485760
    backup_count: int = 5


class AppConfig(BaseModel):
    scraper: ScraperConfig = Field(default_factory=ScraperConfig)
    discovery: DiscoveryConfig = Field(default_factory=DiscoveryConfig)
    extractor: ExtractorConfig = Field(default_factory=ExtractorConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    browser: BrowserConfig = Field(default_factory=BrowserConfig)
    logging: LoggingConfig


class RuntimeSettings(BaseSettings):
    """Environment overrides, loaded from FINSCRAPE_* variables or .env."""

    config_path: Path = Path("config/settings.yaml")
    headless: Optional[bool] = None

    model_config = {"env_prefix": "FINSCRAPE_", "env_file": ".env", "env_file_encoding": "utf-8"}


def load_config(config_path: Path = Path("config/settings.yaml")) -> AppConfig:
    """Load and validate application configuration from YAML."""
    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    return AppConfig(**raw)


def apply_overrides(config: AppConfig, settings: RuntimeSettings) -> AppConfig:
    """Return a copy of config with environment overrides applied."""
    if settings.headless is None:
        return config
    browser = config.browser.model_copy(update={"headless": settings.headless})
    return config.model_copy(update={"browser": browser})
