"""Abstract browser capabilities the scraper depends on."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


class NavigationError(Exception):
    """Raised when a page cannot be loaded within its timeout."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"Navigation to {url} failed: {reason}")
        self.url = url
        self.reason = reason


@dataclass(frozen=True)
class Anchor:
    """A link as rendered in the page."""

    href: str
    text: str
    heading_text: str = ""


class PageDriver(ABC):
    """A single browser tab, used serially."""

    @abstractmethod
    async def goto(self, url: str, timeout_ms: int) -> None:
        """Navigate and wait for DOM-ready. Raises NavigationError on failure."""
        ...

    @abstractmethod
    async def click_if_visible(self, selector: str, timeout_ms: int) -> bool:
        """Click the first match if it becomes visible in time. Never raises."""
        ...

    @abstractmethod
    async def scroll_by_viewport(self, fraction: float) -> None:
        """Scroll down by a fraction of the viewport height."""
        ...

    @abstractmethod
    async def scroll_to_top(self) -> None:
        ...

    @abstractmethod
    async def collect_anchors(self, selector: str, heading_selector: str) -> list[Anchor]:
        """All anchors matching selector, in DOM order, with trimmed text."""
        ...

    @abstractmethod
    async def first_text(self, selectors: list[str]) -> str:
        """Trimmed text of the first selector, in priority order, with a non-empty match."""
        ...

    @abstractmethod
    async def close(self) -> None:
        ...


class BrowserDriver(ABC):
    """A launched browser able to open pages."""

    @abstractmethod
    async def new_page(self) -> PageDriver:
        ...

    @abstractmethod
    async def close(self) -> None:
        ...
