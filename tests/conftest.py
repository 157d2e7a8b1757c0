"""
Shared fixtures: in-memory stand-ins for the Playwright driver, browser and page.

Every fake records its lifecycle calls in ``events`` so tests can check
release order and counts.
"""

from typing import Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
from playwright.async_api import Error as PlaywrightError

from chrome_tools.browser import BrowserConfig, BrowserProvider
from chrome_tools.service import ChromeService

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-image-data"

REMOTE_ENDPOINT = "ws://127.0.0.1:9222/devtools/browser/3f1c"


class FakeLocator:
    """Locator over at most one element with the given rendered text."""

    def __init__(self, text: Optional[str] = None, html: Optional[str] = None):
        self.count = AsyncMock(return_value=0 if text is None else 1)
        self.first = MagicMock()
        self.first.inner_text = AsyncMock(return_value=text)
        self.first.evaluate = AsyncMock(return_value=html)


class FakePage:
    def __init__(self, events: list[str]):
        self.url = "about:blank"
        self.goto = AsyncMock()
        self.wait_for_selector = AsyncMock()
        self.wait_for_load_state = AsyncMock()
        self.content = AsyncMock(return_value="<html><body><h1>Title</h1><p>Body text</p></body></html>")
        self.evaluate = AsyncMock(return_value=None)
        self.screenshot = AsyncMock(return_value=PNG_BYTES)
        self.expose_function = AsyncMock()
        self.close = AsyncMock(side_effect=lambda: events.append("page.close"))

        # selector -> (inner text, outer html)
        self.elements: dict[str, tuple[str, str]] = {}
        self.invalid_selectors: set[str] = set()
        self.handlers: dict[str, list] = {}

    def locator(self, selector: str) -> FakeLocator:
        if selector in self.invalid_selectors:
            locator = FakeLocator()
            locator.count.side_effect = PlaywrightError(f"Unexpected token in selector \"{selector}\"")
            return locator
        if selector in self.elements:
            text, html = self.elements[selector]
            return FakeLocator(text, html)
        return FakeLocator()

    def on(self, event: str, handler) -> None:
        self.handlers.setdefault(event, []).append(handler)

    def emit(self, event: str, payload) -> None:
        for handler in self.handlers.get(event, []):
            handler(payload)


class FakeChrome:
    """
    A Playwright driver whose browser always opens the same FakePage.

    Attributes:
        events: Ordered lifecycle calls ("page.close", "browser.close", "playwright.stop")
        starts: Number of driver starts (one per acquisition)
    """

    def __init__(self, config: BrowserConfig):
        self.config = config
        self.events: list[str] = []
        self.starts = 0

        self.page = FakePage(self.events)

        self.browser = MagicMock(name="browser")
        self.browser.new_page = AsyncMock(return_value=self.page)
        self.browser.close = AsyncMock(side_effect=lambda: self.events.append("browser.close"))

        self.playwright = MagicMock(name="playwright")
        self.playwright.chromium.launch = AsyncMock(return_value=self.browser)
        self.playwright.chromium.connect_over_cdp = AsyncMock(return_value=self.browser)
        self.playwright.stop = AsyncMock(side_effect=lambda: self.events.append("playwright.stop"))

        self.provider = BrowserProvider(playwright_factory=self._factory)
        self.service = ChromeService(defaults=config, provider=self.provider)

    def _factory(self):
        self.starts += 1
        starter = MagicMock(name="async_playwright")
        starter.start = AsyncMock(return_value=self.playwright)
        return starter

    def assert_released_once(self) -> None:
        assert self.page.close.await_count == 1
        assert self.playwright.stop.await_count == 1
        if self.config.launch:
            assert self.browser.close.await_count == 1
        else:
            assert self.browser.close.await_count == 0


@pytest.fixture
def chrome() -> FakeChrome:
    """Fake Chrome acquired by launching."""
    return FakeChrome(BrowserConfig(launch=True, headless=True))


@pytest.fixture
def remote_chrome() -> FakeChrome:
    """Fake Chrome acquired by connecting to a remote endpoint."""
    return FakeChrome(BrowserConfig(launch=False, ws_endpoint=REMOTE_ENDPOINT))
