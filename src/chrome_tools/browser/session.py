"""
Page Session

Scoped acquisition of one browser and one page for a single tool call.

The page is always closed and the browser always released when the scope
exits, whether the body returned, raised, or was cancelled by a timeout.
Close order is page first, then browser.
"""

import logging
from enum import Enum
from typing import Any, Optional

from playwright.async_api import Page, TimeoutError as PlaywrightTimeout

from ..errors import NavigationError, ToolError
from .controller import BrowserConfig, BrowserHandle, BrowserProvider

logger = logging.getLogger(__name__)

# Navigation timeout used by tools that do not take a timeout parameter (ms)
DEFAULT_NAVIGATION_TIMEOUT = 20000

# Extra wait for network quiet after "load" in ALMOST_IDLE mode (ms)
ALMOST_IDLE_GRACE = 2000


class OperationState(Enum):
    """Lifecycle of a single tool invocation."""

    IDLE = "idle"
    ACQUIRING_BROWSER = "acquiring_browser"
    PAGE_OPEN = "page_open"
    NAVIGATING = "navigating"
    EXTRACTING = "extracting"
    RELEASING = "releasing"
    DONE = "done"
    FAILED = "failed"


TERMINAL_STATES = (OperationState.DONE, OperationState.FAILED)


class WaitCondition(Enum):
    """When navigation is considered finished."""

    CONTENT_LOADED = "domcontentloaded"
    LOAD = "load"
    NETWORK_IDLE = "networkidle"
    # "load", then a short best-effort wait for the network to go quiet
    ALMOST_IDLE = "almostidle"


class PageSession:
    """
    One browser plus one page, owned by a single operation.

    Usage:
        >>> async with PageSession(provider, config, "chrome_fetch_page") as scope:
        ...     await scope.navigate(url, WaitCondition.CONTENT_LOADED)
        ...     scope.extracting()
        ...     html = await scope.page.content()

    Attributes:
        operation: Tool name, used as error prefix and in log records
        state: Current OperationState
        history: Every state visited, in order
        release_errors: Errors raised while releasing (logged, never re-raised)
    """

    def __init__(
        self,
        provider: BrowserProvider,
        config: BrowserConfig,
        operation: str,
        page_options: Optional[dict[str, Any]] = None,
    ):
        self.provider = provider
        self.config = config
        self.operation = operation
        self.page_options = page_options or {}

        self.browser: Optional[BrowserHandle] = None
        self._page: Optional[Page] = None

        self.state = OperationState.IDLE
        self.history: list[OperationState] = [OperationState.IDLE]
        self.release_errors: list[BaseException] = []

    @property
    def page(self) -> Page:
        if self._page is None:
            raise RuntimeError("Page is not open")
        return self._page

    def _transition(self, state: OperationState) -> None:
        if self.state in TERMINAL_STATES:
            raise RuntimeError(f"Operation already finished ({self.state.value})")
        self.state = state
        self.history.append(state)

    async def __aenter__(self) -> "PageSession":
        self._transition(OperationState.ACQUIRING_BROWSER)
        try:
            self.browser = await self.provider.acquire(self.config)
            self._page = await self.browser.new_page(**self.page_options)
        except BaseException as e:
            # Browser acquired but the page could not be opened
            await self._release()
            self._transition(OperationState.FAILED)
            if isinstance(e, ToolError):
                e.for_operation(self.operation)
            raise

        self._transition(OperationState.PAGE_OPEN)
        logger.debug("[%s] page opened (%s browser)", self.operation, self.browser.mode)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> bool:
        await self._release()
        self._transition(OperationState.FAILED if exc_type else OperationState.DONE)
        if isinstance(exc_val, ToolError):
            exc_val.for_operation(self.operation)
        return False

    async def _release(self) -> None:
        """Close page, then release browser. Each step runs exactly once."""
        self._transition(OperationState.RELEASING)

        page, self._page = self._page, None
        if page is not None:
            try:
                await page.close()
            except Exception as e:
                self._record_release_error("page close", e)

        browser = self.browser
        if browser is not None and not browser.is_released:
            try:
                await browser.release()
            except Exception as e:
                self._record_release_error(f"browser {browser.mode} release", e)

    def _record_release_error(self, step: str, error: Exception) -> None:
        self.release_errors.append(error)
        logger.warning("[%s] %s failed: %s", self.operation, step, error)

    async def navigate(
        self,
        url: str,
        wait: WaitCondition = WaitCondition.LOAD,
        timeout: int = DEFAULT_NAVIGATION_TIMEOUT,
    ) -> None:
        """
        Navigate the page and wait for ``wait``.

        Args:
            url: Target URL
            wait: Navigation completion condition
            timeout: Maximum wait time in ms

        Raises:
            NavigationError: on timeout or navigation failure
        """
        self._transition(OperationState.NAVIGATING)
        logger.debug("[%s] navigating to %s (wait=%s)", self.operation, url, wait.value)

        wait_until = "load" if wait is WaitCondition.ALMOST_IDLE else wait.value
        try:
            await self.page.goto(url, wait_until=wait_until, timeout=timeout)
        except PlaywrightTimeout as e:
            raise NavigationError(
                f"Navigation timeout after {timeout}ms: {url}", self.operation
            ) from e
        except Exception as e:
            raise NavigationError(f"Navigation failed: {e!s}", self.operation) from e

        if wait is WaitCondition.ALMOST_IDLE:
            try:
                await self.page.wait_for_load_state("networkidle", timeout=ALMOST_IDLE_GRACE)
            except PlaywrightTimeout:
                logger.debug("[%s] network still busy after %sms", self.operation, ALMOST_IDLE_GRACE)

    def extracting(self) -> None:
        """Mark the start of the extraction step."""
        self._transition(OperationState.EXTRACTING)
