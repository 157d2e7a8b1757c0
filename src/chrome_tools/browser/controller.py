"""
Browser Controller

Acquires Playwright browser handles either by launching a local Chromium
process or by connecting to an already running browser over CDP.

Every acquisition is fresh: no pooling, no reuse, no health checks.
"""

import logging
import os
from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Literal, Optional

from dotenv import load_dotenv
from playwright.async_api import Browser, Playwright, async_playwright

from ..errors import BrowserAcquisitionError

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


HandleMode = Literal["launched", "connected"]

# Fields persisted with a session and accepted as per-session overrides
STATE_FIELDS = ("launch", "headless", "ws_endpoint", "executable_path")


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class BrowserConfig:
    """
    Configuration for acquiring a browser.

    ``launch`` selects the variant. When true a local Chromium is started
    with ``headless`` and ``executable_path``; when false the browser at
    ``ws_endpoint`` is connected to and the launch options are ignored.
    """

    launch: bool = True

    # Launch variant
    headless: bool = True
    executable_path: Optional[str] = None

    # Connect variant (ws://.../devtools/browser/<id> or http://host:9222)
    ws_endpoint: Optional[str] = None

    # Connection timeout in ms
    connect_timeout: int = 30000

    def __post_init__(self):
        if not self.launch and not self.ws_endpoint:
            raise ValueError("ws_endpoint is required when launch is false")

    @classmethod
    def from_env(cls) -> "BrowserConfig":
        """
        Create BrowserConfig from environment variables.

        Environment variables:
            CHROME_LAUNCH: true/false (default: true)
            CHROME_HEADLESS: true/false (default: true)
            CHROME_EXECUTABLE_PATH: path to a Chrome/Chromium binary
            CHROME_WS_ENDPOINT: remote debugging endpoint (required if not launching)
            CHROME_CONNECT_TIMEOUT: int in ms (default: 30000)
        """
        return cls(
            launch=_env_flag("CHROME_LAUNCH", "true"),
            headless=_env_flag("CHROME_HEADLESS", "true"),
            executable_path=os.getenv("CHROME_EXECUTABLE_PATH") or None,
            ws_endpoint=os.getenv("CHROME_WS_ENDPOINT") or None,
            connect_timeout=int(os.getenv("CHROME_CONNECT_TIMEOUT", "30000")),
        )

    def merged(self, overrides: Optional[dict[str, Any]]) -> "BrowserConfig":
        """
        Return a copy with per-session overrides applied.

        Unknown keys are rejected; ``None`` values leave the default in place.
        """
        if not overrides:
            return self
        unknown = set(overrides) - set(STATE_FIELDS)
        if unknown:
            raise ValueError(f"Unknown browser config keys: {', '.join(sorted(unknown))}")
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes)

    def serialize(self) -> dict[str, Any]:
        """Serialize the session-visible state."""
        data = asdict(self)
        return {key: data[key] for key in STATE_FIELDS}

    @classmethod
    def deserialize(cls, data: dict[str, Any]) -> "BrowserConfig":
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})

    def show(self) -> list[str]:
        """Human-readable description of the configuration."""
        return [
            f"Launch: {self.launch}",
            f"Headless: {self.headless}",
            f"Browser WS Endpoint: {self.ws_endpoint or 'N/A'}",
            f"Executable Path: {self.executable_path or 'N/A'}",
        ]

    def launch_options(self) -> dict[str, Any]:
        options: dict[str, Any] = {"headless": self.headless}
        if self.executable_path:
            options["executable_path"] = self.executable_path
        return options


class BrowserHandle:
    """
    A live browser owned by a single tool invocation.

    Release semantics depend on how the browser was obtained:
    - launched: the browser process is terminated
    - connected: the connection is dropped, the remote browser keeps running

    ``release()`` is idempotent.
    """

    def __init__(self, playwright: Playwright, browser: Browser, mode: HandleMode):
        self.playwright = playwright
        self.browser = browser
        self.mode = mode
        self._released = False

    @property
    def is_released(self) -> bool:
        return self._released

    async def new_page(self, **kwargs):
        """Open a new page (tab)."""
        return await self.browser.new_page(**kwargs)

    async def release(self) -> None:
        if self._released:
            return
        self._released = True

        if self.mode == "launched":
            await self.close()
        else:
            await self.disconnect()

    async def close(self) -> None:
        """Terminate a locally launched browser and its driver."""
        try:
            await self.browser.close()
        finally:
            await self.playwright.stop()
        logger.debug("Closed launched browser")

    async def disconnect(self) -> None:
        """
        Drop the CDP connection.

        Stopping the driver closes the socket without sending
        Browser.close, so the remote process survives.
        """
        await self.playwright.stop()
        logger.debug("Disconnected from remote browser")

    def __repr__(self) -> str:
        state = "released" if self._released else "live"
        return f"<BrowserHandle mode={self.mode} {state}>"


class BrowserProvider:
    """
    Produces live BrowserHandles from a BrowserConfig.

    Usage:
        >>> provider = BrowserProvider()
        >>> handle = await provider.acquire(BrowserConfig(headless=True))
        >>> try:
        ...     page = await handle.new_page()
        ... finally:
        ...     await handle.release()
    """

    def __init__(self, playwright_factory=async_playwright):
        self._playwright_factory = playwright_factory

    async def acquire(self, config: BrowserConfig) -> BrowserHandle:
        """
        Launch or connect according to ``config.launch``.

        Raises:
            BrowserAcquisitionError: if the browser cannot be started or reached
        """
        playwright = await self._playwright_factory().start()

        try:
            if config.launch:
                browser = await self._launch(playwright, config)
                mode: HandleMode = "launched"
            else:
                browser = await self._connect(playwright, config)
                mode = "connected"
        except BaseException:
            await playwright.stop()
            raise

        return BrowserHandle(playwright, browser, mode)

    async def _launch(self, playwright: Playwright, config: BrowserConfig) -> Browser:
        options = config.launch_options()
        logger.debug("Launching Chromium with %s", options)
        try:
            return await playwright.chromium.launch(**options)
        except Exception as e:
            raise BrowserAcquisitionError(f"Failed to launch browser: {e!s}") from e

    async def _connect(self, playwright: Playwright, config: BrowserConfig) -> Browser:
        logger.debug("Connecting to browser at %s", config.ws_endpoint)
        try:
            return await playwright.chromium.connect_over_cdp(
                config.ws_endpoint,
                timeout=config.connect_timeout,
            )
        except Exception as e:
            raise BrowserAcquisitionError(
                f"Failed to connect to browser at {config.ws_endpoint}: {e!s}"
            ) from e
