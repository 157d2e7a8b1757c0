"""
Chrome Service

Resolves the browser configuration for a calling session and hands out
page scopes. Configuration is passed to the constructor; sessions may
override individual fields.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from .browser import BrowserConfig, BrowserHandle, BrowserProvider, PageSession
from .errors import BrowserAcquisitionError

# approve(tool_name, arguments) -> allowed?
Approver = Callable[[str, dict[str, Any]], bool]


@dataclass
class ToolSession:
    """
    The session a tool is invoked from.

    Attributes:
        session_id: Identifier used in logs
        chrome: Per-session overrides for BrowserConfig fields
        approve: Callback authorizing tools that require approval
    """

    session_id: str = "default"
    chrome: dict[str, Any] = field(default_factory=dict)
    approve: Optional[Approver] = None


class ChromeService:
    """
    Chrome browser automation service.

    Holds the default BrowserConfig (read-only after construction) and
    creates a fresh browser for every call.
    """

    name = "ChromeService"
    description = "Chrome browser automation service"

    def __init__(
        self,
        defaults: Optional[BrowserConfig] = None,
        provider: Optional[BrowserProvider] = None,
    ):
        self.defaults = defaults or BrowserConfig.from_env()
        self.provider = provider or BrowserProvider()

    def config_for(self, session: Optional[ToolSession] = None) -> BrowserConfig:
        """
        Defaults merged with the session's overrides.

        Raises:
            BrowserAcquisitionError: if the overrides are unknown or leave the
                config unusable (e.g. launch=False without ws_endpoint)
        """
        if session is None:
            return self.defaults
        try:
            return self.defaults.merged(session.chrome)
        except ValueError as e:
            raise BrowserAcquisitionError(f"Invalid browser configuration: {e}") from e

    async def get_browser(self, session: Optional[ToolSession] = None) -> BrowserHandle:
        """Acquire a new browser. The caller must release it."""
        return await self.provider.acquire(self.config_for(session))

    def open_page(
        self,
        session: Optional[ToolSession],
        operation: str,
        **page_options: Any,
    ) -> PageSession:
        """Create a page scope for one operation; use with ``async with``."""
        return PageSession(
            self.provider,
            self.config_for(session),
            operation,
            page_options=page_options,
        )
