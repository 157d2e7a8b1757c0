"""
Rich TUI Console Setup

Console infrastructure for the chrome-tools CLI.
Configured via environment variables for customizable appearance.
"""

import os
from dataclasses import dataclass
from datetime import datetime
from typing import Literal, Optional

from rich.console import Console
from rich.panel import Panel
from rich.style import Style
from rich.theme import Theme


BlockType = Literal["action", "result"]


@dataclass
class TUIConfig:
    """
    TUI configuration loaded from environment variables.

    Attributes:
        color_action: Color for ACTION blocks (browser operations)
        color_result: Color for RESULT blocks (outcomes)
        show_timestamps: Whether to display timestamps
    """

    color_action: str = "green"
    color_result: str = "yellow"
    show_timestamps: bool = True

    @classmethod
    def from_env(cls) -> "TUIConfig":
        """Load configuration from environment variables."""
        return cls(
            color_action=os.getenv("COLOR_ACTION", "green"),
            color_result=os.getenv("COLOR_RESULT", "yellow"),
            show_timestamps=os.getenv("SHOW_TIMESTAMPS", "true").lower() == "true",
        )


def create_theme(config: TUIConfig) -> Theme:
    """Create a Rich theme from TUI configuration."""
    return Theme(
        {
            "action": Style(color=config.color_action, bold=True),
            "action.text": Style(color=config.color_action),
            "result": Style(color=config.color_result, bold=True),
            "result.text": Style(color=config.color_result),
            "timestamp": Style(dim=True),
            "label": Style(bold=True),
        }
    )


class ToolConsole:
    """
    Rich console wrapper for tool output.

    Provides formatted ACTION and RESULT blocks with consistent styling
    and optional timestamps.
    """

    def __init__(self, config: Optional[TUIConfig] = None, console: Optional[Console] = None):
        """
        Initialize the tool console.

        Args:
            config: TUI configuration. If None, loads from environment.
            console: Underlying Rich console (e.g. one recording output in tests)
        """
        self.config = config or TUIConfig.from_env()
        self._theme = create_theme(self.config)
        self.console = console or Console(theme=self._theme)

    def _get_timestamp(self) -> str:
        """Get formatted timestamp if enabled."""
        if self.config.show_timestamps:
            return datetime.now().strftime("%H:%M:%S")
        return ""

    def title(self, label: str) -> str:
        """Block title with the timestamp prepended when enabled."""
        timestamp = self._get_timestamp()
        return f"{timestamp} {label}" if timestamp else label

    def print_block(
        self,
        content,
        block_type: BlockType,
        title: Optional[str] = None,
    ) -> None:
        """
        Print a styled block to the console.

        Args:
            content: Text or renderable to display
            block_type: Type of block (action, result)
            title: Optional title to override default label
        """
        color = self.config.color_action if block_type == "action" else self.config.color_result
        panel = Panel(
            content,
            title=self.title(title or f"[{block_type.upper()}]"),
            title_align="left",
            border_style=color,
            padding=(0, 1),
        )
        self.console.print(panel)

    def print_action(self, content: str, title: Optional[str] = None) -> None:
        """Print an ACTION block (browser operation)."""
        self.print_block(content, "action", title)

    def print(self, *args, **kwargs) -> None:
        """Passthrough to underlying Rich console."""
        self.console.print(*args, **kwargs)

    def status(self, message: str):
        """Create a status context for progress indication."""
        return self.console.status(message)


# Global console instance
_console: Optional[ToolConsole] = None


def get_console() -> ToolConsole:
    """Get or create the global console instance."""
    global _console
    if _console is None:
        _console = ToolConsole()
    return _console
