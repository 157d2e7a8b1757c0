"""
Rich TUI Interface Module

Terminal output for the chrome-tools CLI, built on the Rich library.
"""

from chrome_tools.tui.console import (
    BlockType,
    TUIConfig,
    ToolConsole,
    get_console,
)
from chrome_tools.tui.result import (
    print_data_result,
    print_error,
    print_extracted_text,
    print_result,
    print_search_results,
)

__all__ = [
    # Console infrastructure
    "BlockType",
    "TUIConfig",
    "ToolConsole",
    "get_console",
    # Result blocks
    "print_data_result",
    "print_error",
    "print_extracted_text",
    "print_result",
    "print_search_results",
]
