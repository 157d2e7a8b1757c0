"""
Chrome Tools

One-shot browser operations, each against its own browser and page:
- Web search, news search, page fetch
- Page metadata and JSON-LD extraction
- Page text extraction
- Viewport screenshots
- Script execution
"""

from .base import ToolDefinition, ToolResult, get_all_tools, get_tool, get_tool_schemas, invoke_tool, tool
from .metadata import scrape_page_metadata
from .models import (
    FetchPageParams,
    NewsItem,
    NewsSearchResult,
    PageMetadata,
    PageText,
    RunScriptParams,
    ScrapePageMetadataParams,
    ScrapePageTextParams,
    Screenshot,
    ScriptResult,
    SearchParams,
    SearchResult,
    TakeScreenshotParams,
    WebPageResult,
    WebSearchResult,
)
from .screenshot import take_screenshot
from .script import run_script
from .search import ChromeWebSearchProvider, fetch_page, search_news, search_web
from .text import scrape_page_text

__all__ = [
    # Search
    "search_web",
    "search_news",
    "fetch_page",
    "ChromeWebSearchProvider",
    # Page extraction
    "scrape_page_metadata",
    "scrape_page_text",
    "take_screenshot",
    "run_script",
    # Models
    "FetchPageParams",
    "NewsItem",
    "NewsSearchResult",
    "PageMetadata",
    "PageText",
    "RunScriptParams",
    "ScrapePageMetadataParams",
    "ScrapePageTextParams",
    "Screenshot",
    "ScriptResult",
    "SearchParams",
    "SearchResult",
    "TakeScreenshotParams",
    "WebPageResult",
    "WebSearchResult",
    # Base
    "ToolDefinition",
    "ToolResult",
    "tool",
    "get_tool",
    "get_all_tools",
    "get_tool_schemas",
    "invoke_tool",
]
