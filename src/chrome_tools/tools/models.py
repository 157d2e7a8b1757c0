"""
Data models for the Chrome tools.

Parameter models are what the host validates tool arguments against;
result models are the plain values each tool returns. Results never hold
live Playwright objects.
"""

import base64
from typing import Annotated, Any, Callable, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, WithJsonSchema

MIN_TIMEOUT_SECONDS = 5
MAX_TIMEOUT_SECONDS = 180
DEFAULT_TIMEOUT_SECONDS = 30

MIN_SCREEN_WIDTH = 300
MAX_SCREEN_WIDTH = 1024
SCREEN_HEIGHT = 768


def _timeout_field(description: str = "(Optional) Timeout for the operation in seconds (default 30, max 180)."):
    return Field(
        default=DEFAULT_TIMEOUT_SECONDS,
        ge=MIN_TIMEOUT_SECONDS,
        le=MAX_TIMEOUT_SECONDS,
        description=description,
    )


# Tool calls always carry JavaScript source; Python callers may pass a callable
ScriptSource = Annotated[Union[str, Callable[..., Any]], WithJsonSchema({"type": "string"})]


# ---------------------------------------------------------------------------
# Parameters
# ---------------------------------------------------------------------------


class SearchParams(BaseModel):
    """Parameters for web and news search."""

    model_config = ConfigDict(extra="forbid")

    query: str = Field(min_length=1, description="The search query.")
    country_code: Optional[str] = Field(
        default=None,
        description="(Optional) Two-letter country code used to localize results (e.g. 'us').",
    )


class FetchPageParams(BaseModel):
    model_config = ConfigDict(extra="forbid")

    url: str = Field(min_length=1, description="The URL of the page to fetch.")
    render: bool = Field(
        default=False,
        description="Wait for the network to go idle so client-side rendering can finish.",
    )


class ScrapePageMetadataParams(BaseModel):
    model_config = ConfigDict(extra="forbid")

    url: str = Field(min_length=1, description="The URL of the web page to scrape metadata from.")
    timeout_seconds: int = _timeout_field()


class ScrapePageTextParams(BaseModel):
    model_config = ConfigDict(extra="forbid")

    url: str = Field(min_length=1, description="The URL of the web page to scrape text from.")
    timeout_seconds: int = _timeout_field()
    selector: Optional[str] = Field(
        default=None,
        description=(
            "(Optional) Custom CSS selector to target specific content. If not provided, "
            "'article', 'main', or 'body' are tried in that order."
        ),
    )
    as_markdown: bool = Field(
        default=False,
        description="Return the matched element as markdown instead of flattened text.",
    )


class TakeScreenshotParams(BaseModel):
    model_config = ConfigDict(extra="forbid")

    url: str = Field(min_length=1, description="The URL of the web page to screenshot.")
    screen_width: int = Field(
        default=MAX_SCREEN_WIDTH,
        ge=MIN_SCREEN_WIDTH,
        le=MAX_SCREEN_WIDTH,
        description="The width of the browser viewport in pixels (min 300, max 1024).",
    )


class RunScriptParams(BaseModel):
    """
    Parameters for script execution.

    ``script`` is a Python callable when called from Python, or the source
    of a JavaScript function when it arrives from a tool call.
    """

    model_config = ConfigDict(extra="forbid")

    script: ScriptSource = Field(
        description=(
            "JavaScript function source, e.g. 'async () => document.title'. It runs inside "
            "the page and may call consoleLog(...) to record log lines. Its return value "
            "is returned as the result."
        ),
    )
    navigate_to: Optional[str] = Field(
        default=None,
        description="(Optional) Page URL to navigate to before executing the script.",
    )
    timeout_seconds: int = _timeout_field(
        "(Optional) Timeout for script execution (default 30s, max 180)."
    )


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


class SearchResult(BaseModel):
    position: int
    title: str
    link: str
    snippet: str = ""


class WebSearchResult(BaseModel):
    organic: list[SearchResult] = Field(default_factory=list)


class NewsItem(BaseModel):
    position: int
    title: str
    link: str
    snippet: str = ""
    source: str = ""
    date: str = ""


class NewsSearchResult(BaseModel):
    news: list[NewsItem] = Field(default_factory=list)


class WebPageResult(BaseModel):
    markdown: str
    url: str


class PageMetadata(BaseModel):
    """Head markup plus every JSON-LD block in document order."""

    head_html: str
    json_ld: list[Any] = Field(default_factory=list)
    """Parsed blocks; unparseable ones become {"error": ..., "content": ...}."""

    url: str


class PageText(BaseModel):
    text: str
    source_selector: str
    """Selector that actually matched."""

    url: str


class Screenshot(BaseModel):
    data: bytes
    mime_type: str = "image/png"
    width: int
    height: int = SCREEN_HEIGHT

    def to_base64(self) -> str:
        return base64.b64encode(self.data).decode("utf-8")

    def to_payload(self) -> dict[str, Any]:
        return {
            "type": "media",
            "mime_type": self.mime_type,
            "data": self.to_base64(),
            "width": self.width,
            "height": self.height,
        }


class ScriptResult(BaseModel):
    result: Any = None
    logs: list[str] = Field(default_factory=list)
