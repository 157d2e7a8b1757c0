"""
Text Extraction Tools

Scrapes readable text from a page, preferring the most specific content
container available. Plain text is the rendered ``innerText``, so inline
script and style bodies never leak into the result.
"""

import asyncio
from typing import Optional

from playwright.async_api import Error as PlaywrightError

from ..browser import WaitCondition
from ..errors import ExtractionError, OperationTimeoutError
from .base import tool
from .markdown import html_to_markdown
from .models import PageText, ScrapePageTextParams

NAME = "chrome_scrape_page_text"

FALLBACK_SELECTORS = ("article", "main", "body")


def candidate_selectors(selector: Optional[str] = None) -> list[str]:
    """Selectors to try, in order."""
    candidates = [selector] if selector else []
    candidates.extend(s for s in FALLBACK_SELECTORS if s not in candidates)
    return candidates


def collapse_whitespace(text: str) -> str:
    return " ".join(text.split())


async def _first_match(page, selectors: list[str]):
    for candidate in selectors:
        locator = page.locator(candidate)
        try:
            matches = await locator.count()
        except PlaywrightError as e:
            raise ExtractionError(f"Invalid selector {candidate!r}: {e.message}") from e
        if matches:
            return candidate, locator.first
    return None, None


@tool(
    name=NAME,
    description=(
        "Scrape text content from a web page. By default, it prioritizes content from "
        "'article', 'main', or 'body' tags in that order. Returns the extracted text "
        "along with the source selector used."
    ),
    params=ScrapePageTextParams,
)
async def scrape_page_text(service, params: ScrapePageTextParams, session=None) -> PageText:
    timeout_ms = params.timeout_seconds * 1000

    async def _scrape() -> PageText:
        async with service.open_page(session, NAME) as scope:
            await scope.navigate(params.url, WaitCondition.CONTENT_LOADED, timeout_ms)
            scope.extracting()

            selectors = candidate_selectors(params.selector)
            source_selector, element = await _first_match(scope.page, selectors)
            if element is None:
                raise ExtractionError(f"No element matched any of: {', '.join(selectors)}")

            if params.as_markdown:
                text = html_to_markdown(await element.evaluate("el => el.outerHTML"))
            else:
                text = collapse_whitespace(await element.inner_text() or "")

        return PageText(text=text, source_selector=source_selector, url=params.url)

    try:
        return await asyncio.wait_for(_scrape(), timeout=params.timeout_seconds)
    except asyncio.TimeoutError as e:
        raise OperationTimeoutError(
            f"Text scraping timed out after {params.timeout_seconds}s"
        ) from e
