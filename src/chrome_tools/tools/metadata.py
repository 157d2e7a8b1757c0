"""
Metadata Tools

Extracts the document <head> and any JSON-LD (Schema.org) blocks.
"""

import asyncio
import json
from typing import Any

from ..browser import WaitCondition
from ..errors import OperationTimeoutError
from .base import tool
from .models import PageMetadata, ScrapePageMetadataParams

NAME = "chrome_scrape_page_metadata"

OMITTED = "[ omitted for brevity ]"
JSON_LD_PARSE_ERROR = "Failed to parse JSON-LD"

# Clone the head so the live page is not touched; keep tags and attributes
# but blank out code and CSS. JSON-LD bodies are returned raw and parsed
# in Python so one bad block cannot fail the others.
HEAD_SCRIPT = """(omitted) => {
  const headClone = document.head ? document.head.cloneNode(true) : document.createElement('head');

  headClone.querySelectorAll('script').forEach(script => {
    if (script.type !== 'application/ld+json') {
      script.textContent = omitted;
    }
  });
  headClone.querySelectorAll('style').forEach(style => {
    style.textContent = omitted;
  });

  const jsonLd = Array.from(document.querySelectorAll('script[type="application/ld+json"]'))
    .map(script => script.textContent || '');

  return {headHtml: headClone.innerHTML, jsonLd: jsonLd};
}"""


def parse_json_ld(blocks: list[str]) -> list[Any]:
    """
    Parse JSON-LD blocks independently.

    A block that does not parse is replaced by an error-tagged entry
    holding its raw content. Empty blocks parse as ``{}``.
    """
    parsed = []
    for raw in blocks:
        try:
            parsed.append(json.loads(raw) if raw.strip() else {})
        except ValueError:
            parsed.append({"error": JSON_LD_PARSE_ERROR, "content": raw})
    return parsed


@tool(
    name=NAME,
    description=(
        "Loads a web page and extracts metadata from the <head> tag and any JSON-LD "
        "(Schema.org) blocks found in the document. Useful for SEO analysis and "
        "extracting structured data."
    ),
    params=ScrapePageMetadataParams,
)
async def scrape_page_metadata(service, params: ScrapePageMetadataParams, session=None) -> PageMetadata:
    async def _scrape() -> PageMetadata:
        async with service.open_page(session, NAME) as scope:
            await scope.navigate(params.url, WaitCondition.CONTENT_LOADED)
            scope.extracting()
            raw = await scope.page.evaluate(HEAD_SCRIPT, OMITTED)

        return PageMetadata(
            head_html=raw["headHtml"],
            json_ld=parse_json_ld(raw["jsonLd"]),
            url=params.url,
        )

    try:
        return await asyncio.wait_for(_scrape(), timeout=params.timeout_seconds)
    except asyncio.TimeoutError as e:
        raise OperationTimeoutError(
            f"Metadata scraping timed out after {params.timeout_seconds}s"
        ) from e
