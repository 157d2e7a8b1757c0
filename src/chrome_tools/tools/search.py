"""
Search and Fetch Tools

Google web search, Google News search and full-page fetch to markdown.

Known fragility: result extraction keys on structural attributes
(``data-ved``, ``data-news-doc-id``, ``role="heading"``, ``data-sncf``)
because Google's class names change constantly. Those attributes are not a
public contract either; when Google changes its markup these tools return
empty lists (news) or fail waiting for the results marker (web).
"""

import logging
from typing import Any, Optional
from urllib.parse import urlencode

from playwright.async_api import TimeoutError as PlaywrightTimeout

from ..browser import WaitCondition
from ..errors import ExtractionError
from .base import tool
from .markdown import html_to_markdown
from .models import (
    FetchPageParams,
    NewsItem,
    NewsSearchResult,
    SearchParams,
    SearchResult,
    WebPageResult,
    WebSearchResult,
)

logger = logging.getLogger(__name__)

SEARCH_URL = "https://www.google.com/search"

# Present on every organic result block, visible or not
RESULTS_MARKER = "[data-ved]"
RESULTS_MARKER_TIMEOUT = 20000

# Search result pages keep polling; bound the network-idle wait (ms)
SEARCH_NAVIGATION_TIMEOUT = 30000


ORGANIC_RESULTS_SCRIPT = """() => {
  return Array.from(document.querySelectorAll('[data-ved] h3')).map((el, i) => ({
    position: i + 1,
    title: el.textContent || '',
    link: el.closest('a')?.href || '',
    snippet: el.closest('div[lang][data-ved]')?.querySelector('[data-sncf]')?.textContent || ''
  }));
}"""


NEWS_RESULTS_SCRIPT = """() => {
  const articles = Array.from(document.querySelectorAll('[data-news-doc-id]'));

  return articles.map((article, i) => {
    const linkElement = article.querySelector('a[data-ved]');
    const titleElement = article.querySelector('[role="heading"]') ||
      article.querySelector('[aria-level]');

    // First leaf-ish div with snippet-sized text
    let snippet = '';
    for (const div of article.querySelectorAll('div:not([data-ved]):not([data-hveid])')) {
      if (div.textContent && div.children.length <= 1 && !div.querySelector('[role="heading"]')) {
        const text = div.textContent.trim();
        if (text.length > 20 && text.length < 500) {
          snippet = text;
          break;
        }
      }
    }

    // Publisher name sits in a span next to the publisher logo
    let source = '';
    for (const img of article.querySelectorAll('img[alt=""], img[data-atf]')) {
      const span = img.parentElement?.parentElement?.querySelector('span');
      if (span && span.textContent) {
        source = span.textContent.trim();
        break;
      }
    }

    const dateElement = article.querySelector('[data-ts]') ||
      article.querySelector('span[tabindex="-1"]')?.previousElementSibling;

    return {
      position: i + 1,
      title: titleElement?.textContent?.trim() || '',
      link: linkElement?.href || '',
      snippet: snippet,
      source: source,
      date: dateElement?.textContent?.trim() || ''
    };
  });
}"""


def build_search_url(query: str, country_code: Optional[str] = None, news: bool = False) -> str:
    """Google search URL for ``query``."""
    params = {"q": query}
    if news:
        params["tbm"] = "nws"
    if country_code:
        params["gl"] = country_code
    return f"{SEARCH_URL}?{urlencode(params)}"


def filter_news_items(raw_items: list[dict[str, Any]]) -> list[NewsItem]:
    """Drop entries without a title or link."""
    return [
        NewsItem(**item)
        for item in raw_items
        if (item.get("title") or "").strip() and (item.get("link") or "").strip()
    ]


@tool(
    name="chrome_search_web",
    description="Search Google with a real Chrome browser and return the organic results (position, title, link, snippet).",
    params=SearchParams,
)
async def search_web(service, params: SearchParams, session=None) -> WebSearchResult:
    async with service.open_page(session, "chrome_search_web") as scope:
        await scope.navigate(
            build_search_url(params.query, params.country_code),
            WaitCondition.NETWORK_IDLE,
            SEARCH_NAVIGATION_TIMEOUT,
        )
        try:
            await scope.page.wait_for_selector(
                RESULTS_MARKER, state="attached", timeout=RESULTS_MARKER_TIMEOUT
            )
        except PlaywrightTimeout as e:
            raise ExtractionError(
                f"Search results marker '{RESULTS_MARKER}' did not appear"
            ) from e

        scope.extracting()
        raw_results = await scope.page.evaluate(ORGANIC_RESULTS_SCRIPT)

    organic = [SearchResult(**item) for item in raw_results]
    logger.debug("search_web(%r): %d results", params.query, len(organic))
    return WebSearchResult(organic=organic)


@tool(
    name="chrome_search_news",
    description="Search Google News with a real Chrome browser and return articles (position, title, link, snippet, source, date).",
    params=SearchParams,
)
async def search_news(service, params: SearchParams, session=None) -> NewsSearchResult:
    async with service.open_page(session, "chrome_search_news") as scope:
        await scope.navigate(
            build_search_url(params.query, params.country_code, news=True),
            WaitCondition.NETWORK_IDLE,
            SEARCH_NAVIGATION_TIMEOUT,
        )
        scope.extracting()
        raw_items = await scope.page.evaluate(NEWS_RESULTS_SCRIPT)

    news = filter_news_items(raw_items)
    logger.debug("search_news(%r): %d of %d items kept", params.query, len(news), len(raw_items))
    return NewsSearchResult(news=news)


@tool(
    name="chrome_fetch_page",
    description="Load a web page in Chrome and return its content converted to markdown. Set render=true for pages that build their content with JavaScript.",
    params=FetchPageParams,
)
async def fetch_page(service, params: FetchPageParams, session=None) -> WebPageResult:
    wait = WaitCondition.NETWORK_IDLE if params.render else WaitCondition.CONTENT_LOADED

    async with service.open_page(session, "chrome_fetch_page") as scope:
        await scope.navigate(params.url, wait, SEARCH_NAVIGATION_TIMEOUT)
        scope.extracting()
        html = await scope.page.content()

    return WebPageResult(markdown=html_to_markdown(html), url=params.url)


class ChromeWebSearchProvider:
    """
    Web search provider backed by Chrome.

    Keyword-argument wrapper around the search tools for web-search
    frameworks that expect search_web / search_news / fetch_page.
    """

    def __init__(self, service):
        self.service = service

    async def search_web(self, query: str, *, country_code: Optional[str] = None, session=None) -> WebSearchResult:
        return await search_web(self.service, SearchParams(query=query, country_code=country_code), session)

    async def search_news(self, query: str, *, country_code: Optional[str] = None, session=None) -> NewsSearchResult:
        return await search_news(self.service, SearchParams(query=query, country_code=country_code), session)

    async def fetch_page(self, url: str, *, render: bool = False, session=None) -> WebPageResult:
        return await fetch_page(self.service, FetchPageParams(url=url, render=render), session)
