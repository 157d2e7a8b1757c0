"""
HTML to Markdown conversion used by page fetch and text extraction.
"""

import re

import markdownify
from bs4 import BeautifulSoup

# Elements whose text is never page content
NON_CONTENT_TAGS = ["script", "style", "noscript", "template"]

_BLANK_RUNS = re.compile(r"\n{3,}")


def html_to_markdown(html: str) -> str:
    """
    Convert an HTML document or fragment to markdown.

    Headings use ATX style (``#``), bullets use ``-``. Script and style
    bodies are dropped before conversion.
    """
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(NON_CONTENT_TAGS):
        tag.decompose()

    markdown = markdownify.markdownify(str(soup), heading_style="ATX", bullets="-")
    return _BLANK_RUNS.sub("\n\n", markdown).strip()
