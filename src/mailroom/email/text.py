"""Plain-text extraction from HTML email bodies."""

from __future__ import annotations

import re

from bs4 import BeautifulSoup

from mailroom.domain.errors import TextGenerationError

_DROPPED_TAGS = ["script", "style", "head", "title"]

_BLOCK_TAGS = [
    "address", "article", "aside", "blockquote", "br", "dd", "div", "dl", "dt",
    "footer", "h1", "h2", "h3", "h4", "h5", "h6", "header", "hr", "li", "ol",
    "p", "pre", "section", "table", "td", "th", "tr", "ul",
]


def html_to_text(html: str) -> str:
    """Render an HTML body as plain text.

    Script and style content is dropped, block-level elements start a new
    line, runs of inline whitespace are collapsed, and blank lines are
    removed.  ``"<p>example</p>"`` becomes ``"example"``.

    Args:
        html: The HTML body.  May be empty.

    Returns:
        The plain-text rendering.

    Raises:
        TextGenerationError: If the HTML cannot be parsed.
    """
    try:
        soup = BeautifulSoup(html, "html.parser")
    except Exception as exc:
        raise TextGenerationError(f"Failed to parse HTML: {exc}") from exc

    for tag in soup(_DROPPED_TAGS):
        tag.decompose()
    for tag in soup.find_all(_BLOCK_TAGS):
        tag.insert_before("\n")
        tag.insert_after("\n")

    lines = (re.sub(r"[ \t\r\f\v\xa0]+", " ", line).strip() for line in soup.get_text().splitlines())
    return "\n".join(line for line in lines if line)
