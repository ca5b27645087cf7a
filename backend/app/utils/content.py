"""Text cleanup for AI fields and FreshRSS article HTML."""

import json
import re
from typing import Any

from bs4 import BeautifulSoup, Comment

_EMPTY_PARAGRAPH = re.compile(r"<p[^>]*>(?:&nbsp;|\s|<br\s*/?>)*</p>", re.IGNORECASE)
_STRIPPED_ELEMENTS = ["script", "style", "iframe", "object", "embed", "form", "noscript"]


def clean_ai_content(value: Any) -> str:
    """Normalize an AI text field that may arrive as a list or a JSON array string."""
    if not value:
        return ""

    if isinstance(value, list):
        return "\n\n".join(item for item in value if isinstance(item, str))

    if not isinstance(value, str):
        return str(value)

    trimmed = value.strip()
    if trimmed.startswith('["') and trimmed.endswith('"]'):
        try:
            parsed = json.loads(trimmed)
        except json.JSONDecodeError:
            return trimmed[2:-2]
        if isinstance(parsed, list):
            return "\n\n".join(item for item in parsed if isinstance(item, str))
    if trimmed.startswith('["'):
        return trimmed[2:]
    return value


def remove_empty_paragraphs(html: str) -> str:
    if not html:
        return html
    return _EMPTY_PARAGRAPH.sub("", html)


def strip_leading_title(soup: BeautifulSoup, title: str) -> None:
    """Drop a leading <h1> that repeats the article title."""
    if not title:
        return

    heading = soup.find(["h1", "h2"])
    if heading is None:
        return

    # Only a heading that opens the document counts
    for element in soup.find_all(string=True):
        if element.strip():
            if not any(parent is heading for parent in element.parents):
                return
            break

    heading_text = heading.get_text(" ", strip=True).lower()
    title_lower = title.lower().strip()
    if heading_text and (heading_text in title_lower or title_lower in heading_text):
        heading.decompose()


def sanitize_html(soup: BeautifulSoup) -> None:
    """Remove active content and inline event handlers in place."""
    for element in soup(_STRIPPED_ELEMENTS):
        element.decompose()

    for comment in soup.find_all(string=lambda text: isinstance(text, Comment)):
        comment.extract()

    for tag in soup.find_all(True):
        for attr in list(tag.attrs):
            if attr.lower().startswith("on"):
                del tag.attrs[attr]
        href = tag.get("href")
        if isinstance(href, str) and href.strip().lower().startswith("javascript:"):
            del tag.attrs["href"]


def clean_article_html(html: str, title: str = "") -> str:
    """Prepare FreshRSS item HTML for display."""
    if not html:
        return ""

    soup = BeautifulSoup(remove_empty_paragraphs(html), "lxml")
    strip_leading_title(soup, title)
    sanitize_html(soup)

    body = soup.body
    if body is None:
        return ""
    return "".join(str(child) for child in body.children)


def strip_tags(html: str) -> str:
    """Plain text of an HTML fragment, for meta descriptions."""
    if not html:
        return ""
    return BeautifulSoup(html, "lxml").get_text(" ", strip=True)
