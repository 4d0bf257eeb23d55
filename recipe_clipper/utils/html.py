"""HTML to plain text conversion for the extraction prompt."""

import re
from typing import Optional

from bs4 import BeautifulSoup

DEFAULT_MAX_CONTENT_CHARS = 50_000

# Removed together with everything inside them
_NON_CONTENT_TAGS = ("script", "style", "noscript")

_TAG_RE = re.compile(r"<[^>]*>")
_WHITESPACE_RE = re.compile(r"\s+")

_IMAGE_META = (
    {"property": "og:image"},
    {"name": "og:image"},
    {"name": "twitter:image"},
    {"property": "twitter:image"},
)


def sanitize_html(html: str, max_chars: int = DEFAULT_MAX_CONTENT_CHARS) -> str:
    """
    Reduce an HTML document to a single line of visible text.

    Script, style and noscript blocks are dropped with their content, all
    other markup is stripped, whitespace runs collapse to one space and the
    result is cut to ``max_chars`` characters.
    """
    if not html:
        return ""

    soup = BeautifulSoup(html, "html.parser")
    for element in soup.find_all(_NON_CONTENT_TAGS):
        element.decompose()

    text = soup.get_text(separator=" ")
    # Entity-encoded markup (&lt;b&gt;) is decoded by get_text; drop it too.
    text = _TAG_RE.sub(" ", text)
    text = _WHITESPACE_RE.sub(" ", text).strip()

    return text[:max_chars].rstrip()


def extract_page_image(html: str) -> Optional[str]:
    """Return the page's social preview image URL, if it declares one."""
    if not html:
        return None

    soup = BeautifulSoup(html, "html.parser")
    for attrs in _IMAGE_META:
        tag = soup.find("meta", attrs=attrs)
        if tag is None:
            continue
        content = (tag.get("content") or "").strip()
        if content.startswith(("http://", "https://")):
            return content
    return None


def clean_text(text: str) -> str:
    """Remove stray HTML tags from a single line of recipe text."""
    return re.sub(r"<[^>]*>?", "", text or "")
