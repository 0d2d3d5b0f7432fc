"""Markdown rendering for full-content feed entries."""

from __future__ import annotations

import bleach
from markdown_it import MarkdownIt

ALLOWED_TAGS = [
    "p",
    "ul",
    "ol",
    "li",
    "strong",
    "em",
    "b",
    "i",
    "br",
    "a",
    "code",
    "pre",
    "blockquote",
    "h2",
    "h3",
    "h4",
    "img",
]
ALLOWED_ATTRS = {"a": ["href", "title"], "img": ["src", "alt", "title"]}

_MD = MarkdownIt("commonmark", {"html": False})


def render_markdown(value: str | None) -> str:
    """Render markdown to HTML with sanitization."""
    if not value:
        return ""
    html = _MD.render(value)
    clean_html = bleach.clean(
        html, tags=ALLOWED_TAGS, attributes=ALLOWED_ATTRS, strip=True
    )
    return clean_html.strip()
