"""Serialization of feed documents."""

from __future__ import annotations

import logging
from urllib.parse import urlsplit

from feedgen.feed import FeedGenerator

from .models import FeedDocument

logger = logging.getLogger(__name__)


def _is_permalink(link: str) -> bool:
    parts = urlsplit(link)
    return bool(parts.scheme and parts.netloc)


def build_feed_generator(document: FeedDocument) -> FeedGenerator:
    """Populate a FeedGenerator from the document, keeping entry order."""
    fg = FeedGenerator()
    fg.title(document.title)
    fg.link(href=document.site or "/", rel="alternate")
    # RSS 2.0 requires a non-empty channel description
    fg.description(document.description or document.title)
    if document.items:
        # Newest entry rather than the wall clock, so output is reproducible.
        fg.lastBuildDate(document.items[0].publish_date)

    for entry in document.items:
        fe = fg.add_entry(order="append")
        fe.title(entry.title)
        fe.link(href=entry.link)
        fe.guid(entry.link, permalink=_is_permalink(entry.link))
        fe.pubDate(entry.publish_date)
        if entry.description:
            fe.description(entry.description)
        if entry.content:
            fe.content(entry.content)
    return fg


def build_rss_xml(document: FeedDocument) -> str:
    """Render the feed document as RSS 2.0."""
    xml = build_feed_generator(document).rss_str(pretty=True).decode("utf-8")
    logger.debug("Rendered RSS feed with %d entries", len(document.items))
    return xml
