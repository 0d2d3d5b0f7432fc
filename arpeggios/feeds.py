"""Feed building helpers: ordering, link construction and validation."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Sequence

from .basepath import normalize_path
from .models import ContentItem, FeedDocument, FeedEntry, FeedMetadata

logger = logging.getLogger(__name__)

POSTS_SEGMENT = "posts"


class FeedError(ValueError):
    """Base class for feed building failures."""


class MalformedItem(FeedError):
    """A content item is missing a required field."""

    def __init__(self, field: str, index: int, slug: Optional[str] = None):
        self.field = field
        self.index = index
        self.slug = slug
        label = f"'{slug}'" if slug else f"at position {index}"
        super().__init__(f"Content item {label} is missing required field '{field}'")


class EmptyCollection(FeedError):
    """The feed has no entries but at least one was required."""


def _origin_prefix(site_origin: Optional[str]) -> str:
    return (site_origin or "").strip().rstrip("/")


def site_url(base_path: str, site_origin: Optional[str] = None) -> str:
    """Return the channel URL: the origin joined with the base path."""
    base = normalize_path(base_path)
    if base.startswith("/") and site_origin:
        return _origin_prefix(site_origin) + base
    return base


def build_link(base_path: str, slug: str, site_origin: Optional[str] = None) -> str:
    """Return the link for ``slug``: ``{origin}{base_path}posts/{slug}/``.

    Segments are joined with exactly one slash and the link always ends with
    a slash. A base path that is already an absolute URL wins over
    ``site_origin``.
    """
    prefix = site_url(base_path, site_origin)
    return f"{prefix}{POSTS_SEGMENT}/{slug.strip('/')}/"


def validate_items(items: Sequence[ContentItem]) -> None:
    """Raise MalformedItem for the first item missing a required field."""
    for index, item in enumerate(items):
        slug = getattr(item, "slug", None)
        if not isinstance(slug, str) or not slug.strip("/ "):
            raise MalformedItem("slug", index)
        title = getattr(item, "title", None)
        if not isinstance(title, str) or not title.strip():
            raise MalformedItem("title", index, slug)
        if not isinstance(getattr(item, "publish_date", None), datetime):
            raise MalformedItem("publish_date", index, slug)


def as_utc(value: datetime) -> datetime:
    """Treat naive timestamps as UTC so they compare with aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def sort_items(items: Iterable[ContentItem]) -> List[ContentItem]:
    """Return items newest first; equal dates keep their input order."""
    return sorted(items, key=lambda item: as_utc(item.publish_date), reverse=True)


def build_feed(
    items: Iterable[ContentItem],
    base_path: str,
    site_origin: Optional[str],
    metadata: FeedMetadata,
    *,
    limit: Optional[int] = None,
    require_entries: bool = False,
    render_content=None,
) -> FeedDocument:
    """Build an ordered, fully linked FeedDocument from content items.

    ``render_content`` is an optional callable turning an item's body into
    HTML for ``content:encoded``; without it entries carry no content.
    """
    if limit is not None and limit <= 0:
        raise ValueError("Feed limit must be a positive integer.")

    collection = list(items)
    validate_items(collection)

    ordered = sort_items(collection)
    if limit is not None and len(ordered) > limit:
        logger.debug("Capping feed at %d of %d entries", limit, len(ordered))
        ordered = ordered[:limit]

    if require_entries and not ordered:
        raise EmptyCollection("The content collection has no posts.")

    entries = []
    for item in ordered:
        content = None
        if render_content is not None and item.body:
            content = render_content(item.body)
        entries.append(
            FeedEntry(
                title=item.title,
                publish_date=as_utc(item.publish_date),
                description=item.description or "",
                link=build_link(base_path, item.slug, site_origin),
                content=content,
            )
        )

    logger.info("Built feed '%s' with %d entries", metadata.title, len(entries))
    return FeedDocument(
        title=metadata.title,
        description=metadata.description,
        site=site_url(base_path, site_origin),
        items=tuple(entries),
    )
