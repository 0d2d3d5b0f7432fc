"""Shared data models for arpeggios."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple


@dataclass(frozen=True)
class ContentItem:
    """One published post as loaded from the content collection."""

    slug: str
    title: str
    publish_date: Optional[datetime]
    description: str = ""
    body: Optional[str] = None


@dataclass(frozen=True)
class FeedEntry:
    """Projection of a post used in the syndication feed."""

    title: str
    publish_date: datetime
    description: str
    link: str
    content: Optional[str] = None


@dataclass(frozen=True)
class FeedMetadata:
    title: str
    description: str = ""


@dataclass(frozen=True)
class FeedDocument:
    """Structured feed payload prior to serialization."""

    title: str
    description: str
    site: Optional[str]
    items: Tuple[FeedEntry, ...] = ()


@dataclass(frozen=True)
class SiteConfig:
    base_path: str = "/"
    site_origin: Optional[str] = None
