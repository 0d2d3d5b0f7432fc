"""High-level orchestration for the arpeggios feed builder."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from .basepath import BasePathStrategy, resolve
from .content import fetch_collection, load_collection
from .feeds import build_feed
from .markup import render_markdown
from .models import ContentItem, FeedDocument, FeedMetadata, SiteConfig
from .renderers import build_rss_xml

logger = logging.getLogger(__name__)


@dataclass
class RunConfig:
    """Runtime options for building the feed."""

    base_path: BasePathStrategy
    title: str
    description: str = ""
    content_dir: Optional[str] = None
    content_url: Optional[str] = None
    site: Optional[str] = None
    output_file: Optional[str] = None
    limit: Optional[int] = None
    require_entries: bool = False
    full_content: bool = False
    timeout: float = 10.0
    environ: Dict[str, str] = field(default_factory=dict, repr=False)


@dataclass
class RunResult:
    """Returned data after building the feed."""

    output_text: str
    document: FeedDocument
    site: SiteConfig


def _load_items(config: RunConfig) -> List[ContentItem]:
    if config.content_url:
        return fetch_collection(config.content_url, timeout=config.timeout)
    if config.content_dir:
        return load_collection(config.content_dir)
    raise RuntimeError("No content source configured.")


def _write_output(path: str, text: str) -> None:
    location = Path(path)
    if location.parent and not location.parent.exists():
        location.parent.mkdir(parents=True, exist_ok=True)
    location.write_text(text, encoding="utf-8")
    logger.info("Wrote feed to %s", location)


def execute(config: RunConfig) -> RunResult:
    """Resolve the base path, load posts, build and render the feed."""
    site = SiteConfig(
        base_path=resolve(config.base_path, config.environ),
        site_origin=config.site,
    )

    items = _load_items(config)

    document = build_feed(
        items,
        site.base_path,
        site.site_origin,
        FeedMetadata(title=config.title, description=config.description),
        limit=config.limit,
        require_entries=config.require_entries,
        render_content=render_markdown if config.full_content else None,
    )
    output_text = build_rss_xml(document)

    if config.output_file:
        _write_output(config.output_file, output_text)

    return RunResult(output_text=output_text, document=document, site=site)
