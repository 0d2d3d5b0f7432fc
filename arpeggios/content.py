"""Loading of the posts content collection."""

from __future__ import annotations

import logging
from datetime import date, datetime, time, timezone
from pathlib import Path
from typing import Any, List, Mapping, Optional, Tuple

import requests
import yaml

from .models import ContentItem

logger = logging.getLogger(__name__)

FRONT_MATTER_DELIMITER = "---"


class ContentError(ValueError):
    """A post file could not be turned into a content item."""


def to_datetime(value: Any) -> Optional[datetime]:
    """Convert front matter dates to timezone-aware datetimes (UTC if naive)."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as exc:
            raise ContentError(f"Unrecognised date value: {value!r}") from exc
    else:
        raise ContentError(f"Unrecognised date value: {value!r}")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def item_from_mapping(
    data: Mapping[str, Any], slug: Optional[str] = None, body: Optional[str] = None
) -> ContentItem:
    """Create a ContentItem from front matter or JSON data."""
    date_value = data.get("date", data.get("pubDate", data.get("publish_date")))
    return ContentItem(
        slug=str(data.get("slug") or slug or ""),
        title=str(data.get("title") or ""),
        description=str(data.get("description") or ""),
        publish_date=to_datetime(date_value),
        body=body if body is not None else data.get("body"),
    )


def split_front_matter(raw: str) -> Tuple[dict, str]:
    """Split a Markdown document into its YAML front matter and body."""
    lines = raw.lstrip("\ufeff").splitlines()
    if not lines or lines[0].strip() != FRONT_MATTER_DELIMITER:
        raise ContentError("Post is missing a front matter block.")

    for index, line in enumerate(lines[1:], start=1):
        if line.strip() == FRONT_MATTER_DELIMITER:
            header = "\n".join(lines[1:index])
            body = "\n".join(lines[index + 1 :]).strip()
            break
    else:
        raise ContentError("Front matter block is not terminated.")

    try:
        metadata = yaml.safe_load(header) or {}
    except yaml.YAMLError as exc:
        raise ContentError(f"Front matter is not valid YAML: {exc}") from exc
    if not isinstance(metadata, dict):
        raise ContentError("Front matter must be a mapping.")
    return metadata, body


def load_post(path: Path) -> ContentItem:
    """Parse a single Markdown post file."""
    try:
        metadata, body = split_front_matter(path.read_text(encoding="utf-8"))
    except ContentError as exc:
        raise ContentError(f"{path}: {exc}") from exc
    return item_from_mapping(metadata, slug=path.stem, body=body)


def load_collection(directory: str) -> List[ContentItem]:
    """Load every ``*.md``/``*.markdown`` post in ``directory`` (sorted by name)."""
    location = Path(directory)
    if not location.is_dir():
        raise FileNotFoundError(f"Content directory not found: {location}")

    paths = sorted(
        path
        for path in location.iterdir()
        if path.is_file() and path.suffix.lower() in (".md", ".markdown")
    )
    items = [load_post(path) for path in paths]
    logger.info("Loaded %d posts from %s", len(items), location)
    return items


def fetch_collection(url: str, timeout: float = 10.0) -> List[ContentItem]:
    """Fetch the collection from a JSON endpoint returning an array of posts.

    Network and HTTP errors propagate to the caller unchanged.
    """
    logger.info("Fetching content collection from %s", url)
    response = requests.get(url, timeout=timeout)
    response.raise_for_status()
    payload = response.json()

    if not isinstance(payload, list):
        raise ContentError("Content collection must be a JSON array.")

    items: List[ContentItem] = []
    for entry in payload:
        if not isinstance(entry, dict):
            raise ContentError("Content collection must contain objects only.")
        items.append(item_from_mapping(entry))

    logger.info("Fetched %d posts from %s", len(items), url)
    return items
