"""Configuration loading for the feed builder."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional
from xml.etree import ElementTree as ET

from .basepath import BasePathStrategy, parse_strategy

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "arpeggio's"
DEFAULT_DESCRIPTION = "Thoughts, notes, and findings"


@dataclass
class LoggingConfig:
    level: str = "INFO"
    file: Optional[str] = None


@dataclass
class AppConfig:
    content_dir: Optional[str] = None
    content_url: Optional[str] = None
    env_file: Optional[str] = None
    output_file: Optional[str] = None
    site: Optional[str] = None
    title: str = DEFAULT_TITLE
    description: str = DEFAULT_DESCRIPTION
    base_path: BasePathStrategy = field(default_factory=BasePathStrategy.env)
    limit: Optional[int] = None
    require_entries: bool = False
    full_content: bool = False
    timeout: float = 10.0
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _resolve_path(base_path: Path, target_path: str) -> str:
    """Resolve a path relative to the base config file if it's not absolute."""
    target = Path(target_path)
    if target.is_absolute():
        return str(target)
    return str((base_path.parent / target).resolve())


def _parse_bool(value: Optional[str], default: bool = False) -> bool:
    if value is None or not value.strip():
        return default
    return value.strip().lower() == "true"


def parse_env_config(path: str) -> Dict[str, str]:
    """Parse environment variables from XML."""
    env_vars = {}
    if not path:
        return env_vars

    logger.info("Loading environment configuration from %s", path)
    try:
        tree = ET.parse(path)
        root = tree.getroot()
        for var in root.findall("variable"):
            name = var.attrib.get("name")
            value = var.text
            if name and value:
                env_vars[name] = value.strip()
    except (ET.ParseError, OSError) as exc:
        logger.warning("Failed to load environment config: %s", exc)
        raise

    return env_vars


def parse_base_path(node: Optional[ET.Element]) -> BasePathStrategy:
    """Build the base path strategy from a ``<base-path>`` element.

    A bare ``<base-path>/blog/</base-path>`` is shorthand for the fixed
    strategy; without the element the ``BASE_PATH`` variable is used.
    """
    if node is None:
        return BasePathStrategy.env()

    kind = node.attrib.get("strategy")
    text = (node.text or "").strip() or None
    if kind is None:
        kind = "fixed" if text else "env"

    return parse_strategy(
        kind,
        path=node.attrib.get("path", text),
        variable=node.attrib.get("variable"),
        default=node.attrib.get("default"),
        dev_path=node.attrib.get("dev-path"),
        prod_path=node.attrib.get("prod-path"),
        origin=node.attrib.get("origin"),
    )


def parse_app_config(path: str) -> AppConfig:
    """Parse the main application configuration XML."""
    config_path = Path(path).resolve()
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    logger.info("Loading application configuration from %s", config_path)
    tree = ET.parse(config_path)
    root = tree.getroot()

    # Content source
    content_dir = root.findtext("content")
    content_url = root.findtext("content-url")
    if content_dir and content_url:
        raise ValueError("Config must set only one of <content> and <content-url>.")
    if not (content_dir or "").strip() and not (content_url or "").strip():
        raise ValueError("Config missing <content> or <content-url>.")
    if content_dir:
        content_dir = _resolve_path(config_path, content_dir.strip())
    if content_url:
        content_url = content_url.strip()

    env_node = root.find("env")
    env_file = (
        _resolve_path(config_path, env_node.text.strip())
        if env_node is not None and env_node.text
        else None
    )

    output_text = root.findtext("output")
    output_file = (
        _resolve_path(config_path, output_text.strip()) if output_text else None
    )

    site = (root.findtext("site") or "").strip() or None
    title = (root.findtext("title") or "").strip() or DEFAULT_TITLE
    description = root.findtext("description")
    description = description.strip() if description is not None else DEFAULT_DESCRIPTION

    base_path = parse_base_path(root.find("base-path"))

    limit_text = root.findtext("limit")
    limit = int(limit_text) if limit_text and limit_text.strip() else None
    if limit is not None and limit <= 0:
        raise ValueError("<limit> must be a positive integer.")

    require_entries = _parse_bool(root.findtext("require-entries"))
    full_content = _parse_bool(root.findtext("full-content"))
    timeout = float(root.findtext("timeout", "10"))

    # Logging
    log_node = root.find("logging")
    logging_config = LoggingConfig()
    if log_node is not None:
        logging_config.level = log_node.findtext("level", "INFO")
        log_file = log_node.findtext("file")
        if log_file:
            logging_config.file = _resolve_path(config_path, log_file)

    return AppConfig(
        content_dir=content_dir,
        content_url=content_url,
        env_file=env_file,
        output_file=output_file,
        site=site,
        title=title,
        description=description,
        base_path=base_path,
        limit=limit,
        require_entries=require_entries,
        full_content=full_content,
        timeout=timeout,
        logging=logging_config,
    )
