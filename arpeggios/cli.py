"""Command-line interface for the arpeggios feed builder."""

from __future__ import annotations

import argparse
import dataclasses
import logging
import os
import pprint
from pathlib import Path
from typing import List, Optional

from .basepath import BasePathStrategy
from .config import parse_app_config, parse_env_config
from .content import ContentError
from .feeds import FeedError
from .runner import RunConfig, execute

logger = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}")
    if number <= 0:
        raise argparse.ArgumentTypeError("must be a positive integer")
    return number


def build_parser() -> argparse.ArgumentParser:
    """Create the CLI argument parser."""
    parser = argparse.ArgumentParser(
        description="Build the RSS feed for the blog's posts collection."
    )
    parser.add_argument(
        "--config",
        default="configs/config.xml",
        help="Path to the main configuration XML file.",
    )

    # Overrides for logging/debugging
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (e.g. DEBUG, INFO, WARNING). Overrides config.",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Optional path to a log file. Overrides config.",
    )

    parser.add_argument(
        "--output",
        metavar="PATH",
        help="Write the feed to PATH instead of the configured output.",
    )
    parser.add_argument(
        "--base-path",
        metavar="PATH",
        help="Use a fixed base path, ignoring the configured strategy.",
    )
    parser.add_argument(
        "--limit",
        type=_positive_int,
        help="Keep only the N most recent posts. Overrides config.",
    )

    return parser


def configure_logging(level_name: str, log_file: Optional[str] = None) -> None:
    """Route log records to stderr and, optionally, to a file."""
    log_level = logging.getLevelName(level_name.upper())
    if not isinstance(log_level, int):
        raise ValueError(f"Unsupported log level: {level_name}")

    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    # force=True closes handlers left over from a previous call
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=handlers,
        force=True,
    )
    logger.debug("Logging to %s at level %s", log_file or "stderr", level_name.upper())


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        app_config = parse_app_config(args.config)

        # Variables from the env file take precedence over the process environment
        environ = dict(os.environ)
        if app_config.env_file:
            environ.update(parse_env_config(app_config.env_file))

        log_level = args.log_level or app_config.logging.level
        log_file = args.log_file or app_config.logging.file

        configure_logging(log_level, log_file)

        base_path = app_config.base_path
        if args.base_path:
            base_path = BasePathStrategy.fixed(args.base_path)

        config = RunConfig(
            base_path=base_path,
            title=app_config.title,
            description=app_config.description,
            content_dir=app_config.content_dir,
            content_url=app_config.content_url,
            site=app_config.site,
            output_file=args.output or app_config.output_file,
            limit=args.limit or app_config.limit,
            require_entries=app_config.require_entries,
            full_content=app_config.full_content,
            timeout=app_config.timeout,
            environ=environ,
        )

        config_dict = dataclasses.asdict(config)
        config_dict.pop("environ", None)
        logger.info("Active Configuration:\n%s", pprint.pformat(config_dict))

        result = execute(config)
    except (FeedError, ContentError) as exc:
        logger.error("Feed generation failed: %s", exc)
        return 1
    except ValueError as exc:
        parser.error(str(exc))
    except (RuntimeError, OSError) as exc:
        logger.error("%s", exc)
        return 1
    except Exception:  # noqa: BLE001
        logger.exception("Unexpected error during execution.")
        return 1

    if not config.output_file:
        print(result.output_text)
    return 0
