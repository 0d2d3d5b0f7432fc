"""Resolution of the site base path from configuration."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional
from urllib.parse import urljoin, urlsplit

logger = logging.getLogger(__name__)

FIXED = "fixed"
ENV = "env"
MODE = "mode"
ORIGIN = "origin"

STRATEGY_KINDS = (FIXED, ENV, MODE, ORIGIN)

_PRODUCTION_VALUES = {"production", "prod", "1", "true", "yes", "on"}


@dataclass(frozen=True)
class BasePathStrategy:
    """How the base path is derived.

    Only the fields relevant to ``kind`` are used:

    * ``fixed``: ``path``
    * ``env``: ``variable`` and ``default``
    * ``mode``: ``variable`` (the mode flag), ``dev_path`` and ``prod_path``
    * ``origin``: ``origin`` and ``path`` (resolved relative to the origin)
    """

    kind: str
    path: str = "/"
    variable: Optional[str] = None
    default: str = "/"
    dev_path: str = "/"
    prod_path: str = "/"
    origin: Optional[str] = None

    def __post_init__(self) -> None:
        if self.kind not in STRATEGY_KINDS:
            raise ValueError(
                f"Unknown base path strategy '{self.kind}' "
                f"(expected one of: {', '.join(STRATEGY_KINDS)})"
            )
        if self.kind == ORIGIN and not self.origin:
            raise ValueError("The 'origin' base path strategy requires an origin URL.")

    @classmethod
    def fixed(cls, path: str) -> "BasePathStrategy":
        return cls(kind=FIXED, path=path)

    @classmethod
    def env(cls, name: str = "BASE_PATH", default: str = "/") -> "BasePathStrategy":
        return cls(kind=ENV, variable=name, default=default)

    @classmethod
    def mode(
        cls,
        dev_path: str = "/",
        prod_path: str = "/arpeggios/",
        flag: str = "MODE",
    ) -> "BasePathStrategy":
        return cls(kind=MODE, variable=flag, dev_path=dev_path, prod_path=prod_path)

    @classmethod
    def origin_join(cls, origin: str, relative_path: str = "/") -> "BasePathStrategy":
        return cls(kind=ORIGIN, origin=origin, path=relative_path)


def normalize_path(value: Optional[str]) -> str:
    """Return ``value`` as a root-relative path with leading and trailing slashes."""
    value = (value or "").strip()
    if not value:
        return "/"
    if _is_absolute_url(value):
        return value if value.endswith("/") else value + "/"
    value = "/" + value.strip("/")
    return value if value == "/" else value + "/"


def _is_absolute_url(value: str) -> bool:
    parts = urlsplit(value)
    return bool(parts.scheme and parts.netloc)


def is_production(value: Optional[str]) -> bool:
    """Interpret a mode flag such as ``production`` or ``true``."""
    if value is None:
        return False
    return value.strip().lower() in _PRODUCTION_VALUES


def resolve(
    strategy: BasePathStrategy, environ: Optional[Mapping[str, str]] = None
) -> str:
    """Return the base path selected by ``strategy``.

    ``environ`` defaults to the process environment, read at call time.
    Resolution never fails: every strategy falls back to a safe default.
    """
    if environ is None:
        environ = os.environ

    if strategy.kind == FIXED:
        result = normalize_path(strategy.path)
    elif strategy.kind == ENV:
        raw = environ.get(strategy.variable or "BASE_PATH")
        if raw is None or not raw.strip():
            logger.debug(
                "Environment variable %s not set; using default base path %s",
                strategy.variable,
                strategy.default,
            )
            raw = strategy.default
        result = normalize_path(raw)
    elif strategy.kind == MODE:
        flag = environ.get(strategy.variable or "MODE")
        production = is_production(flag)
        logger.debug(
            "Mode flag %s=%r resolved to %s",
            strategy.variable,
            flag,
            "production" if production else "development",
        )
        result = normalize_path(strategy.prod_path if production else strategy.dev_path)
    else:
        origin = strategy.origin if strategy.origin.endswith("/") else strategy.origin + "/"
        result = normalize_path(urljoin(origin, strategy.path or "/"))

    logger.info("Resolved base path using '%s' strategy: %s", strategy.kind, result)
    return result


def parse_strategy(kind: str, **options: Optional[str]) -> BasePathStrategy:
    """Build a strategy from loosely typed config values."""
    kind = (kind or ENV).strip().lower()
    opts = {key: value for key, value in options.items() if value is not None}

    if kind == FIXED:
        return BasePathStrategy.fixed(opts.get("path", "/"))
    if kind == ENV:
        return BasePathStrategy.env(
            name=opts.get("variable", "BASE_PATH"), default=opts.get("default", "/")
        )
    if kind == MODE:
        return BasePathStrategy.mode(
            dev_path=opts.get("dev_path", "/"),
            prod_path=opts.get("prod_path", "/arpeggios/"),
            flag=opts.get("variable", "MODE"),
        )
    if kind == ORIGIN:
        origin = opts.get("origin")
        if not origin:
            raise ValueError("The 'origin' base path strategy requires an origin URL.")
        return BasePathStrategy.origin_join(origin, opts.get("path", "/"))
    raise ValueError(
        f"Unknown base path strategy '{kind}' "
        f"(expected one of: {', '.join(STRATEGY_KINDS)})"
    )
