"""Structured logging for abilityforge.

Compiler components log through structlog with snake_case event names and
key/value context, e.g. ``block_skipped_unknown_type block_type=effect_foo``.

Output format:
- Console rendering by default (development)
- JSON lines when ABILITYFORGE_LOG_FORMAT=json

Usage:
    from abilityforge.logging import configure_logging, get_logger

    configure_logging()
    log = get_logger(__name__)
    log.warning("node_skipped_unknown_effect", effect_id=99)

    with log_context(document="fireball.json"):
        session.apply_text(text)
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import IO, Any

import structlog
from structlog.types import Processor

__all__ = [
    "get_logger",
    "configure_logging",
    "bind_context",
    "clear_context",
    "log_context",
]

LOG_FORMAT_ENV_VAR = "ABILITYFORGE_LOG_FORMAT"
LOG_LEVEL_ENV_VAR = "ABILITYFORGE_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"


def _level_from_env() -> int:
    name = os.environ.get(LOG_LEVEL_ENV_VAR, DEFAULT_LOG_LEVEL).upper()
    return getattr(logging, name, logging.WARNING)


def _json_requested() -> bool:
    return os.environ.get(LOG_FORMAT_ENV_VAR, "").lower() == "json"


def _pre_chain() -> list[Processor]:
    """Processors applied to both structlog and foreign stdlib records."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]


def _renderer(use_json: bool) -> Processor:
    if use_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=False)


def configure_logging(
    *,
    force_json: bool = False,
    level: int | None = None,
    stream: IO[str] | None = None,
) -> None:
    """Configure structlog and route stdlib logging through it.

    Safe to call repeatedly; each call replaces the root handler.

    Args:
        force_json: Emit JSON regardless of ABILITYFORGE_LOG_FORMAT.
        level: Log level override; defaults to ABILITYFORGE_LOG_LEVEL or WARNING.
        stream: Destination stream (stderr when omitted).
    """
    use_json = force_json or _json_requested()
    log_level = level if level is not None else _level_from_env()

    structlog.configure(
        processors=[
            *_pre_chain(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(log_level)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(use_json),
            ],
            foreign_pre_chain=_pre_chain(),
        )
    )

    root = logging.getLogger()
    for existing in root.handlers[:]:
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(log_level)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger bound to ``name``."""
    log: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return log


def bind_context(**context: Any) -> None:
    """Bind context variables included in every subsequent log event."""
    structlog.contextvars.bind_contextvars(**context)


def clear_context() -> None:
    """Drop all bound context variables."""
    structlog.contextvars.clear_contextvars()


@contextmanager
def log_context(**context: Any) -> Iterator[None]:
    """Bind context for the duration of a ``with`` block.

    Only the keys bound here are removed on exit, so nested contexts
    compose.
    """
    structlog.contextvars.bind_contextvars(**context)
    try:
        yield
    finally:
        structlog.contextvars.unbind_contextvars(*context)
