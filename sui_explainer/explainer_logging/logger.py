"""
Structured logging for the explainer — one JSON object per event on stdout.

Every entry carries timestamp, level, logger, event_type and the keyword
context passed at the call site. Address-like values (sender, owner,
recipient, address, digest) are shortened to their first 10 characters so
logs never carry full addresses.

Uses only Python stdlib logging and structlog; no sui_explainer imports to avoid circular imports.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog

SHORTENED_KEYS = frozenset({"address", "sender", "owner", "recipient", "digest"})
SHORTEN_MIN_LEN = 20
SHORTEN_KEEP = 10


def _shorten(value: str) -> str:
    if len(value) < SHORTEN_MIN_LEN:
        return value
    return value[:SHORTEN_KEEP] + "..."


def _shorten_addresses(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    for key in SHORTENED_KEYS.intersection(event_dict):
        value = event_dict[key]
        if isinstance(value, str):
            event_dict[key] = _shorten(value)
    return event_dict


def _rename_event(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """structlog 'event' becomes event_type."""
    if "event" in event_dict and "event_type" not in event_dict:
        event_dict["event_type"] = event_dict.pop("event")
    return event_dict


def configure_logging(level: str | None = None, fmt: str | None = None) -> None:
    """
    (Re)configure structlog.

    Args:
        level: Level name; defaults to LOG_LEVEL (INFO).
        fmt: "json" (default, LOG_FORMAT) or anything else for the console renderer.
    """
    level_name = (level or os.getenv("LOG_LEVEL") or "INFO").strip().upper()
    fmt = (fmt or os.getenv("LOG_FORMAT") or "json").strip().lower()

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        _shorten_addresses,
        _rename_event,
    ]
    if fmt == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level_name, logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )


if not structlog.is_configured():
    configure_logging()


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Return a structured logger for the given module name.

        logger = get_logger(__name__)
        logger.info("transaction_explained", digest=digest, created=3)

    emits {"event_type": "transaction_explained", "digest": "8xJ3kLmN4p...", "created": 3,
    "timestamp": "...", "level": "info", "logger": "module.name"}.
    """
    return structlog.get_logger(name).bind(logger=name)


def bind_digest(digest: str) -> structlog.BoundLogger:
    """Logger with the transaction digest bound to every call."""
    return get_logger("sui_explainer").bind(digest=digest)
