"""Structured logging for chat_mirror.

Every module logs through `get_logger(__name__)` with an event name plus
key/value context. Sync runs bind `account_id` and `service` as context
variables, so adapter and store logs emitted during a run carry them too.
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog

__all__ = [
    "bind_sync_context",
    "configure_logging",
    "get_logger",
]

# Per-request transport and driver logs
QUIET_LOGGERS: tuple[str, ...] = ("httpx", "httpcore", "motor", "pymongo")


def _resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    return logging.getLevelNamesMapping().get(level.upper(), logging.INFO)


def configure_logging(
    level: int | str = logging.INFO,
    json_output: bool = False,
    add_timestamp: bool = True,
) -> None:
    """Configure structlog and the standard library root logger.

    Args:
        level: Level number or name such as "DEBUG" (unknown names mean INFO)
        json_output: Render one JSON object per line instead of console output
        add_timestamp: Prefix entries with an ISO timestamp
    """
    processors: list[Any] = []
    if add_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))
    processors += [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if json_output:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=sys.stdout.isatty(),
                exception_formatter=structlog.dev.plain_traceback,
            )
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    resolved = _resolve_level(level)
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=resolved)
    logging.getLogger().setLevel(resolved)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(resolved, logging.WARNING))


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger, usually named after the calling module."""
    return structlog.get_logger(name)


@contextmanager
def bind_sync_context(account_id: str, service: str) -> Iterator[None]:
    """Attach account and service to every log entry emitted inside the block."""
    with structlog.contextvars.bound_contextvars(account_id=account_id, service=service):
        yield


_configured = False


def _ensure_configured() -> None:
    global _configured
    if not _configured:
        configure_logging()
        _configured = True


_ensure_configured()
