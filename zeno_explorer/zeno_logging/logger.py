"""
One log stream for the explorer: structlog events and stdlib records
(uvicorn, httpx) share the same processors and renderer.

- LOG_FORMAT=json (default) renders one JSON object per line; anything else
  uses structlog's console renderer.
- Every event carries timestamp, level, logger and event_type.
- Relay calls bind endpoint/method into contextvars (relay_context), so any
  log line emitted while a call is in flight names the RPC it belongs to.
- Poller logs carry the view name (bind_view).
"""

from __future__ import annotations

import logging
import os
import sys
from contextlib import contextmanager
from typing import Any, Iterator

import structlog

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = os.getenv("LOG_FORMAT", "json").strip().lower()

# stdlib loggers whose records are re-rendered through structlog
FOREIGN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access", "httpx")

_HANDLER_NAME = "zeno_explorer"


def _event_type(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Aggregation key: structlog's 'event' becomes event_type."""
    event = event_dict.pop("event", None)
    if event is not None:
        event_dict.setdefault("event_type", event)
    return event_dict


def _shared_processors() -> list[Any]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True, key="timestamp"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]


def _renderer(fmt: str) -> Any:
    if fmt == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def build_formatter(fmt: str = LOG_FORMAT) -> structlog.stdlib.ProcessorFormatter:
    """stdlib Formatter that renders both structlog events and plain records."""
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_shared_processors(),
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            _event_type,
            _renderer(fmt),
        ],
    )


def configure_logging(level: str = LOG_LEVEL, fmt: str = LOG_FORMAT) -> None:
    """
    Route structlog through stdlib logging and install one stdout handler on
    the root logger. Safe to call again (the handler is replaced, not added).
    uvicorn must be started with log_config=None to keep this setup.
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(build_formatter(fmt))

    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    for name in FOREIGN_LOGGERS:
        foreign = logging.getLogger(name)
        foreign.handlers.clear()
        foreign.propagate = True

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_shared_processors(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


if not structlog.is_configured():
    configure_logging()


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Structured logger for a module:

        logger = get_logger(__name__)
        logger.warning("rpc_upstream_error", code=-32007, error="Slot 5 was skipped")
    """
    return structlog.get_logger(name)


def bind_view(view: str) -> structlog.stdlib.BoundLogger:
    """Poller logger with the dashboard view bound to every event."""
    return get_logger("zeno_explorer.poller").bind(view=view)


@contextmanager
def relay_context(endpoint: str, method: str) -> Iterator[None]:
    """Bind endpoint/method for the duration of one relayed call."""
    with structlog.contextvars.bound_contextvars(endpoint=endpoint, method=method):
        yield
