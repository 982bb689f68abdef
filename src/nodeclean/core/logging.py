"""Logging configuration with structured JSON support and node context."""

from __future__ import annotations

import json
import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterator, Optional

# Node currently being decommissioned
_CURRENT_NODE: ContextVar[str] = ContextVar("current_node", default="")

TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class JsonFormatter(logging.Formatter):
    """Format logs as structured JSON tagged with the current node."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "lineno": record.lineno,
            "node": _CURRENT_NODE.get(),
        }

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        if hasattr(record, "extra_context"):
            payload.update(record.extra_context)  # type: ignore

        return json.dumps(payload)


def get_current_node() -> str:
    """Return the node being decommissioned in this context, if any."""
    return _CURRENT_NODE.get()


@contextmanager
def node_context(node: str) -> Iterator[str]:
    """Tag every log record emitted inside the block with ``node``."""
    token = _CURRENT_NODE.set(node)
    try:
        yield node
    finally:
        _CURRENT_NODE.reset(token)


def configure_logging(
    level: str = "WARNING",
    log_dir: Optional[Path] = None,
    json_logs: bool = False,
) -> None:
    """Configure global logging."""
    handlers: list[Any] = [logging.StreamHandler(sys.stderr)]

    if log_dir:
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_dir / "nodeclean.log"))

    formatter: logging.Formatter = JsonFormatter() if json_logs else logging.Formatter(TEXT_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)

    logging.basicConfig(
        level=level.upper(),
        handlers=handlers,
        force=True,
    )

    # SQL echo is far too noisy below WARNING
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a configured logger instance."""
    return logging.getLogger(name)
