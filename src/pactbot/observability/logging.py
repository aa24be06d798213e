"""Structured logging for the PactBot API.

Request id, correlation id and user id live in context variables and are
attached to every record, so a line like "Contract cache miss" can be traced
back to the dashboard call that caused it.

Usage:
    from pactbot.observability.logging import configure_logging

    configure_logging(json_format=True, level="INFO")
    logging.getLogger(__name__).info("Deleted contract %s", record_id)
"""

from __future__ import annotations

import contextvars
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

request_id_var: contextvars.ContextVar[str] = contextvars.ContextVar("request_id", default="")
correlation_id_var: contextvars.ContextVar[str] = contextvars.ContextVar(
    "correlation_id", default=""
)
user_id_var: contextvars.ContextVar[str] = contextvars.ContextVar("user_id", default="")

_CONTEXT_VARS: dict[str, contextvars.ContextVar[str]] = {
    "request_id": request_id_var,
    "correlation_id": correlation_id_var,
    "user_id": user_id_var,
}

# Attributes of a bare LogRecord; anything else arrived through `extra=`
_RESERVED = frozenset(logging.LogRecord("", 0, "", 0, "", (), None).__dict__) | {"message"}


def current_context() -> dict[str, str]:
    """The non-empty context variables for the running task."""
    return {name: var.get() for name, var in _CONTEXT_VARS.items() if var.get()}


class JsonFormatter(logging.Formatter):
    """One JSON object per line.

    {"timestamp": "...Z", "level": "INFO", "logger": "pactbot.records.store",
     "message": "...", "line": 42, "request_id": "...", "user_id": "u1"}
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc)
            .isoformat()
            .replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "function": record.funcName,
            "line": record.lineno,
        }
        entry.update(current_context())

        for key, value in record.__dict__.items():
            if key not in _RESERVED and not key.startswith("_"):
                entry[key] = value

        if record.exc_info:
            exc_type = record.exc_info[0]
            entry["exception"] = {
                "type": exc_type.__name__ if exc_type else None,
                "traceback": self.formatException(record.exc_info),
            }

        return json.dumps(entry, default=str, ensure_ascii=False)


class ConsoleFormatter(logging.Formatter):
    """Single-line format for local development.

    2026-01-10 12:34:56 | INFO     | pactbot.records.store | Contract cache miss | user=u1
    """

    LEVEL_COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"
    CONTEXT_LABELS = {"request_id": "req", "user_id": "user"}

    def __init__(self, use_colors: bool = True) -> None:
        super().__init__()
        self.use_colors = use_colors and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        level = f"{record.levelname:8}"
        if self.use_colors:
            level = f"{self.LEVEL_COLORS.get(record.levelname, '')}{level}{self.RESET}"

        when = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S")
        line = f"{when} | {level} | {record.name} | {record.getMessage()}"

        context = current_context()
        tags = [
            f"{label}={context[key]}"
            for key, label in self.CONTEXT_LABELS.items()
            if key in context
        ]
        if tags:
            line += " | " + " ".join(tags)

        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def configure_logging(
    json_format: bool = True,
    level: str = "INFO",
    use_colors: bool = True,
) -> None:
    """Install a single stderr handler on the root logger.

    Args:
        json_format: JSON lines (production) or the console format (dev)
        level: Root log level name
        use_colors: ANSI colors for the console format when stderr is a TTY
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JsonFormatter() if json_format else ConsoleFormatter(use_colors))

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level.upper())

    for noisy in ("uvicorn.access", "httpx", "httpcore", "sqlalchemy.engine"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


class LogContext:
    """Temporarily set context variables for the enclosed block.

    Usage:
        with LogContext(user_id="u1"):
            logger.info("Deleting contract")
    """

    def __init__(self, **values: str) -> None:
        unknown = values.keys() - _CONTEXT_VARS.keys()
        if unknown:
            raise ValueError(f"Unknown log context fields: {sorted(unknown)}")
        self.values = values
        self._tokens: list[tuple[contextvars.ContextVar[str], contextvars.Token[str]]] = []

    def __enter__(self) -> "LogContext":
        for name, value in self.values.items():
            var = _CONTEXT_VARS[name]
            self._tokens.append((var, var.set(value)))
        return self

    def __exit__(self, *args: Any) -> None:
        for var, token in reversed(self._tokens):
            var.reset(token)
        self._tokens.clear()
