"""Logging utilities for the plugin runner.

``setup_logging`` configures the root logger once per process entrypoint (CLI
or host runner). Library modules only call :func:`get_logger`.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .config import LoggingConfig

DEFAULT_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"

# Attributes every LogRecord carries; anything else came in through ``extra``.
_STANDARD_RECORD_FIELDS = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", None, None).__dict__
) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """Format log records as one-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        """Serialize a log record into JSON.

        Extra fields passed through ``extra=`` (for example ``plugin`` or
        ``hook``) are copied into the payload next to the core fields.
        """
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key in _STANDARD_RECORD_FIELDS or key.startswith("_"):
                continue
            payload[key] = value

        if record.exc_info is not None:
            payload["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


def get_logger(name: str) -> logging.Logger:
    """Return a logger by name."""
    return logging.getLogger(name)


def setup_logging(config: LoggingConfig | Mapping[str, Any] | None = None) -> None:
    """Configure root logging handlers and formatter.

    Existing root handlers are removed and closed first, so calling this
    twice replaces the previous setup instead of duplicating output.

    Args:
        config: ``LoggingConfig`` model or a mapping with the same keys
            (``level``, ``format``, ``file_path``, ``json_format``).
    """
    if config is None:
        conf: dict[str, Any] = {}
    elif isinstance(config, Mapping):
        conf = dict(config)
    else:
        conf = config.model_dump()

    level = _parse_level(conf.get("level") or "INFO")
    text_format = str(conf.get("format") or DEFAULT_FORMAT)
    file_path = conf.get("file_path")

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()
    root_logger.setLevel(level)

    formatter: logging.Formatter
    if conf.get("json_format"):
        formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(text_format)

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if isinstance(file_path, str) and file_path:
        handlers.append(logging.FileHandler(file_path, encoding="utf-8"))

    for handler in handlers:
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)


def _parse_level(level: str | int) -> int:
    if isinstance(level, int):
        return level

    parsed_level = logging.getLevelName(level.upper())
    if isinstance(parsed_level, int):
        return parsed_level

    return logging.INFO
