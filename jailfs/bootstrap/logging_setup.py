"""Logging configuration for jailfs and its command-line entry point."""

import json
import logging
import re
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from jailfs.domain.correlation_id import CorrelationLoggerAdapter

LOGGER_NAME = "jailfs"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(correlation_id)s] %(name)s :: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
MAX_BYTES = 10 * 1024 * 1024
BACKUP_COUNT = 5
REDACTED_ROOT = "<jail>"

EXTRA_KEYS = (
    "operation",
    "virtual_path",
    "physical_path",
    "destination",
    "root",
    "follow_symlinks",
    "mode",
    "recursive",
    "bytes",
    "entries",
    "errno",
    "error_type",
    "exit_code",
    "log_destination",
    "log_level",
    "use_json",
)


class CorrelationIdFilter(logging.Filter):  # pylint: disable=too-few-public-methods
    """Ensure correlation_id field exists in log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "correlation_id"):
            record.correlation_id = "-"
        return True


class RootRedactionFilter(logging.Filter):  # pylint: disable=too-few-public-methods
    """Replace the jail's physical root with a placeholder in string fields."""

    def __init__(self, root: str) -> None:
        super().__init__()
        self._root = root.rstrip("/") or "/"
        # The root must end at a segment boundary: /srv/jail-evil is left alone.
        self._pattern = re.compile(re.escape(self._root) + r"(?![^/\s'\"])")

    def redact(self, value: str) -> str:
        """Replace every segment-aligned occurrence of the root."""
        if self._root == "/":
            return value
        return self._pattern.sub(REDACTED_ROOT, value)

    def _redact_args(self, args):
        """Redact string arguments used for %-style message formatting."""
        if isinstance(args, tuple):
            return tuple(
                self.redact(arg) if isinstance(arg, str) else arg for arg in args
            )
        if isinstance(args, dict):
            return {
                key: self.redact(arg) if isinstance(arg, str) else arg
                for key, arg in args.items()
            }
        return args

    def filter(self, record: logging.LogRecord) -> bool:
        """Redact the message, its arguments and the path attributes."""
        if isinstance(record.msg, str):
            record.msg = self.redact(record.msg)
        if record.args:
            record.args = self._redact_args(record.args)
        for key in ("physical_path", "root"):
            value = getattr(record, key, None)
            if isinstance(value, str):
                setattr(record, key, self.redact(value))
        return True


class JsonFormatter(logging.Formatter):
    """JSON formatter with stable key ordering for structured logging."""

    def __init__(self, datefmt: Optional[str] = None):
        super().__init__(datefmt=datefmt)

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON with stable key ordering."""
        log_data = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "correlation_id": getattr(record, "correlation_id", "-"),
            "component": getattr(record, "component", "unknown"),
            "message": record.getMessage(),
        }

        if hasattr(record, "event"):
            log_data["event"] = record.event

        for key in EXTRA_KEYS:
            if hasattr(record, key):
                log_data[key] = getattr(record, key)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, sort_keys=True, default=str)


def _resolve_level(level_name: str) -> int:
    """Translate text level names into logging module numeric levels."""
    level = getattr(logging, level_name.upper(), None)
    if isinstance(level, int):
        return level
    return logging.WARNING


def _build_handler(
    destination: Optional[str], level: int, use_json: bool = True
) -> logging.Handler:
    """Create a stream or rotating file handler for the configured logger."""
    target = (destination or "stderr").lower()
    if target == "stdout":
        handler: logging.Handler = logging.StreamHandler(sys.stdout)
    elif target == "stderr":
        handler = logging.StreamHandler(sys.stderr)
    else:
        target_path = Path(destination)
        target_path.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            target_path, maxBytes=MAX_BYTES, backupCount=BACKUP_COUNT
        )
    handler.setLevel(level)

    if use_json:
        handler.setFormatter(JsonFormatter(DATE_FORMAT))
    else:
        handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))

    handler.addFilter(CorrelationIdFilter())
    return handler


def configure_logging(
    level: str = "WARNING",
    destination: Optional[str] = None,
    use_json: bool = True,
    redact_root: Optional[str] = None,
) -> CorrelationLoggerAdapter:
    """Configure and return the project logger with the requested handler."""
    logger = logging.getLogger(LOGGER_NAME)
    numeric_level = _resolve_level(level)
    logger.setLevel(numeric_level)
    logger.propagate = False

    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()

    handler = _build_handler(destination, numeric_level, use_json)
    if redact_root:
        handler.addFilter(RootRedactionFilter(redact_root))
    logger.addHandler(handler)

    adapter = CorrelationLoggerAdapter(logger, {})
    adapter.info(
        "Logging configured",
        extra={
            "event": "logging_configured",
            "log_level": logging.getLevelName(numeric_level),
            "log_destination": destination or "stderr",
            "use_json": use_json,
        },
    )
    return adapter
