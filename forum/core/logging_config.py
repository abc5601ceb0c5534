"""Logging configuration.

Provides console logging plus optional rotating log files with JSON output. Binds lightweight
a request_id contextvar to every record for correlation across middleware, handlers
and background translation tasks.
"""

import json
import logging
import logging.handlers
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

# Context variables used across middleware/handlers to enrich logs
request_id_ctx: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

# Structured fields copied from `extra=` onto JSON records when present.
EXTRA_FIELDS = (
    "request_id",
    "pid",
    "tid",
    "fingerprint",
    "status",
    "room",
    "event",
    "method",
    "endpoint",
    "status_code",
    "duration",
)

PLAIN_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d | %(message)s"
)


class JSONFormatter(logging.Formatter):
    """Emit logs as JSON for aggregation (ELK/Splunk/etc.)."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc)
            .isoformat()
            .replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        for field in EXTRA_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False, default=str)


class ColoredFormatter(logging.Formatter):
    """Add ANSI colors to console output for local readability."""

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        levelname = record.levelname
        if levelname in self.COLORS:
            record.levelname = f"{self.COLORS[levelname]}{levelname}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = levelname


class ContextEnricher(logging.Filter):
    """Inject the bound request_id into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        request_id = request_id_ctx.get()
        if request_id and not hasattr(record, "request_id"):
            record.request_id = request_id
        return True


def bind_request_context(*, request_id: Optional[str] = None):
    """Bind request context into contextvars; returns tokens for reset."""
    tokens = []
    if request_id is not None:
        tokens.append((request_id_ctx, request_id_ctx.set(request_id)))
    return tokens


def reset_request_context(tokens) -> None:
    """Reset bound contextvars using tokens returned by bind_request_context."""
    for var, token in reversed(tokens):
        var.reset(token)


def _rotating_handler(
    path: Path, level: int, formatter: logging.Formatter, max_bytes: int, backup_count: int
) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        path,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
        delay=True,
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    log_level: str = "INFO",
    log_dir: Optional[str] = None,
    app_name: str = "forum",
    max_bytes: int = 10 * 1024 * 1024,  # 10 MB
    backup_count: int = 5,
    use_json: bool = False,
    use_colors: bool = True,
) -> None:
    """Configure root logging.

    Args:
        log_level: Minimum logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_dir: Directory to store log files; if None, logs only to console.
        app_name: Application name used in log filenames.
        max_bytes: Max size per log file before rotation.
        backup_count: Number of rotated files to keep.
        use_json: If True, use JSON for file handlers (better for aggregation).
        use_colors: If True, add ANSI colors to console output.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    def _reset_handlers(logger: logging.Logger) -> None:
        """Close and remove any existing handlers to avoid descriptor leaks."""
        for handler in list(logger.handlers):
            try:
                handler.flush()
            finally:
                handler.close()
                logger.removeHandler(handler)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    _reset_handlers(root_logger)
    for existing in list(root_logger.filters):
        if isinstance(existing, ContextEnricher):
            root_logger.removeFilter(existing)
    context_filter = ContextEnricher()
    root_logger.addFilter(context_filter)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_cls = ColoredFormatter if use_colors else logging.Formatter
    console_handler.setFormatter(console_cls(PLAIN_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    console_handler.addFilter(context_filter)
    root_logger.addHandler(console_handler)

    if log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        file_formatter = (
            JSONFormatter()
            if use_json
            else logging.Formatter(PLAIN_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
        )

        general_handler = _rotating_handler(
            log_path / f"{app_name}.log",
            logging.DEBUG,
            file_formatter,
            max_bytes,
            backup_count,
        )
        error_handler = _rotating_handler(
            log_path / f"{app_name}_error.log",
            logging.ERROR,
            file_formatter,
            max_bytes,
            backup_count,
        )
        for handler in (general_handler, error_handler):
            handler.addFilter(context_filter)
            root_logger.addHandler(handler)

    # Suppress noisy loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    logging.info(
        f"Logging configured. Level: {log_level}, Directory: {log_dir or 'console only'}"
    )
