"""Structured logging configuration using structlog.

- Console: colored key/value output for interactive use
- JSON: one JSON object per line for log shipping
- Context binding (user, account, file) for the duration of an import

Log output goes to stderr so command output on stdout stays clean.
"""

import logging
import sys
from pathlib import Path
from typing import Any, Optional

import structlog
from structlog.types import Processor

LOG_FORMATS = ("console", "json")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _add_log_level(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Add log level to event dict for JSON output."""
    if method_name == "warn":
        method_name = "warning"
    event_dict["level"] = method_name.upper()
    return event_dict


def _add_app_context(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Add application name to all log events."""
    event_dict["app"] = "ledgerkit"
    return event_dict


def get_console_processors() -> list[Processor]:
    """Get processors for console output."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="ISO"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        structlog.dev.ConsoleRenderer(
            colors=sys.stderr.isatty(),
            exception_formatter=structlog.dev.plain_traceback,
        ),
    ]


def get_json_processors() -> list[Processor]:
    """Get processors for JSON output."""
    return [
        structlog.contextvars.merge_contextvars,
        _add_log_level,
        _add_app_context,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ]


def configure_logging(
    level: str = "WARNING",
    log_format: str = "console",
    log_file: Optional[Path] = None,
) -> None:
    """Configure structured logging.

    Args:
        level: Standard logging level name
        log_format: "console" or "json"
        log_file: Optional file that receives a plain-text copy of every record

    Call this once at application startup before any logging occurs.
    """
    log_level = getattr(logging, level.upper())

    if log_format == "json":
        processors = get_json_processors()
    else:
        processors = get_console_processors()

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=log_level,
    )
    logging.getLogger().setLevel(log_level)

    if log_file:
        _setup_file_handler(log_file, log_level)

    # SQLAlchemy echoing is controlled separately
    if log_level > logging.DEBUG:
        logging.getLogger("sqlalchemy.engine.Engine").setLevel(logging.WARNING)


def _setup_file_handler(log_file: Path, level: int) -> None:
    """Set up a file handler for logging."""
    log_file.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(log_file)
    file_handler.setLevel(level)
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    )
    logging.getLogger().addHandler(file_handler)


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    Example:
        logger = get_logger(__name__)
        logger.info("event_created", event_id=event_id, dedupe_key=key)
    """
    return structlog.stdlib.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind context variables for all subsequent log calls in this context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def unbind_context(*keys: str) -> None:
    """Remove context variables from the logging context."""
    structlog.contextvars.unbind_contextvars(*keys)


class LogContext:
    """Context manager for temporary log context binding.

    Example:
        with LogContext(account_id=account.id, filename=filename):
            logger.info("import_started")
    """

    def __init__(self, **kwargs: Any) -> None:
        self.kwargs = kwargs

    def __enter__(self) -> "LogContext":
        bind_context(**self.kwargs)
        return self

    def __exit__(self, *args: Any) -> None:
        unbind_context(*self.kwargs.keys())
