"""
Logging Module - Rich-backed logging for the directory search engine.
=====================================================================

One place to configure handlers for the library, the data client and
the CLI. Search phases log at DEBUG, degraded data fetches at WARNING.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

_logging_configured = False
# Logs go to stderr so command output on stdout stays machine-readable
_console = Console(stderr=True)

DEFAULT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

# Third-party loggers that are too chatty at INFO
_NOISY_LOGGERS = ("urllib3", "requests", "charset_normalizer")


def setup_logging(
    level: str = "INFO",
    use_rich: bool = True,
    log_file: Optional[str] = None,
    log_format: Optional[str] = None,
    force: bool = False,
) -> None:
    """
    Configure the root logger.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ...)
        use_rich: Use a RichHandler instead of a plain stream handler
        log_file: Optional file to mirror log records to
        log_format: Format for plain and file handlers
        force: Reconfigure even if logging was already set up

    Note:
        Repeated calls are no-ops unless ``force`` is set, so library
        modules can call ``get_logger`` freely.
    """
    global _logging_configured

    if _logging_configured and not force:
        return

    numeric_level = getattr(logging, level.upper(), logging.INFO)
    log_format = log_format or DEFAULT_FORMAT

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    if use_rich:
        handler: logging.Handler = RichHandler(
            console=_console,
            show_time=True,
            show_level=True,
            show_path=False,
            rich_tracebacks=True,
            markup=False,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
    else:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(log_format))
    handler.setLevel(numeric_level)
    root_logger.addHandler(handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(logging.Formatter(log_format))
        root_logger.addHandler(file_handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _logging_configured = True

    get_logger(__name__).debug(
        f"Logging configured: level={level}, rich={use_rich}, file={log_file}"
    )


def get_logger(name: str) -> logging.Logger:
    """
    Get a named logger, configuring defaults on first use.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Catalog loaded")
    """
    if not _logging_configured:
        setup_logging()

    return logging.getLogger(name)


class LogContext:
    """
    Temporarily change a logger's level.

    Example:
        >>> with LogContext("DEBUG", "labcompass.search"):
        ...     engine.search("ml")
    """

    def __init__(self, level: str, logger_name: Optional[str] = None):
        self.level = getattr(logging, level.upper(), logging.INFO)
        self.logger_name = logger_name
        self.original_level: Optional[int] = None

    def __enter__(self) -> "LogContext":
        logger = logging.getLogger(self.logger_name)
        self.original_level = logger.level
        logger.setLevel(self.level)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:  # type: ignore[no-untyped-def]
        if self.original_level is not None:
            logging.getLogger(self.logger_name).setLevel(self.original_level)
