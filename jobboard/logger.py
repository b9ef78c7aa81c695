"""
Structured logging for jobboard.

Provides centralized logging with console and optional file output,
plus counters for the queries and repository operations that ran.
"""

import logging
import sys
from pathlib import Path
from typing import Optional
from datetime import datetime
import json

from .env import log_dir as configured_log_dir, log_level as configured_log_level


class StructuredLogger:
    """
    Centralized logger with support for console and file outputs.
    Tracks metrics for the data layer.
    """

    def __init__(
        self,
        name: str = "jobboard",
        level: str = "INFO",
        log_dir: Optional[Path] = None,
        enable_file: bool = True,
        enable_console: bool = True,
    ):
        """
        Initialize the structured logger.

        Args:
            name: Logger name
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_dir: Directory for log files (default: logs/)
            enable_file: Write logs to file
            enable_console: Output logs to stderr
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.DEBUG if enable_file else getattr(logging, level.upper()))
        self.logger.handlers.clear()  # Remove existing handlers

        self.metrics = {
            "queries": 0,
            "operations": {},
            "failures": 0,
            "errors_by_type": {},
        }

        if enable_console:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setLevel(getattr(logging, level.upper()))
            console_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            console_handler.setFormatter(console_formatter)
            self.logger.addHandler(console_handler)

        if enable_file:
            if log_dir is None:
                log_dir = Path("logs")
            log_dir.mkdir(parents=True, exist_ok=True)

            log_file = log_dir / f"jobboard_{datetime.now().strftime('%Y%m%d')}.log"
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)  # Always log everything to file
            file_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            file_handler.setFormatter(file_formatter)
            self.logger.addHandler(file_handler)

    def debug(self, message: str, **kwargs):
        """Log debug message with optional context."""
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs):
        """Log info message with optional context."""
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs):
        """Log warning message with optional context."""
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs):
        """Log error message with optional context."""
        self._log(logging.ERROR, message, kwargs)

    def _log(self, level: int, message: str, context: dict):
        if context:
            message = f"{message} | Context: {json.dumps(context, default=str)}"
        self.logger.log(level, message)

    # Metric tracking methods

    def record_query(self):
        """Increment executed statement counter."""
        self.metrics["queries"] += 1

    def record_operation(self, operation: str):
        """Count a repository operation by name."""
        ops = self.metrics["operations"]
        ops[operation] = ops.get(operation, 0) + 1

    def record_failure(self, operation: str, error_type: str):
        """Record a failed repository operation."""
        self.metrics["failures"] += 1
        errors = self.metrics["errors_by_type"]
        errors[error_type] = errors.get(error_type, 0) + 1

    def get_metrics(self) -> dict:
        """Return a copy of the current metrics."""
        metrics_copy = dict(self.metrics)
        metrics_copy["operations"] = dict(self.metrics["operations"])
        metrics_copy["errors_by_type"] = dict(self.metrics["errors_by_type"])
        return metrics_copy

    def log_metrics_summary(self):
        """Log a summary of current metrics."""
        metrics = self.get_metrics()

        self.info("=== Data Layer Metrics ===")
        self.info(f"Queries: {metrics['queries']}")
        for operation, count in sorted(metrics["operations"].items()):
            self.info(f"  {operation}: {count}")

        if metrics["errors_by_type"]:
            self.info(f"Failures: {metrics['failures']}")
            for error_type, count in metrics["errors_by_type"].items():
                self.info(f"  {error_type}: {count}")


# Global logger instance
_global_logger: Optional[StructuredLogger] = None


def get_logger(
    name: str = "jobboard",
    level: Optional[str] = None,
    **kwargs
) -> StructuredLogger:
    """
    Get or create the global logger instance.

    Level and log directory default to JOBBOARD_LOG_LEVEL and
    JOBBOARD_LOG_DIR; file logging is off unless a directory is configured.

    Args:
        name: Logger name
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        **kwargs: Additional arguments passed to StructuredLogger

    Returns:
        StructuredLogger instance
    """
    global _global_logger

    if _global_logger is None:
        if "log_dir" not in kwargs:
            kwargs["log_dir"] = configured_log_dir()
        kwargs.setdefault("enable_file", kwargs["log_dir"] is not None)
        _global_logger = StructuredLogger(
            name=name, level=level or configured_log_level(), **kwargs
        )

    return _global_logger


def reset_logger():
    """Reset the global logger (useful for testing)."""
    global _global_logger
    _global_logger = None
