"""
Structured logging system for notescore.

Provides centralized logging with console and file outputs, log levels,
and metrics tracking for batch scoring runs.
"""

import logging
import sys
from pathlib import Path
from typing import Optional
from datetime import datetime
import json


class StructuredLogger:
    """
    Centralized logger with support for console and file outputs.
    Tracks metrics about notes scored in a session.
    """

    def __init__(
        self,
        name: str = "notescore",
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
            enable_console: Output logs to console
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, level.upper()))
        self.logger.handlers.clear()

        self.metrics = {
            "notes_scored": 0,
            "notes_matched": 0,
            "hidden_notes": 0,
            "identifier_matches": 0,
            "fuzzy_budget_exhausted": 0,
            "invalid_records": 0,
            "errors_by_type": {},
            "top_score": 0.0,
        }

        if enable_console:
            # stderr keeps stdout free for scores
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

            log_file = log_dir / f"notescore_{datetime.now().strftime('%Y%m%d')}.log"
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)
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

    def critical(self, message: str, **kwargs):
        self._log(logging.CRITICAL, message, kwargs)

    def _log(self, level: int, message: str, context: dict):
        if context:
            message = f"{message} | Context: {json.dumps(context, default=str)}"
        self.logger.log(level, message)

    # Metric tracking methods

    def record_score(self, breakdown, fuzzy_cap: float):
        """Record one scored note from its ScoreBreakdown."""
        self.metrics["notes_scored"] += 1
        if breakdown.total > 0:
            self.metrics["notes_matched"] += 1
        if breakdown.hidden:
            self.metrics["hidden_notes"] += 1
        if breakdown.identifier > 0:
            self.metrics["identifier_matches"] += 1
        if breakdown.fuzzy_spent >= fuzzy_cap:
            self.metrics["fuzzy_budget_exhausted"] += 1
        self.metrics["top_score"] = max(self.metrics["top_score"], breakdown.total)

    def record_invalid_record(self, error_type: str):
        self.metrics["invalid_records"] += 1
        if error_type not in self.metrics["errors_by_type"]:
            self.metrics["errors_by_type"][error_type] = 0
        self.metrics["errors_by_type"][error_type] += 1

    def get_metrics(self) -> dict:
        """Return current metrics."""
        metrics_copy = self.metrics.copy()
        scored = metrics_copy["notes_scored"]
        metrics_copy["match_rate"] = (
            round(metrics_copy["notes_matched"] / scored, 3) if scored > 0 else 0.0
        )
        return metrics_copy

    def log_metrics_summary(self):
        """Log a summary of current metrics."""
        metrics = self.get_metrics()

        self.info("=== Scoring Session Metrics ===")
        self.info(
            f"Notes: {metrics['notes_matched']}/{metrics['notes_scored']} matched "
            f"({metrics['match_rate'] * 100:.1f}%)"
        )
        self.info(f"Top score: {metrics['top_score']}")
        self.info(f"Hidden notes demoted: {metrics['hidden_notes']}")
        self.info(f"Identifier matches: {metrics['identifier_matches']}")
        self.info(f"Fuzzy budget exhausted: {metrics['fuzzy_budget_exhausted']}")

        if metrics["errors_by_type"]:
            self.info("Invalid records:")
            for error_type, count in metrics["errors_by_type"].items():
                self.info(f"  {error_type}: {count}")


# Global logger instance
_global_logger: Optional[StructuredLogger] = None


def get_logger(
    name: str = "notescore",
    level: str = "INFO",
    **kwargs
) -> StructuredLogger:
    """
    Get or create the global logger instance.

    Args:
        name: Logger name
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        **kwargs: Additional arguments passed to StructuredLogger

    Returns:
        StructuredLogger instance
    """
    global _global_logger

    if _global_logger is None:
        _global_logger = StructuredLogger(name=name, level=level, **kwargs)

    return _global_logger


def reset_logger():
    """Reset the global logger (useful for testing)."""
    global _global_logger
    _global_logger = None
