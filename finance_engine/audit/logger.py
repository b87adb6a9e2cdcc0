"""
Domain Logger

DESIGN DECISION: Rule evaluation is traced through an injected logger
instead of a process-wide switch. Every engine function accepts a
`logger` argument; the default is a no-op logger, so computed results
never depend on whether tracing is on.

The domain logger:
- Is write-only (nothing it does feeds back into a calculation)
- Tags every event with a category (snapshot, forecast, rules, ...)
- Is only enabled outside production (see EngineSettings.logging_enabled)
"""

import logging
import sys
from typing import Any, Optional, TextIO

import structlog

from finance_engine.config import EngineSettings, get_settings


COMPONENT = "domain/finance"


def _build_structlog_logger(stream: Optional[TextIO] = None) -> Any:
    """
    Build a JSON structlog logger without touching global structlog config.

    structlog.configure() would change every logger in the process;
    wrap_logger keeps this configuration local to the engine.
    """
    return structlog.wrap_logger(
        structlog.PrintLogger(stream or sys.stderr),
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG),
        context_class=dict,
    )


class DomainLogger:
    """
    Structured debug logger for the finance domain.

    Usage:
        logger = DomainLogger()
        logger.snapshot("Computing snapshot", month_key="2026-01")
    """

    def __init__(self, bound_logger: Optional[Any] = None):
        """
        Initialize domain logger.

        Args:
            bound_logger: A structlog logger to write to.
                          If None, a JSON logger on stderr is created.
        """
        self._logger = (bound_logger or _build_structlog_logger()).bind(
            component=COMPONENT,
        )

    def log(self, category: str, message: str, level: str = "debug", **data: Any) -> None:
        """Log a message under a category."""
        if level == "error":
            self._logger.error(message, category=category, **data)
        elif level == "warning":
            self._logger.warning(message, category=category, **data)
        elif level == "info":
            self._logger.info(message, category=category, **data)
        else:
            self._logger.debug(message, category=category, **data)

    def snapshot(self, message: str, **data: Any) -> None:
        self.log("snapshot", message, **data)

    def forecast(self, message: str, **data: Any) -> None:
        self.log("forecast", message, **data)

    def rules(self, message: str, **data: Any) -> None:
        self.log("rules", message, **data)

    def filter(self, message: str, **data: Any) -> None:
        self.log("filter", message, **data)

    def risk(self, message: str, **data: Any) -> None:
        self.log("risk", message, **data)

    def transition(self, message: str, **data: Any) -> None:
        self.log("transition", message, level="info", **data)


class NullDomainLogger(DomainLogger):
    """Logger that discards everything. Default for every engine function."""

    def __init__(self):
        self._logger = None

    def log(self, category: str, message: str, level: str = "debug", **data: Any) -> None:
        return None


NULL_LOGGER = NullDomainLogger()


def create_domain_logger(
    settings: Optional[EngineSettings] = None,
    stream: Optional[TextIO] = None,
) -> DomainLogger:
    """
    Create the logger an application should inject into the engine.

    Returns a real logger only when debug mode is on outside production.
    """
    settings = settings or get_settings()
    if not settings.logging_enabled:
        return NULL_LOGGER
    return DomainLogger(_build_structlog_logger(stream))


def resolve_logger(logger: Optional[DomainLogger]) -> DomainLogger:
    """Return the given logger, or the no-op logger when None."""
    return logger if logger is not None else NULL_LOGGER
