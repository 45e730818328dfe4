import logging
import sys

import structlog


def configure_logging(level: str = "INFO") -> None:
    """Configure structured logging for the inventory backend and its CLI."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer() if sys.stderr.isatty() else structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper(), logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def get_logger(component: str | None = None, **kwargs: object) -> structlog.BoundLogger:
    """Get a structured logger, optionally bound to a component name.

    The logger resolves its configuration on first use, so module-level
    loggers pick up a later configure_logging() call.
    """
    if component:
        kwargs["component"] = component
    return structlog.get_logger(**kwargs)
