"""
Logging Setup

Configures structlog for the simulation service and command-line runs.
"""

import logging

import structlog

from shared.config import Settings, settings


def configure_logging(app_settings: Settings | None = None) -> None:
    """
    Configure structlog processors and level filtering.

    Args:
        app_settings: Settings to read log_level/log_format from (defaults to global settings)
    """
    app_settings = app_settings or settings
    level = getattr(logging, app_settings.log_level)

    renderer: structlog.types.Processor
    if app_settings.log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=False,
    )
