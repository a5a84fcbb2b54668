"""
Logging setup — structlog configuration for applications using stepwise.

stepwise emits debug-level structured events (`operation.failed`,
`operation.hook_dispatched`, `transaction.rolled_back`,
`validation.rejected`, `routine.started`), each bound to the emitting
module as `logger_name` (`stepwise.class_context`, ...). Applications that
already configure structlog get them for free; others can call
`configure_logging` once at startup:

    configure_logging()                       # STEPWISE_* environment / .env
    configure_logging(StepwiseSettings(log_level="DEBUG", log_json=True))
"""

from __future__ import annotations

import logging

import structlog

from stepwise.config import StepwiseSettings

LIBRARY_LOGGERS = "stepwise"


def only_library_events(_logger: object, _method_name: str, event_dict: dict) -> dict:
    """Drop events not emitted by stepwise, for applications that want only those."""
    if not str(event_dict.get("logger_name", "")).startswith(LIBRARY_LOGGERS):
        raise structlog.DropEvent
    return event_dict


def configure_structlog(log_level: str = "INFO", json: bool = False, library_only: bool = False) -> None:
    """
    Configure structlog for structured logging.

    json=True: JSON lines to stdout (machine-readable).
    json=False: colored, human-readable console output.
    library_only=True: keep only events emitted by stepwise.
    Unknown level names fall back to INFO.
    """
    processors: list = [structlog.contextvars.merge_contextvars]
    if library_only:
        processors.append(only_library_events)
    processors += [
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.JSONRenderer() if json else structlog.dev.ConsoleRenderer(),
    ]
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, log_level.upper(), logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging(settings: StepwiseSettings | None = None) -> StepwiseSettings:
    """Apply `settings` (loaded from the environment when omitted) and return them."""
    settings = settings if settings is not None else StepwiseSettings()
    configure_structlog(settings.log_level, json=settings.log_json)
    log = structlog.get_logger(logger_name=__name__)
    log.debug("logging.configured", level=settings.log_level, json=settings.log_json)
    return settings
