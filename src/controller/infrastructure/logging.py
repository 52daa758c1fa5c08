"""Structlog configuration for the controller.

Probe events are rendered either for a developer terminal or as one JSON
object per line for the cluster's log collector.
"""

import sys

import structlog

# Keys every controller log line starts with, before probe-specific fields
_BASE_PROCESSORS: list[structlog.types.Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.processors.add_log_level,
    structlog.processors.TimeStamper(fmt="iso", utc=True),
]


def use_console_renderer(log_format: str) -> bool:
    """Decide whether to render for a terminal.

    Args:
        log_format: ``console``, ``json`` or ``auto`` (console on a TTY)
    """
    if log_format == "auto":
        return sys.stdout.isatty()
    return log_format == "console"


def configure_logging(
    level: int = 0, log_format: str = "auto", app_name: str | None = None
) -> None:
    """Configure structlog for probe events.

    Args:
        level: Minimum stdlib log level to emit (0 emits everything)
        log_format: Renderer selection, see ``use_console_renderer``
        app_name: Bound to every event as ``app`` when set
    """
    if use_console_renderer(log_format):
        renderer: list[structlog.types.Processor] = [
            structlog.dev.ConsoleRenderer(colors=True),
        ]
    else:
        renderer = [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(sort_keys=True),
        ]

    structlog.configure(
        processors=[*_BASE_PROCESSORS, *renderer],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    structlog.contextvars.clear_contextvars()
    if app_name:
        structlog.contextvars.bind_contextvars(app=app_name)
