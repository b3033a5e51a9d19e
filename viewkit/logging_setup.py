"""
Logging for viewkit.

Library modules log structured events through `get_logger`, which wraps the
stdlib logger of the same name. The `viewkit` logger carries a NullHandler,
so an application that never configures logging sees nothing; the CLI (or
any application) opts in with `configure_logging`.
"""
import logging
import sys
from typing import IO, Optional
import structlog

LOGGER_NAME = "viewkit"

logging.getLogger(LOGGER_NAME).addHandler(logging.NullHandler())

def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    # events go to the stdlib logger tree, never to structlog's default stdout printer.
    return structlog.wrap_logger(logging.getLogger(name), wrapper_class=structlog.stdlib.BoundLogger)

def configure_logging(log_level_str: str = "warning", force_json_logs: bool = False, stream: Optional[IO[str]] = None):
    """Attaches a console (or JSON) handler to the `viewkit` logger at the given level."""
    log_level = getattr(logging, log_level_str.upper(), logging.WARNING)
    stream = stream if stream is not None else sys.stderr

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    if force_json_logs:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=stream.isatty())

    handler = logging.StreamHandler(stream)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=[structlog.stdlib.add_log_level],
    ))

    package_logger = logging.getLogger(LOGGER_NAME)
    package_logger.handlers = [handler]
    package_logger.setLevel(log_level)

    get_logger(__name__).info("logging_configured", level=log_level_str, json=force_json_logs)
