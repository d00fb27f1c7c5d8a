"""structlog setup. Request method and path are bound per request by the auth gate middleware."""

import logging

import structlog

from moments.config import Config

QUIET_LOGGERS = ("pymongo", "python_multipart", "PIL")


def build_processors(debug: bool) -> list[structlog.types.Processor]:
    processors: list[structlog.types.Processor] = [
        # Request context bound with structlog.contextvars
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]
    if debug:
        processors.append(structlog.dev.ConsoleRenderer())
    else:
        processors.append(structlog.processors.JSONRenderer())
    return processors


def setup_logging(config: Config) -> None:
    logging.basicConfig(level=logging.DEBUG if config.debug else logging.INFO, format="%(message)s")
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=build_processors(config.debug),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
