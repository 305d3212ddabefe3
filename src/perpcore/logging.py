"""structlog setup for perpcore.

Log events carry Decimal amounts, raw calldata and DataStore keys; the
``_render_chain_values`` processor turns them into plain strings so both
the console and JSON renderers print them exactly. Account and market
context bound with ``account_context`` follows a coroutine across awaits.
"""

import logging
import os
from contextlib import AbstractContextManager
from decimal import Decimal

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

# Libraries that log every RPC request or HTTP chunk at DEBUG
QUIET_LOGGERS = ("web3", "aiohttp", "urllib3")


def _render_chain_values(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Decimal -> plain string, bytes -> 0x-prefixed hex."""
    for key, value in event_dict.items():
        if isinstance(value, Decimal):
            event_dict[key] = format(value, "f")
        elif isinstance(value, (bytes, bytearray)):
            event_dict[key] = "0x" + bytes(value).hex()
    return event_dict


def setup_logging(log_level: str = "INFO", log_format: str | None = None) -> None:
    """Route structlog through stdlib logging with a single stream handler.

    Args:
        log_level: Root level name; unknown names fall back to INFO.
        log_format: "json" or "console". Defaults to the LOG_FORMAT
            environment variable, then "console".
    """
    log_format = (log_format or os.environ.get("LOG_FORMAT", "console")).lower()

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        _render_chain_values,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if log_format == "json":
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(root_logger.level, logging.INFO))


def account_context(account: str, **context: object) -> AbstractContextManager:
    """Bind ``account`` (and e.g. ``market``) to every event logged inside the block."""
    return structlog.contextvars.bound_contextvars(account=account, **context)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
