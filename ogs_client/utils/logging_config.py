# ogs_client/utils/logging_config.py
"""
Configures structured logging for applications embedding the OGS client, using structlog.

The library itself only obtains loggers with `structlog.get_logger(__name__)`
and never configures logging on import. Applications call `setup_logging`
once at startup; records from the transport libraries they plug in (HTTP
clients, socket.io) then go through the same processor chain as the client's
own events.
"""

import logging
import sys
from pathlib import Path
from typing import IO, List, Optional, TYPE_CHECKING

import structlog
from structlog.types import Processor

if TYPE_CHECKING:
    from ogs_client.config.settings import Settings

# Chatty transport loggers that are only useful when debugging the connection itself.
NOISY_LOGGERS = ("engineio.client", "socketio.client", "urllib3", "websocket")


def _shared_processors() -> List[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]


def setup_logging(
    settings: Optional["Settings"] = None,
    log_level: Optional[str] = None,
    json_output: bool = False,
    log_file: Optional[Path] = None,
    stream: Optional[IO[str]] = None,
    quiet_transports: bool = True,
) -> None:
    """
    Routes structlog through the standard library's root logger.

    Args:
        settings: Library settings; `default_log_level` is used when `log_level` is not given.
        log_level: Root log level name, e.g. "DEBUG".
        json_output: Render the stream as JSON lines instead of the colored dev format.
        log_file: Optional path of a file that always receives JSON lines.
        stream: Where console output goes. Defaults to stdout.
        quiet_transports: Raise the level of `NOISY_LOGGERS` to WARNING.
    """
    if log_level is None:
        log_level = settings.default_log_level if settings is not None else "INFO"

    shared = _shared_processors()
    structlog.configure(
        processors=shared + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    renderer: Processor = (
        structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer(colors=False)
    )
    console_handler = logging.StreamHandler(stream or sys.stdout)
    console_handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(foreign_pre_chain=shared, processor=renderer)
    )
    handlers: List[logging.Handler] = [console_handler]

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                foreign_pre_chain=shared, processor=structlog.processors.JSONRenderer()
            )
        )
        handlers.append(file_handler)

    logging.basicConfig(handlers=handlers, level=log_level.upper(), force=True)

    if quiet_transports:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
