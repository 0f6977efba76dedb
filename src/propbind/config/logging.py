"""Route propbind's stdlib loggers through a structlog formatter on stderr.

Every propbind module logs with ``logging.getLogger(__name__)``; this module
only decides how those records look. ``--log-json`` switches the console
renderer for one JSON object per line. ``-v`` lowers the ``propbind``
logger to DEBUG while third-party loggers stay at WARNING.
"""

from __future__ import annotations

import logging
import sys

import structlog

_PACKAGE_LOGGER = "propbind"

# Applied to both structlog events and foreign (stdlib) records.
_PRE_CHAIN: tuple[structlog.types.Processor, ...] = (
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
)


def _renderers(log_json: bool) -> list[structlog.types.Processor]:
    if log_json:
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer(sort_keys=True)]
    return [structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())]


def _stderr_handler(log_json: bool) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=list(_PRE_CHAIN),
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *_renderers(log_json),
            ],
        )
    )
    return handler


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Install the stderr handler on the root logger, replacing any other."""
    structlog.configure(
        processors=[*_PRE_CHAIN, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    root.handlers[:] = [_stderr_handler(log_json)]
    root.setLevel(logging.WARNING)
    logging.getLogger(_PACKAGE_LOGGER).setLevel(logging.DEBUG if verbose else logging.WARNING)
