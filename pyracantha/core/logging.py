"""Logging for pyracantha: structlog events rendered through stdlib handlers on stderr."""

from __future__ import annotations

import logging
import logging.config
import os

import structlog

LOG_LEVEL_ENV_VAR = "PYRACANTHA_LOG_LEVEL"
LOG_FORMAT_ENV_VAR = "PYRACANTHA_LOG_FORMAT"


def _renderer(log_format: str) -> structlog.types.Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=False)


def setup_logging(level: str | None = None) -> None:
    """Route scanner and manifest events to stderr.

    ``level`` wins over ``$PYRACANTHA_LOG_LEVEL`` (default WARNING, so a
    plain run only shows skipped paths). ``$PYRACANTHA_LOG_FORMAT`` selects
    ``console`` or ``json`` lines. Stdout is left to command output.
    """
    log_level = (level or os.environ.get(LOG_LEVEL_ENV_VAR, "WARNING")).upper()
    log_format = os.environ.get(LOG_FORMAT_ENV_VAR, "console").lower()

    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "pyracantha": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "foreign_pre_chain": pre_chain,
                    "processors": [
                        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                        _renderer(log_format),
                    ],
                },
            },
            "handlers": {
                "stderr": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stderr",
                    "formatter": "pyracantha",
                },
            },
            "root": {"handlers": ["stderr"], "level": log_level},
            "loggers": {"pyracantha": {"level": log_level}},
        }
    )
