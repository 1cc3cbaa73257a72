"""Structured logging for the CLI — structlog events rendered through stdlib logging.

stdout carries the JSON report, so every log line goes to stderr.
"""

from __future__ import annotations

import logging
import logging.config
import os

import structlog

from supportwindow.exceptions import ConfigError

ENV_LOG_LEVEL = "SUPPORTWINDOW_LOG_LEVEL"
ENV_LOG_FORMAT = "SUPPORTWINDOW_LOG_FORMAT"

_RENDERERS = {
    "console": lambda: structlog.dev.ConsoleRenderer(colors=False),
    "json": structlog.processors.JSONRenderer,
}


def _log_level(default_level: str) -> str:
    level = (os.environ.get(ENV_LOG_LEVEL) or default_level).strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ConfigError(f"{ENV_LOG_LEVEL} must be a logging level name, got {level!r}")
    return level


def _renderer() -> structlog.types.Processor:
    log_format = (os.environ.get(ENV_LOG_FORMAT) or "console").strip().lower()
    if log_format not in _RENDERERS:
        choices = " | ".join(_RENDERERS)
        raise ConfigError(f"{ENV_LOG_FORMAT} must be one of {choices}, got {log_format!r}")
    return _RENDERERS[log_format]()


def setup_logging(default_level: str = "WARNING") -> None:
    """Route structlog and stdlib records for ``supportwindow.*`` to stderr.

    *default_level* applies unless ``SUPPORTWINDOW_LOG_LEVEL`` is set;
    ``SUPPORTWINDOW_LOG_FORMAT`` picks ``console`` (default) or ``json``.

    Raises:
        ConfigError: If either variable holds an unknown value.
    """
    log_level = _log_level(default_level)
    renderer = _renderer()

    pre_chain: list[structlog.types.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.format_exc_info,
    ]

    structlog.configure(
        processors=pre_chain + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "supportwindow": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "foreign_pre_chain": pre_chain,
                    "processors": [
                        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                        renderer,
                    ],
                },
            },
            "handlers": {
                "stderr": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stderr",
                    "formatter": "supportwindow",
                },
            },
            # Only our own loggers; libraries keep their defaults.
            "loggers": {
                "supportwindow": {
                    "handlers": ["stderr"],
                    "level": log_level,
                    "propagate": False,
                },
            },
        }
    )
