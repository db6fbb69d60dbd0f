"""structlog helpers for svcutils.

svcutils never touches logging configuration on import: the host application
owns its root handlers and its structlog pipeline. Modules here log through
``get_logger``, which works with whatever structlog setup is active (structlog's
defaults when there is none).

Applications without their own setup can opt in to JSON lines on stdout::

    from svcutils.logging import LoggingSettings, configure_logging

    configure_logging(LoggingSettings())
"""

import logging
import logging.config
import sys
from datetime import UTC, datetime
from typing import Any

import structlog
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from structlog.stdlib import BoundLogger


class LoggingSettings(BaseSettings):
    """Logging settings from environment variables."""

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )


def _add_timestamp(
    _logger: object,
    _method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    event_dict["timestamp"] = datetime.now(UTC).isoformat()
    return event_dict


def _pre_chain() -> list[Any]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        _add_timestamp,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]


def configure_logging(settings: LoggingSettings | None = None) -> None:
    """Send structlog and stdlib records to stdout as JSON lines.

    Opt-in: replaces the root logger's handlers and level and the global
    structlog configuration, so only applications (or test suites) should
    call it. Calling it again re-applies the settings.
    """
    settings = settings or LoggingSettings()
    pre_chain = _pre_chain()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *pre_chain,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "json": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "processor": structlog.processors.JSONRenderer(),
                    "foreign_pre_chain": pre_chain,
                },
            },
            "handlers": {
                "stdout": {
                    "class": "logging.StreamHandler",
                    "formatter": "json",
                    "stream": sys.stdout,
                },
            },
            "root": {
                "handlers": ["stdout"],
                "level": settings.log_level.upper(),
            },
        }
    )


def get_logger(name: str) -> BoundLogger:
    """Get a structured logger bound to ``name`` (typically ``__name__``).

    The logger is a lazy proxy: configuration applied later, by the host or by
    ``configure_logging``, is picked up on first use.
    """
    return structlog.get_logger(name)  # type: ignore[no-any-return]
