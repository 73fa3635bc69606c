"""Structured logging configuration.

Provides JSON-formatted logging suitable for log aggregation. Every record
carries:
- ISO8601 timestamp
- Log level
- Logger name
- Event type (for filtering, e.g. "icon_sync.item_stored")
- Service name and version

Pipeline modules attach item context (item_id, key, outcome) through
``extra`` so an operator can audit exactly what happened to each item.
"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any

from pythonjsonlogger import jsonlogger

from iconsync.core.config import LogFormat, Settings


TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class ServiceJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter adding service metadata to every record."""

    def __init__(self, service_name: str, service_version: str, *args, **kwargs):
        super().__init__(
            *args,
            fmt='%(asctime)s %(levelname)s %(name)s %(message)s',
            rename_fields={
                'asctime': '@timestamp',
                'levelname': 'level',
                'name': 'logger',
            },
            **kwargs
        )
        self._service = {'name': service_name, 'version': service_version}

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record['@timestamp'] = datetime.fromtimestamp(
            record.created, tz=timezone.utc
        ).isoformat()
        log_record['service'] = self._service

        if 'level' in log_record:
            log_record['level'] = log_record['level'].upper()

        if 'event_type' not in log_record:
            log_record['event_type'] = f"log.{record.name}"

        log_record['source'] = {
            'file': record.pathname,
            'line': record.lineno,
            'function': record.funcName,
        }


def build_formatter(settings: Settings) -> logging.Formatter:
    """Create the formatter selected by LOG_FORMAT."""
    if settings.LOG_FORMAT == LogFormat.TEXT:
        return logging.Formatter(TEXT_FORMAT)
    return ServiceJsonFormatter(settings.APP_NAME, settings.APP_VERSION)


def configure_logging(settings: Settings, level: str | None = None) -> None:
    """Configure root logging for a job run or the scheduler process.

    Replaces any existing root handlers with a single stdout handler and
    quiets the chattier third-party loggers.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(level or settings.LOG_LEVEL)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(build_formatter(settings))
    root_logger.addHandler(console_handler)

    for noisy in ("httpx", "httpcore", "botocore", "boto3", "urllib3", "PIL"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    logging.getLogger("iconsync").debug(
        "Logging configured",
        extra={
            "event_type": "system.startup.logging_configured",
            "log_format": settings.LOG_FORMAT.value,
        }
    )
