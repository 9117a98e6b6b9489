"""
Logging setup for the command scripts.

Records go to stderr so stdout carries only command output. Library
modules log through ``logging.getLogger(__name__)``; the scripts use a
structlog logger routed through the same stdlib handler.
"""
import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Optional

import structlog

QUIET_LOGGERS = ('boto3', 'botocore', 'urllib3')


class JSONFormatter(logging.Formatter):
    """One JSON object per record, with any ``extra_fields`` merged in."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "service": getattr(record, 'service_name', None),
            "message": record.getMessage(),
        }
        entry.update(getattr(record, 'extra_fields', {}))
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class ServiceFilter(logging.Filter):
    """Stamps the running script's name on every record."""

    def __init__(self, service_name: str):
        super().__init__()
        self.service_name = service_name

    def filter(self, record: logging.LogRecord) -> bool:
        record.service_name = self.service_name
        return True


def setup_logging(
    service_name: str,
    log_level: str = "INFO",
    json_logs: Optional[bool] = None
) -> logging.Handler:
    """
    Route all logging to a single stderr handler.

    Args:
        service_name: Script name stamped on each record
        log_level: Root log level name
        json_logs: JSON lines when true; defaults to JSON inside AWS Lambda

    Returns:
        The installed handler
    """
    if json_logs is None:
        json_logs = bool(os.environ.get('AWS_LAMBDA_FUNCTION_NAME'))

    handler = logging.StreamHandler(sys.stderr)
    if json_logs:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            fmt='%(asctime)s [%(levelname)s] %(service_name)s %(name)s: %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
    handler.addFilter(ServiceFilter(service_name))

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer() if json_logs
            else structlog.dev.ConsoleRenderer(colors=False),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )
    return handler
