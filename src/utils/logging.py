"""Logging configuration utilities."""

import logging
import logging.config
import json
import os
from datetime import datetime
from zoneinfo import ZoneInfo

from src.core.config import settings

SIMPLE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging (one object per line)."""

    def __init__(self, service_name, timezone=None):
        super().__init__()
        self.service_name = service_name
        self.tz = ZoneInfo(timezone or settings.TIMEZONE)

    def format(self, record):
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, self.tz).isoformat(),
            "level": record.levelname,
            "service": self.service_name,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_entry['exc_info'] = self.formatException(record.exc_info)
        if record.stack_info:
            log_entry['stack_info'] = self.formatStack(record.stack_info)

        return json.dumps(log_entry, ensure_ascii=False)


def _console_only():
    logging.basicConfig(
        level=logging.INFO,
        format=SIMPLE_FORMAT,
        handlers=[logging.StreamHandler()]
    )


def _log_directory_writable(log_directory: str) -> bool:
    try:
        os.makedirs(log_directory, exist_ok=True)
    except OSError:
        return False
    return os.access(log_directory, os.W_OK)


def setup_logging():
    """Setup application logging: console + rotating JSON file."""
    log_directory = os.path.abspath(settings.LOG_DIRECTORY)
    if not _log_directory_writable(log_directory):
        print(f"Log directory {log_directory} is not writable, falling back to console-only logging")
        _console_only()
        return

    log_file_path = os.path.join(log_directory, f'{settings.SERVICE_NAME}.log')
    level = 'DEBUG' if settings.DEBUG else 'INFO'

    logging_config = {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'json': {
                '()': 'src.utils.logging.JSONFormatter',
                'service_name': settings.SERVICE_NAME,
                'timezone': settings.TIMEZONE,
            },
            'simple': {
                'format': SIMPLE_FORMAT,
            },
        },
        'handlers': {
            'console': {
                'class': 'logging.StreamHandler',
                'level': level,
                'formatter': 'simple',
                'stream': 'ext://sys.stdout',
            },
            'file': {
                'class': 'logging.handlers.RotatingFileHandler',
                'level': level,
                'formatter': 'json',
                'filename': log_file_path,
                'maxBytes': settings.LOG_MAX_BYTES,
                'backupCount': settings.LOG_BACKUP_COUNT,
                'encoding': 'utf-8',
            },
        },
        'loggers': {
            '': {  # Root logger
                'level': level,
                'handlers': ['console', 'file'],
                'propagate': False,
            },
            'uvicorn': {
                'level': 'INFO',
                'handlers': ['console', 'file'],
                'propagate': False,
            },
            'uvicorn.access': {
                'level': 'INFO',
                'handlers': ['console', 'file'],
                'propagate': False,
            },
            'sqlalchemy.engine': {
                'level': 'INFO' if settings.SQL_ECHO else 'WARNING',
                'handlers': ['console'],
                'propagate': False,
            },
        },
    }

    try:
        logging.config.dictConfig(logging_config)
    except (ValueError, TypeError, AttributeError, ImportError) as e:
        print(f"Error setting up logging configuration: {e}")
        _console_only()
