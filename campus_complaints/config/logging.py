"""
Logging configuration for the campus complaints system.
Provides console, file and JSON handlers driven by Settings.
"""

import logging
import logging.config
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from pythonjsonlogger.json import JsonFormatter

from campus_complaints.config.settings import Settings, get_settings


class CustomJsonFormatter(JsonFormatter):
    """Custom JSON formatter with additional fields"""

    environment: str = "development"

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]):
        """Add custom fields to the log record"""
        super().add_fields(log_record, record, message_dict)

        log_record['timestamp'] = datetime.now(timezone.utc).isoformat()
        log_record['level'] = record.levelname
        log_record['logger'] = record.name
        log_record['environment'] = self.environment

        if record.exc_info:
            log_record['exception'] = {
                'type': record.exc_info[0].__name__,
                'message': str(record.exc_info[1]),
                'traceback': self.formatException(record.exc_info)
            }


def build_logging_config(settings: Settings) -> Dict[str, Any]:
    """Build a dictConfig mapping for the given settings."""
    CustomJsonFormatter.environment = settings.ENVIRONMENT

    if settings.LOG_FORMAT == "json":
        console_formatter = 'json'
    elif settings.is_development():
        console_formatter = 'colored'
    else:
        console_formatter = 'standard'

    handlers: Dict[str, Dict[str, Any]] = {
        'console': {
            'level': 'DEBUG' if settings.DEBUG else settings.LOG_LEVEL,
            'class': 'logging.StreamHandler',
            'formatter': console_formatter,
        },
    }

    if settings.LOG_FILE:
        Path(settings.LOG_FILE).parent.mkdir(parents=True, exist_ok=True)
        handlers['file'] = {
            'level': settings.LOG_LEVEL,
            'class': 'logging.handlers.RotatingFileHandler',
            'filename': settings.LOG_FILE,
            'maxBytes': 10485760,  # 10MB
            'backupCount': 10,
            'formatter': 'json' if settings.LOG_FORMAT == "json" else 'standard',
            'encoding': 'utf8',
        }

    handler_names = list(handlers)

    return {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'standard': {
                'format': '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
            },
            'json': {
                '()': CustomJsonFormatter,
                'format': '%(timestamp)s %(level)s %(logger)s %(message)s'
            },
            'colored': {
                '()': 'colorlog.ColoredFormatter',
                'format': '%(log_color)s%(asctime)s [%(levelname)s] %(name)s: %(message)s',
                'log_colors': {
                    'DEBUG': 'cyan',
                    'INFO': 'green',
                    'WARNING': 'yellow',
                    'ERROR': 'red',
                    'CRITICAL': 'red,bg_white',
                }
            }
        },
        'handlers': handlers,
        'loggers': {
            '': {
                'handlers': handler_names,
                'level': settings.LOG_LEVEL,
            },
            'campus_complaints': {
                'handlers': handler_names,
                'level': 'DEBUG' if settings.DEBUG else settings.LOG_LEVEL,
                'propagate': False,
            },
            'sqlalchemy.engine': {
                'level': 'INFO' if settings.DATABASE_ECHO else 'WARNING',
                'propagate': True,
            },
        },
    }


def setup_logging(settings: Optional[Settings] = None) -> logging.Logger:
    """Configure application logging"""
    settings = settings or get_settings()
    logging.config.dictConfig(build_logging_config(settings))
    logger = logging.getLogger("campus_complaints")
    logger.info(f"Logging initialized with level: {settings.LOG_LEVEL}")
    return logger


class LoggerAdapter:
    """Logger wrapper that merges bound context into every record"""

    def __init__(self, logger: logging.Logger, **context: Any):
        self.logger = logger
        self._context: Dict[str, Any] = dict(context)

    def bind(self, **kwargs: Any) -> "LoggerAdapter":
        """Return a new adapter with extra context"""
        return LoggerAdapter(self.logger, **{**self._context, **kwargs})

    def _log(self, level: int, message: str, *args, **kwargs):
        extra = dict(self._context)
        extra.update(kwargs.pop('extra', None) or {})
        kwargs['extra'] = extra
        self.logger.log(level, message, *args, **kwargs)

    def debug(self, message: str, *args, **kwargs):
        self._log(logging.DEBUG, message, *args, **kwargs)

    def info(self, message: str, *args, **kwargs):
        self._log(logging.INFO, message, *args, **kwargs)

    def warning(self, message: str, *args, **kwargs):
        self._log(logging.WARNING, message, *args, **kwargs)

    def error(self, message: str, *args, **kwargs):
        self._log(logging.ERROR, message, *args, **kwargs)

    def exception(self, message: str, *args, **kwargs):
        kwargs.setdefault('exc_info', True)
        self._log(logging.ERROR, message, *args, **kwargs)

    def critical(self, message: str, *args, **kwargs):
        self._log(logging.CRITICAL, message, *args, **kwargs)


def get_logger(name: str, **context: Any) -> LoggerAdapter:
    """Get logger with context"""
    return LoggerAdapter(logging.getLogger(name), **context)


__all__ = [
    'CustomJsonFormatter',
    'LoggerAdapter',
    'build_logging_config',
    'get_logger',
    'setup_logging',
]
