"""
Logging Configuration and Utilities

Structured logging for the fee engine: JSON or text console output,
optional rotating file output and optional structlog processors.
"""

import sys
import logging
import logging.handlers
from typing import Any, Dict, Iterator, Optional
from datetime import datetime, timezone
from pathlib import Path
from contextlib import contextmanager
from contextvars import ContextVar

import structlog
from pythonjsonlogger import jsonlogger

from app.config.settings import settings

# Tenant bound for the duration of a service operation
org_id: ContextVar[Optional[str]] = ContextVar('org_id', default=None)


class TenantContextProcessor:
    """Add tenant and service context to structlog event dicts"""

    def __call__(self, logger, method_name, event_dict):
        tenant = org_id.get()
        if tenant:
            event_dict['org_id'] = tenant

        event_dict['timestamp'] = datetime.now(timezone.utc).isoformat()
        event_dict['service'] = 'school-fee-engine'
        event_dict['environment'] = settings.ENVIRONMENT

        return event_dict


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter for structured logging"""

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)

        log_record['level'] = record.levelname
        log_record['logger'] = record.name
        log_record['module'] = record.module
        log_record['function'] = record.funcName
        log_record['line'] = record.lineno
        log_record['environment'] = settings.ENVIRONMENT

        tenant = org_id.get()
        if tenant and 'org_id' not in log_record:
            log_record['org_id'] = tenant

        if record.exc_info:
            log_record['exception'] = self.formatException(record.exc_info)


class LoggingConfig:
    """Centralized logging configuration"""

    @staticmethod
    def configure_structured_logging():
        """Configure structured logging with structlog"""

        processors = [
            TenantContextProcessor(),
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
        ]

        if settings.LOG_FORMAT == "json":
            processors.append(structlog.processors.JSONRenderer())
        else:
            processors.append(structlog.processors.KeyValueRenderer())

        structlog.configure(
            processors=processors,
            wrapper_class=structlog.stdlib.BoundLogger,
            logger_factory=structlog.stdlib.LoggerFactory(),
            context_class=dict,
            cache_logger_on_first_use=True,
        )

    @staticmethod
    def configure_standard_logging():
        """Configure standard Python logging"""

        level = getattr(logging, settings.LOG_LEVEL)
        root_logger = logging.getLogger()
        root_logger.setLevel(level)

        # Replace only the handlers we installed on a previous call
        for handler in list(root_logger.handlers):
            if getattr(handler, '_fee_engine_handler', False):
                root_logger.removeHandler(handler)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)

        if settings.LOG_FORMAT == "json":
            formatter = CustomJsonFormatter(
                '%(asctime)s %(name)s %(levelname)s %(message)s'
            )
        else:
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )

        console_handler.setFormatter(formatter)
        console_handler._fee_engine_handler = True
        root_logger.addHandler(console_handler)

        if settings.LOG_FILE:
            log_path = Path(settings.LOG_FILE)
            log_path.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.handlers.TimedRotatingFileHandler(
                log_path,
                when='midnight',
                interval=1,
                backupCount=settings.LOG_RETENTION
            )
            file_handler.setLevel(level)
            file_handler.setFormatter(formatter)
            file_handler._fee_engine_handler = True
            root_logger.addHandler(file_handler)

        LoggingConfig._configure_library_loggers()

    @staticmethod
    def _configure_library_loggers():
        """Configure logging for external libraries"""

        if settings.LOG_SQL_QUERIES:
            logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)
        else:
            logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


class LoggerAdapter:
    """Enhanced logger adapter with context management"""

    def __init__(self, logger: logging.Logger):
        self.logger = logger
        self._context: Dict[str, Any] = {}

    def add_context(self, **kwargs):
        """Add context to all log messages"""
        self._context.update(kwargs)
        return self

    def remove_context(self, *keys):
        """Remove context keys"""
        for key in keys:
            self._context.pop(key, None)
        return self

    def _log(self, level: int, message: str, *args, **kwargs):
        """Internal log method with context"""
        extra = dict(kwargs.get('extra') or {})
        extra.update(self._context)
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

    def critical(self, message: str, *args, **kwargs):
        self._log(logging.CRITICAL, message, *args, **kwargs)


def get_logger(name: Optional[str] = None) -> LoggerAdapter:
    """
    Get configured logger instance.

    Args:
        name: Logger name (defaults to caller's module)

    Returns:
        Enhanced logger adapter
    """
    if name is None:
        import inspect
        frame = inspect.currentframe()
        caller_frame = frame.f_back
        name = caller_frame.f_globals.get('__name__', 'fee_engine')

    return LoggerAdapter(logging.getLogger(name))


@contextmanager
def tenant_context(tenant_id: Optional[Any]) -> Iterator[None]:
    """Bind ``org_id`` to every log record emitted inside the block."""
    token = org_id.set(str(tenant_id) if tenant_id is not None else None)
    try:
        yield
    finally:
        org_id.reset(token)


def setup_logging():
    """Initialize logging configuration"""
    if settings.ENABLE_STRUCTURED_LOGGING:
        LoggingConfig.configure_structured_logging()

    LoggingConfig.configure_standard_logging()

    get_logger(__name__).debug("Logging system initialized", extra={
        'log_level': settings.LOG_LEVEL,
        'log_format': settings.LOG_FORMAT,
        'structured_logging': settings.ENABLE_STRUCTURED_LOGGING
    })


__all__ = [
    'get_logger',
    'setup_logging',
    'LoggerAdapter',
    'LoggingConfig',
    'org_id',
    'tenant_context',
]
