"""
Logging Configuration and Utilities

Structured logging for the service: structlog processors for structured
events, python-json-logger for stdlib records, and a request-id context
variable shared by both.
"""

import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import structlog
from pythonjsonlogger import jsonlogger

from guesthouse.config.settings import Settings

# Context variables for request tracking
request_id: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
user_id: ContextVar[Optional[str]] = ContextVar("user_id", default=None)

SERVICE_NAME = "guesthouse"


class RequestContextProcessor:
    """Add request context to structlog event dicts"""

    def __init__(self, environment: str):
        self.environment = environment

    def __call__(self, logger, method_name, event_dict):
        req_id = request_id.get()
        if req_id:
            event_dict["request_id"] = req_id

        uid = user_id.get()
        if uid:
            event_dict["user_id"] = uid

        event_dict["service"] = SERVICE_NAME
        event_dict["environment"] = self.environment
        return event_dict


class RequestContextFilter(logging.Filter):
    """Copy request context onto stdlib log records"""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = request_id.get()
        if not hasattr(record, "user_id"):
            record.user_id = user_id.get()
        return True


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter for structured logging"""

    def __init__(self, *args, environment: str = "development", **kwargs):
        super().__init__(*args, **kwargs)
        self.environment = environment

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]):
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["service"] = SERVICE_NAME
        log_record["environment"] = self.environment

        if getattr(record, "request_id", None):
            log_record["request_id"] = record.request_id
        if getattr(record, "user_id", None):
            log_record["user_id"] = record.user_id

        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)


class LoggingConfig:
    """Centralized logging configuration"""

    _configured = False

    @classmethod
    def configure(cls, settings: Settings) -> None:
        """Configure stdlib and structlog logging once per process."""
        if cls._configured:
            return

        cls.configure_standard_logging(settings)
        cls.configure_structured_logging(settings)
        cls._configured = True

    @staticmethod
    def configure_structured_logging(settings: Settings) -> None:
        """Configure structured logging with structlog"""
        processors = [
            structlog.stdlib.filter_by_level,
            RequestContextProcessor(settings.ENVIRONMENT),
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
        ]

        if settings.LOG_FORMAT == "json":
            processors.append(structlog.processors.JSONRenderer())
        else:
            processors.append(structlog.dev.ConsoleRenderer(colors=False))

        structlog.configure(
            processors=processors,
            wrapper_class=structlog.stdlib.BoundLogger,
            logger_factory=structlog.stdlib.LoggerFactory(),
            context_class=dict,
            cache_logger_on_first_use=True,
        )

    @staticmethod
    def configure_standard_logging(settings: Settings) -> None:
        """Configure standard Python logging"""
        root_logger = logging.getLogger()
        root_logger.setLevel(getattr(logging, settings.LOG_LEVEL))
        root_logger.handlers.clear()

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(getattr(logging, settings.LOG_LEVEL))
        console_handler.addFilter(RequestContextFilter())

        if settings.LOG_FORMAT == "json":
            formatter: logging.Formatter = CustomJsonFormatter(
                "%(asctime)s %(name)s %(levelname)s %(message)s",
                environment=settings.ENVIRONMENT,
            )
        else:
            formatter = logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] %(message)s"
            )

        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

        LoggingConfig._configure_library_loggers(settings)

    @staticmethod
    def _configure_library_loggers(settings: Settings) -> None:
        """Configure logging for external libraries"""
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
        logging.getLogger("uvicorn.error").setLevel(logging.INFO)

        if settings.DB_ECHO:
            logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)
        else:
            logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

        logging.getLogger("httpx").setLevel(logging.WARNING)


def configure_logging(settings: Settings) -> None:
    LoggingConfig.configure(settings)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a stdlib logger.

    Records pick up the request id through RequestContextFilter, so
    callers only pass domain fields via ``extra``.
    """
    return logging.getLogger(name or SERVICE_NAME)


def get_structured_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger bound to the stdlib logging tree."""
    return structlog.get_logger(name or SERVICE_NAME)
