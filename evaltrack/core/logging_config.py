"""
Logging configuration for the EvalTrack API
"""
import logging
import sys
import json
from contextvars import ContextVar
from typing import Optional, Dict, Any
from datetime import datetime, timezone
from evaltrack.core.config import settings

# Per-request correlation values, set by RequestIDMiddleware and the identity dependency
request_id_context: ContextVar[str] = ContextVar('request_id', default='system')
caller_id_context: ContextVar[Optional[str]] = ContextVar('caller_id', default=None)

_RESERVED_ATTRS = frozenset([
    'name', 'msg', 'args', 'created', 'filename', 'funcName', 'levelname',
    'levelno', 'lineno', 'module', 'msecs', 'message', 'pathname', 'process',
    'processName', 'relativeCreated', 'thread', 'threadName', 'exc_info',
    'exc_text', 'stack_info', 'taskName', 'request_id', 'caller_id',
])


def _current_request_id(record: logging.LogRecord) -> str:
    request_id = getattr(record, 'request_id', None)
    if request_id is None:
        request_id = request_id_context.get()
    return request_id


class JSONFormatter(logging.Formatter):
    """Structured formatter: one JSON object per line"""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": _current_request_id(record),
        }

        caller_id = getattr(record, 'caller_id', None) or caller_id_context.get()
        if caller_id:
            log_data["caller_id"] = caller_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Anything passed through `extra=` that isn't a stock LogRecord attribute
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and key not in log_data:
                log_data[key] = value

        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """Plain formatter that always has a request_id to interpolate"""

    def format(self, record: logging.LogRecord) -> str:
        record.request_id = _current_request_id(record)
        return super().format(record)


def setup_logging(log_level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """
    Configure application-wide logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Log format ("text" or "json")
    """
    level = log_level or settings.LOG_LEVEL
    fmt = log_format or settings.LOG_FORMAT

    numeric_level = getattr(logging, level.upper(), logging.INFO)

    if fmt.lower() == "json":
        formatter = JSONFormatter()
    else:
        formatter = TextFormatter(
            '%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    # passlib probes bcrypt.__about__ and warns on newer bcrypt releases
    logging.getLogger("passlib.handlers.bcrypt").setLevel(logging.ERROR)


class ContextLoggerAdapter(logging.LoggerAdapter):
    """Adds the current request id and caller id to every record"""

    def process(self, msg, kwargs):
        extra = kwargs.setdefault('extra', {})
        extra.setdefault('request_id', request_id_context.get())
        caller_id = caller_id_context.get()
        if caller_id is not None:
            extra.setdefault('caller_id', caller_id)
        return msg, kwargs


def get_logger(name: str) -> logging.LoggerAdapter:
    """
    Get a logger for a module (typically called with __name__).
    """
    return ContextLoggerAdapter(logging.getLogger(name), {})
