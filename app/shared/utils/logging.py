# 📄 File: app/shared/utils/logging.py

# 🧭 Purpose (Layman Explanation):
# Keeps a tidy diary of what the service does: which photos were cleaned up, which deletions had
# to be retried, and for which request and user, so problems can be traced afterwards.

# 🧪 Purpose (Technical Summary):
# Structured logging for the API and Celery workers: JSON output via python-json-logger (or a
# contextual text format for local runs), request/user ids carried in contextvars, and a
# StructuredLogger wrapper that takes `extra=` field dicts and business events.

# 🔗 Dependencies:
# - python-json-logger: JSON log formatting
# - logging, contextvars: standard library plumbing
# - app.shared.config.settings: LOG_LEVEL, LOG_FORMAT, LOG_FILE

# 🔄 Connected Modules / Calls From:
# Used by: storage cleanup services, sync retry executor, API middleware, command handlers,
# Celery tasks, app.main

import logging
import socket
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

from pythonjsonlogger.json import JsonFormatter

from app.shared.config.settings import get_settings

SERVICE_NAME = 'plant-care-storage'

# Bound by RequestLoggingMiddleware and the command handlers
request_id_var: ContextVar[str] = ContextVar('request_id', default='')
user_id_var: ContextVar[str] = ContextVar('user_id', default='')

_PASSTHROUGH_KWARGS = ('exc_info', 'stack_info', 'stacklevel')
_NOISY_LOGGERS = ('httpx', 'httpcore', 'hpack', 'asyncio', 'celery.redirected')

_configured = False
_loggers: Dict[str, "StructuredLogger"] = {}


def _context_fields() -> Dict[str, str]:
    fields = {}
    if request_id_var.get():
        fields['request_id'] = request_id_var.get()
    if user_id_var.get():
        fields['user_id'] = user_id_var.get()
    return fields


class ContextualFormatter(logging.Formatter):
    """Human-readable format with the request and user ids appended when bound."""

    def format(self, record):
        context = _context_fields()
        record.context = " ".join(f"{key}={value}" for key, value in context.items())
        return super().format(record)


class StructuredJSONFormatter(JsonFormatter):
    """One JSON object per record, with service, host and context ids."""

    def __init__(self):
        super().__init__(
            '%(levelname)s %(name)s %(message)s %(module)s %(funcName)s %(lineno)d',
            rename_fields={'levelname': 'level', 'name': 'logger', 'funcName': 'function', 'lineno': 'line'},
            json_ensure_ascii=False,
        )
        self.hostname = socket.gethostname()

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        log_record['timestamp'] = datetime.now(timezone.utc).isoformat()
        log_record['service'] = SERVICE_NAME
        log_record['hostname'] = self.hostname
        log_record.update(_context_fields())


class StructuredLogger:
    """
    Thin wrapper over a stdlib logger.

    `extra` is a plain dict of fields; they end up as top-level keys in JSON
    output. Any other keyword except exc_info/stack_info/stacklevel is treated
    as an extra field too.
    """

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)

    def debug(self, message: str, extra: Dict = None, **kwargs):
        self._log(logging.DEBUG, message, extra, **kwargs)

    def info(self, message: str, extra: Dict = None, **kwargs):
        self._log(logging.INFO, message, extra, **kwargs)

    def warning(self, message: str, extra: Dict = None, **kwargs):
        self._log(logging.WARNING, message, extra, **kwargs)

    def error(self, message: str, extra: Dict = None, exc_info: bool = False, **kwargs):
        self._log(logging.ERROR, message, extra, exc_info=exc_info, **kwargs)

    def critical(self, message: str, extra: Dict = None, exc_info: bool = False, **kwargs):
        self._log(logging.CRITICAL, message, extra, exc_info=exc_info, **kwargs)

    def _log(self, level: int, message: str, extra: Dict = None, **kwargs):
        fields = dict(extra or {})
        log_kwargs: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if key in _PASSTHROUGH_KWARGS:
                log_kwargs[key] = value
            else:
                fields[key] = value

        if fields:
            log_kwargs['extra'] = {'extra_fields': fields}

        self.logger.log(level, message, **log_kwargs)

    def log_business_event(
        self,
        event_type: str,
        description: str,
        entity_id: str = None,
        entity_type: str = None,
        extra: Dict = None
    ):
        """Log a domain outcome (post deleted, assets swept) for reporting."""
        fields = {
            'event_type': 'business_event',
            'business_event_type': event_type,
            **(extra or {})
        }
        if entity_id:
            fields['entity_id'] = entity_id
        if entity_type:
            fields['entity_type'] = entity_type

        self.info(description, extra=fields)


class _ExtraFieldsFilter(logging.Filter):
    """Copy StructuredLogger fields onto the record so formatters see them as attributes."""

    def filter(self, record):
        for key, value in (getattr(record, 'extra_fields', None) or {}).items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True


def setup_logging(
    log_level: str = None,
    log_format: str = None,
    log_file: str = None,
) -> None:
    """
    Configure the root logger once per process.

    Arguments default to LOG_LEVEL, LOG_FORMAT ('json' or 'text') and LOG_FILE
    from settings. Later calls are no-ops.
    """
    global _configured

    if _configured:
        return

    settings = get_settings()
    level = getattr(logging, (log_level or settings.LOG_LEVEL).upper(), logging.INFO)
    log_format = (log_format or settings.LOG_FORMAT).lower()
    log_file = log_file or settings.LOG_FILE

    if log_format == 'json':
        formatter = StructuredJSONFormatter()
    else:
        formatter = ContextualFormatter('%(asctime)s %(levelname)s %(name)s: %(message)s %(context)s')

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        handler.addFilter(_ExtraFieldsFilter())
        root_logger.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _configured = True
    logging.getLogger(__name__).info(f"Logging configured ({log_format}, {logging.getLevelName(level)})")


def get_logger(name: str) -> StructuredLogger:
    """Cached StructuredLogger for `name` (usually __name__)."""
    if name not in _loggers:
        _loggers[name] = StructuredLogger(name)
    return _loggers[name]


@contextmanager
def log_context(request_id: Optional[str] = None, user_id: Optional[str] = None) -> Iterator[None]:
    """
    Bind request and/or user ids for every log record emitted inside the block.

    Only the ids passed are rebound; the others keep their outer values.
    """
    tokens = []
    if request_id is not None:
        tokens.append((request_id_var, request_id_var.set(request_id)))
    if user_id is not None:
        tokens.append((user_id_var, user_id_var.set(user_id)))

    try:
        yield
    finally:
        for var, token in reversed(tokens):
            var.reset(token)
