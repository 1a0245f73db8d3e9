"""
Core logging infrastructure for transcript retrieval.

Provides single-line JSON logging with thread-local request context and
third-party library noise suppression. Library modules only call get_logger();
configure_logging() is left to applications (the CLI calls it).
"""

import json
import logging
import threading
from datetime import datetime, timezone
from typing import Dict, Optional
from urllib.parse import parse_qs, urlencode, urlparse, urlunparse


# Thread-local storage for request context
_local = threading.local()

SENSITIVE_PARAMS = {'key', 'token', 'sig', 'signature', 'pot'}

# LogRecord attributes never copied into the JSON payload
_STANDARD_FIELDS = {
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname', 'filename',
    'module', 'lineno', 'funcName', 'created', 'msecs', 'relativeCreated',
    'thread', 'threadName', 'processName', 'process', 'exc_info',
    'exc_text', 'stack_info', 'taskName', 'message', 'asctime',
}
_ORDERED_FIELDS = ['stage', 'event', 'outcome', 'dur_ms', 'detail']


def set_video_ctx(video_id: Optional[str] = None, request_id: Optional[str] = None):
    """
    Set thread-local context for log correlation.

    Args:
        video_id: YouTube video ID being processed
        request_id: Caller supplied correlation id
    """
    if not hasattr(_local, 'context'):
        _local.context = {}

    if video_id is not None:
        _local.context['video_id'] = video_id
    if request_id is not None:
        _local.context['request_id'] = request_id


def clear_video_ctx():
    """Clear thread-local context."""
    if hasattr(_local, 'context'):
        _local.context.clear()


def get_video_ctx() -> Dict[str, str]:
    """Get current thread-local context."""
    if not hasattr(_local, 'context'):
        return {}
    return _local.context.copy()


def mask_url(url: str) -> str:
    """Mask sensitive query parameters in URLs for logging."""
    try:
        parsed = urlparse(url)
        if not parsed.query:
            return url
        params = parse_qs(parsed.query, keep_blank_values=True)
        masked = {
            key: ['***'] * len(values) if key.lower() in SENSITIVE_PARAMS else values
            for key, values in params.items()
        }
        return urlunparse(parsed._replace(query=urlencode(masked, doseq=True)))
    except ValueError:
        return url.split('?')[0] + '?***'


class JsonFormatter(logging.Formatter):
    """
    JSON formatter with standardized field order and context injection.

    Produces single-line JSON with stable schema:
    ts, lvl, video_id, request_id, stage, event, outcome, dur_ms, detail
    followed by any other extra fields.
    """

    def format(self, record: logging.LogRecord) -> str:
        dt = datetime.fromtimestamp(record.created, tz=timezone.utc)
        log_data = {
            'ts': dt.strftime('%Y-%m-%dT%H:%M:%S') + f'.{int(dt.microsecond / 1000):03d}Z',
            'lvl': record.levelname,
        }

        context = get_video_ctx()
        for field in ('video_id', 'request_id'):
            if field in context:
                log_data[field] = context[field]

        for field in _ORDERED_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                log_data[field] = value

        for attr_name, attr_value in record.__dict__.items():
            if (attr_name.startswith('_') or attr_name in _STANDARD_FIELDS
                    or attr_name in log_data or attr_value is None):
                continue
            log_data[attr_name] = attr_value

        if 'detail' not in log_data and record.getMessage():
            log_data['detail'] = record.getMessage()

        if record.exc_info:
            log_data['exc'] = self.formatException(record.exc_info)

        return json.dumps(log_data, separators=(',', ':'), ensure_ascii=False, default=str)


def configure_logging(log_level: str = "INFO", use_json: bool = True) -> logging.Logger:
    """
    Configure application logging with JSON formatting and noise suppression.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        use_json: Whether to use JSON formatting (True) or basic formatting (False)

    Returns:
        Configured root logger
    """
    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    handler = logging.StreamHandler()
    if use_json:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        ))
    root_logger.addHandler(handler)

    _suppress_library_noise()
    return root_logger


def _suppress_library_noise():
    """Suppress verbose logging from third-party libraries."""
    for library in ('urllib3', 'requests', 'charset_normalizer'):
        logging.getLogger(library).setLevel(logging.WARNING)


def get_logger(name: str = None) -> logging.Logger:
    return logging.getLogger(name)
