"""
Logging setup for the webhook service.

configure_logging() is called once from create_app(). Output goes to stderr
as text lines or single-line JSON (LOG_FORMAT), at LOG_LEVEL (default INFO).

Pipeline log calls attach webhook context through `extra=`:

    logger.info("...", extra={'provider': 'facebook', 'lead_count': 2})

JSON output promotes those keys to top-level fields so log aggregators can
filter per provider; text output appends them as key=value pairs.
"""
import json
import logging
import os
import sys
from datetime import datetime, timezone

# Record attributes copied into the output when a log call sets them
WEBHOOK_LOG_FIELDS = ('provider', 'webhook_type', 'lead_count')

# Third-party loggers that are noisy at INFO
_NOISY_LOGGERS = ['werkzeug', 'urllib3']


def _webhook_fields(record):
    return {
        key: getattr(record, key)
        for key in WEBHOOK_LOG_FIELDS
        if getattr(record, key, None) is not None
    }


class JSONFormatter(logging.Formatter):
    """One JSON object per line, webhook context fields at the top level."""

    def format(self, record):
        entry = {
            'timestamp': datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        entry.update(_webhook_fields(record))
        if record.exc_info and record.exc_info[0] is not None:
            entry['exception'] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable lines; webhook context is appended as key=value."""

    def __init__(self):
        super().__init__(
            '[%(asctime)s] %(levelname)s %(name)s: %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S',
        )

    def format(self, record):
        line = super().format(record)
        fields = _webhook_fields(record)
        if not fields:
            return line
        context = ' '.join(f'{key}={value}' for key, value in fields.items())
        # Keep any traceback below the context, not after it
        head, sep, tail = line.partition('\n')
        return f'{head} [{context}]{sep}{tail}'


def _resolve_level(name):
    level = logging.getLevelName((name or 'INFO').upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(app=None, level=None, log_format=None):
    """
    Install a single stderr handler on the root logger.

    Arguments override the environment:
        level      — log level name, else LOG_LEVEL (default: INFO)
        log_format — "text" or "json", else LOG_FORMAT (default: text)

    Safe to call repeatedly; the previous handlers are replaced.
    """
    resolved = _resolve_level(level or os.getenv('LOG_LEVEL', 'INFO'))
    fmt = (log_format or os.getenv('LOG_FORMAT', 'text')).lower()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(resolved)
    handler.setFormatter(JSONFormatter() if fmt == 'json' else TextFormatter())

    root = logging.getLogger()
    root.setLevel(resolved)
    root.handlers = [handler]

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    if app is not None:
        app.logger.setLevel(resolved)
