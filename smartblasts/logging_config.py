"""
SmartBlasts logging setup.

setup_logging() runs once when the API or the migration CLI starts; every
other module just asks for ``logging.getLogger(__name__)``. Tenant context
travels in ``extra=`` (user_id, campaign_id, vendor_id ...) and shows up as
top-level keys when LOG_FORMAT=json. log_request() writes the one line per
HTTP request that the API middleware emits.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone

from smartblasts import config

SERVICE_NAME = "smartblasts"

# Keys lifted from extra= onto JSON lines
EXTRA_FIELDS = ("user_id", "campaign_id", "vendor_id", "contact_id", "event", "page",
                "method", "path", "status_code", "duration_ms")

# Chatty third-party loggers held at WARNING
QUIET_LOGGERS = ("asyncio", "uvicorn.access", "httpx", "multipart")

request_logger = logging.getLogger("smartblasts.requests")


class JSONFormatter(logging.Formatter):
    """One JSON object per line, tagged with the service name."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "service": SERVICE_NAME,
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update({k: getattr(record, k) for k in EXTRA_FIELDS if hasattr(record, k)})
        if record.exc_info and record.exc_info[0]:
            entry["error"] = f"{record.exc_info[0].__name__}: {record.exc_info[1]}"
        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    """Console format; appends user/campaign ids when present."""

    def __init__(self):
        super().__init__(fmt="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
                         datefmt="%Y-%m-%d %H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        tags = [f"{k}={getattr(record, k)}" for k in ("user_id", "campaign_id") if hasattr(record, k)]
        return f"{line} [{' '.join(tags)}]" if tags else line


def build_formatter(fmt: str) -> logging.Formatter:
    return JSONFormatter() if fmt == "json" else TextFormatter()


def log_request(method: str, path: str, status_code: int, duration_ms: float, user_id: str = None):
    """Access line for one API call. 5xx responses log at ERROR."""
    extra = {"method": method, "path": path, "status_code": status_code,
             "duration_ms": round(duration_ms, 1)}
    if user_id:
        extra["user_id"] = user_id
    level = logging.ERROR if status_code >= 500 else logging.INFO
    request_logger.log(level, "%s %s %d (%.1fms)", method, path, status_code, duration_ms, extra=extra)


_initialized = False


def setup_logging(level: str = None, fmt: str = None, log_file: str = None):
    """Install SmartBlasts handlers on the root logger. Later calls are no-ops.

    Defaults come from LOG_LEVEL, LOG_FORMAT and LOG_FILE in smartblasts.config.
    """
    global _initialized
    if _initialized:
        return
    _initialized = True

    level = (level or config.LOG_LEVEL).upper()
    fmt = fmt or config.LOG_FORMAT
    log_file = log_file or config.LOG_FILE

    root = logging.getLogger()
    root.setLevel(getattr(logging, level, logging.INFO))
    root.handlers.clear()

    formatter = build_formatter(fmt)
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        os.makedirs(os.path.dirname(log_file) or ".", exist_ok=True)
        handlers.append(logging.FileHandler(log_file))
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(SERVICE_NAME).info("Logging ready: level=%s format=%s%s",
                                         level, fmt, f" file={log_file}" if log_file else "")
