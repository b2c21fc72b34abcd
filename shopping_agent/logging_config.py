"""Structured logging configuration."""

import logging
import re
import sys
from datetime import datetime, timezone
from pathlib import Path

from pythonjsonlogger import jsonlogger

from shopping_agent.config import settings

# Screenshots travel as base64 data URIs; only messages longer than this are checked for payloads
MAX_LOGGED_MESSAGE_LENGTH = 1000

_DATA_URI = re.compile(r"data:[\w.+/-]+;base64,")
_BASE64_RUN = re.compile(r"[A-Za-z0-9+/]{%d,}={0,2}" % MAX_LOGGED_MESSAGE_LENGTH)


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter with timestamp, level and source location fields."""

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)

        log_record['timestamp'] = datetime.now(timezone.utc).isoformat()
        log_record['level'] = record.levelname
        log_record['logger'] = record.name
        log_record['source'] = f"{record.filename}:{record.lineno}"

        if record.funcName:
            log_record['function'] = record.funcName


class Base64Filter(logging.Filter):
    """Drop records that carry base64 image data instead of a message."""

    def filter(self, record: logging.LogRecord) -> bool:
        msg = record.getMessage()
        if len(msg) <= MAX_LOGGED_MESSAGE_LENGTH:
            return True
        return not (_DATA_URI.search(msg) or _BASE64_RUN.search(msg))


def setup_logging(base_dir: str | Path | None = None):
    """Configure logging for the application.

    Args:
        base_dir: Optional base directory to place the logs/ folder in.
                  If omitted, uses the current working directory.
    """
    logs_dir = (Path(base_dir) if base_dir else Path.cwd()) / "logs"
    logs_dir.mkdir(exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, settings.log_level.upper()))
    root_logger.handlers.clear()

    base64_filter = Base64Filter()

    # Console handler (human-readable for development)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.DEBUG)
    console_handler.setFormatter(
        logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    )
    console_handler.addFilter(base64_filter)
    root_logger.addHandler(console_handler)

    # File handler (JSON)
    json_formatter = CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s")
    json_handler = logging.FileHandler(logs_dir / "app.log")
    json_handler.setLevel(logging.DEBUG)
    json_handler.setFormatter(json_formatter)
    json_handler.addFilter(base64_filter)
    root_logger.addHandler(json_handler)

    # Errors only
    error_handler = logging.FileHandler(logs_dir / "error.log")
    error_handler.setLevel(logging.ERROR)
    error_handler.setFormatter(json_formatter)
    error_handler.addFilter(base64_filter)
    root_logger.addHandler(error_handler)

    # Silence verbose third-party loggers
    for noisy in ("openai", "httpx", "httpcore", "asyncio"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    return root_logger
