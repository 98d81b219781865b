import atexit
import json
import logging
import logging.handlers
import queue
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import Any

_queue_listener: logging.handlers.QueueListener | None = None
_queue_handler: logging.handlers.QueueHandler | None = None
_atexit_registered = False

# knife.rb log_level symbols -> stdlib levels
KNIFE_LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "auto": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "fatal": logging.CRITICAL,
}


class CustomJsonFormatter(logging.Formatter):
    def __init__(self, datefmt: str | None = None) -> None:
        super().__init__(datefmt=datefmt)

    def format(self, record: logging.LogRecord) -> str:
        record_dict = {
            "time": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "module": record.name,
            "funcName": record.funcName,
            "lineno": record.lineno,
            "message": record.getMessage(),
        }

        # Include standard extra fields
        if hasattr(record, "config_path"):
            record_dict["config_path"] = record.config_path  # type: ignore[attr-defined]
        if hasattr(record, "line_number"):
            record_dict["line_number"] = record.line_number  # type: ignore[attr-defined]

        if record.exc_info:
            record_dict["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(record_dict, ensure_ascii=False)


def resolve_log_level(level: str | int) -> int:
    """
    Map a knife-style level name (``info``, ``:warn``, ``fatal``...) to a
    logging level. Unknown names fall back to INFO.
    """
    if isinstance(level, int):
        return level
    name = level.strip().lstrip(":").lower()
    return KNIFE_LOG_LEVELS.get(name, logging.INFO)


def setup_logging(level: str | int = "info", location: str = "STDERR") -> None:
    """
    Setup structured logging with JSON formatting and queue-based async handling.

    Args:
        level: knife-style level name or a logging level int
        location: ``STDOUT``, ``STDERR`` or a log file path (rotated daily)
    """
    global _queue_listener, _queue_handler
    log_level = resolve_log_level(level)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    # Stop any existing listener before creating a new one (e.g., during tests)
    shutdown_logging()

    log_queue: queue.Queue[logging.LogRecord] = queue.Queue(maxsize=1000)
    queue_listener = _build_queue_listener(log_queue, log_level, location)

    queue_handler = logging.handlers.QueueHandler(log_queue)
    queue_handler.setLevel(log_level)
    root_logger.addHandler(queue_handler)

    queue_listener.start()
    _queue_listener = queue_listener
    _queue_handler = queue_handler

    _register_logging_shutdown()


def setup_logging_from_settings(settings: Mapping[str, Any]) -> None:
    """Apply the ``log_level``/``log_location`` declared in a loaded knife.rb."""
    level = settings.get("log_level", "info")
    location = settings.get("log_location", "STDOUT")
    if not isinstance(level, str):
        level = "info"
    if not isinstance(location, str):
        location = "STDOUT"
    setup_logging(level, location)


def _build_handler(location: str, log_level: int) -> logging.Handler:
    handler: logging.Handler
    if location.upper() == "STDOUT":
        handler = logging.StreamHandler(sys.stdout)
    elif location.upper() == "STDERR":
        handler = logging.StreamHandler(sys.stderr)
    else:
        log_path = Path(location)
        if not log_path.parent.exists():
            log_path.parent.mkdir(parents=True)
        file_handler = logging.handlers.TimedRotatingFileHandler(
            filename=str(log_path),
            when="midnight",
            interval=1,
            backupCount=30,
            utc=True,
            encoding="utf-8",
        )
        file_handler.suffix = "%Y-%m-%d"
        handler = file_handler

    handler.setLevel(log_level)
    handler.setFormatter(CustomJsonFormatter(datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def _build_queue_listener(
    log_queue: queue.Queue, log_level: int, location: str
) -> logging.handlers.QueueListener:
    """
    Creates a QueueListener that will dispatch logs from the queue
    to the handler for the configured location.
    """
    return logging.handlers.QueueListener(
        log_queue,
        _build_handler(location, log_level),
        respect_handler_level=True,
    )


def shutdown_logging() -> None:
    """Stop the queue listener, flushing pending records."""
    global _queue_listener, _queue_handler
    if _queue_handler:
        logging.getLogger().removeHandler(_queue_handler)
        _queue_handler = None
    if _queue_listener:
        _queue_listener.stop()
        for handler in _queue_listener.handlers:
            handler.close()
        _queue_listener = None


def _register_logging_shutdown() -> None:
    """Ensure the queue listener is stopped during interpreter shutdown."""

    global _atexit_registered

    if _atexit_registered:
        return

    atexit.register(shutdown_logging)
    _atexit_registered = True


def get_logger(name: str) -> logging.Logger:
    """
    Convenience method for retrieving a logger
    """
    return logging.getLogger(name)
