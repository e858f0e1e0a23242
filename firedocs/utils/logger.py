"""Logging setup: readable console output plus optional JSONL event log."""

import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any

CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_logger(
    name: str,
    log_file: Path | None = None,
    level: str | int = logging.INFO,
) -> logging.Logger:
    """
    Get a configured logger with a console handler and an optional JSONL file.

    Handlers are attached once per logger name; later calls only adjust the
    level and add the file handler if it is new.

    Args:
        name: Logger name (usually __name__)
        log_file: Optional path to JSONL log file
        level: Logging level name or number

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logger.setLevel(level)

    if not any(type(h) is logging.StreamHandler for h in logger.handlers):
        # stderr keeps stdout free for the summary
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(console_handler)

    if log_file and not any(
        isinstance(h, JSONLFileHandler) and h.filepath == log_file for h in logger.handlers
    ):
        logger.addHandler(JSONLFileHandler(log_file))

    return logger


class JSONLFileHandler(logging.Handler):
    """Handler that appends log records as JSON Lines."""

    def __init__(self, filepath: Path):
        super().__init__()
        self.filepath = Path(filepath)
        self.filepath.parent.mkdir(parents=True, exist_ok=True)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            log_entry = {
                "timestamp": datetime.fromtimestamp(record.created).isoformat(),
                "level": record.levelname,
                "logger": record.name,
                "message": record.getMessage(),
            }

            event = getattr(record, "event", None)
            if isinstance(event, dict):
                log_entry.update(event)

            with open(self.filepath, "a", encoding="utf-8") as f:
                f.write(json.dumps(log_entry, default=str) + "\n")

        except Exception:
            self.handleError(record)


def log_event(
    logger: logging.Logger,
    event_type: str,
    message: str,
    level: int = logging.INFO,
    **fields: Any,
) -> None:
    """
    Log a structured event.

    Console handlers show ``message``; the JSONL handler also records
    ``event_type`` and every keyword field.

    Args:
        logger: Logger instance
        event_type: Type of event (e.g., "page_written", "page_failed")
        message: Human-readable message
        level: Logging level
        **fields: Additional metadata (url, attempts, error_kind, ...)
    """
    logger.log(level, message, extra={"event": {"event_type": event_type, **fields}})
