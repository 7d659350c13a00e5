"""Centralized logging configuration using Loguru.

Usage:
    from patternaudit.utils.logging import logger
    logger.info("Message")
    logger.debug("Debug message")  # Only shows if PATTERNAUDIT_LOG_LEVEL=DEBUG

Environment Variables:
    PATTERNAUDIT_LOG_LEVEL: DEBUG|INFO|WARNING|ERROR (default: INFO)
    PATTERNAUDIT_LOG_JSON: 0|1 (default: 0, human-readable)
    PATTERNAUDIT_LOG_FILE: path to log file (optional)
"""

import json
import os
import sys
from pathlib import Path

from loguru import logger

# Remove default handler
logger.remove()

NUMERIC_LEVELS = {
    "TRACE": 10,
    "DEBUG": 20,
    "INFO": 30,
    "SUCCESS": 30,
    "WARNING": 40,
    "ERROR": 50,
    "CRITICAL": 60,
}

_log_level = os.environ.get("PATTERNAUDIT_LOG_LEVEL", "INFO").upper()
_json_mode = os.environ.get("PATTERNAUDIT_LOG_JSON", "0") == "1"
_log_file = os.environ.get("PATTERNAUDIT_LOG_FILE")


def _to_ndjson(record) -> str:
    """Render a loguru record as one NDJSON line."""
    entry = {
        "level": NUMERIC_LEVELS.get(record["level"].name, 30),
        "time": int(record["time"].timestamp() * 1000),
        "msg": record["message"],
        "pid": record["process"].id,
        "module": record["name"],
    }

    for key, value in record["extra"].items():
        entry[key] = value

    if record["exception"]:
        entry["err"] = {
            "type": record["exception"].type.__name__ if record["exception"].type else "Error",
            "message": str(record["exception"].value) if record["exception"].value else "",
        }

    return json.dumps(entry, default=str)


def ndjson_sink(message):
    """Write log records as NDJSON to stderr.

    stdout is reserved for tool output, so machine logs never go there.
    Never call logger.* inside a sink.
    """
    sys.stderr.write(_to_ndjson(message.record) + "\n")
    sys.stderr.flush()


# Human-readable format (no emojis - keeps Windows consoles happy)
_human_format = (
    "<green>{time:HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}:{function}:{line}</cyan> - "
    "<level>{message}</level>"
)

logger.level("DEBUG", color="<blue>")
logger.level("INFO", color="<white>")
logger.level("WARNING", color="<yellow>")
logger.level("ERROR", color="<red>")

if _json_mode:
    logger.add(ndjson_sink, level=_log_level, colorize=False)
else:
    logger.add(
        sys.stderr,
        level=_log_level,
        format=_human_format,
        colorize=None,  # Auto-detect: colors if TTY, plain if piped
    )

if _log_file:

    def _file_sink(message):
        """Append NDJSON records to the configured log file."""
        with open(_log_file, "a", encoding="utf-8") as f:
            f.write(_to_ndjson(message.record) + "\n")

    logger.add(_file_sink, level="DEBUG")


def configure_file_logging(log_dir: Path, level: str = "DEBUG") -> None:
    """Add rotating file handler for persistent logs.

    Args:
        log_dir: Directory for log files (e.g., Path(".paudit"))
        level: Minimum log level for file output
    """
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "patternaudit.log"

    logger.add(
        log_file,
        rotation="10 MB",
        retention="7 days",
        level=level,
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
    )


__all__ = [
    "logger",
    "configure_file_logging",
]
