"""patternaudit utilities package."""

from .constants import (
    DEFAULT_TARGET,
    ERROR_LOG_FILE,
    PAUDIT_DIR,
    SCANNED_EXTENSIONS,
    TOP_OFFENDERS_LIMIT,
)
from .error_handler import handle_exceptions
from .exit_codes import ExitCodes
from .helpers import relative_posix, resolve_within, save_json_file
from .logging import logger

__all__ = [
    "PAUDIT_DIR",
    "ERROR_LOG_FILE",
    "DEFAULT_TARGET",
    "SCANNED_EXTENSIONS",
    "TOP_OFFENDERS_LIMIT",
    "handle_exceptions",
    "ExitCodes",
    "relative_posix",
    "resolve_within",
    "save_json_file",
    "logger",
]
