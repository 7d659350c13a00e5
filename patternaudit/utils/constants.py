"""Centralized constants for the patternaudit utils package."""

from pathlib import Path

# ============================================================================
# OUTPUT DIRECTORIES
# ============================================================================

# Per-project working directory (config file, error log)
PAUDIT_DIR = Path("./.paudit")

ERROR_LOG_FILE = PAUDIT_DIR / "error.log"
CONFIG_FILE_NAME = "config.json"

# ============================================================================
# SCAN DEFAULTS
# ============================================================================

# File extensions picked up when the target is a directory
SCANNED_EXTENSIONS = (".tsx", ".jsx", ".ts", ".js")

# Target scanned when a request does not name one
DEFAULT_TARGET = "src/components"

# Length of the top offenders list in a project report
TOP_OFFENDERS_LIMIT = 5

# Lines shown in the fileAnalyzer "basic" preview
PREVIEW_LINES = 20

# ============================================================================
# ENVIRONMENT VARIABLES
# ============================================================================

ENV_PREFIX = "PATTERNAUDIT"
