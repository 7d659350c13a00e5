"""Runtime configuration for patternaudit - centralized configuration management."""

import copy
import json
import os
import re
from dataclasses import dataclass
from functools import cached_property
from pathlib import Path
from typing import Any

from patternaudit.utils.constants import (
    CONFIG_FILE_NAME,
    DEFAULT_TARGET,
    ENV_PREFIX,
    SCANNED_EXTENSIONS,
    TOP_OFFENDERS_LIMIT,
)
from patternaudit.utils.logging import logger

DEFAULTS = {
    "scan": {
        "default_target": DEFAULT_TARGET,
        "extensions": list(SCANNED_EXTENSIONS),
        "include_hidden": False,
        "max_workers": min(8, os.cpu_count() or 4),
        "top_offenders": TOP_OFFENDERS_LIMIT,
    },
    "services": {
        "helper_module": "@/lib/validation",
        # On-disk location of the helper module, relative to the project root
        "helper_dir": "src/lib/validation",
        "validation_service": "ValidationService",
        "formatter_service": "FormatterService",
    },
    "timeouts": {
        # Whole-scan deadline in seconds, 0 disables it
        "scan": 300.0,
    },
    "rules": {
        # Alternative YAML detector file; empty uses the bundled set
        "detectors_file": "",
    },
}


def load_runtime_config(root: str | Path = ".") -> dict[str, Any]:
    """
    Load runtime configuration from .paudit/config.json and environment variables.

    Config priority (highest to lowest):
    1. Environment variables (PATTERNAUDIT_<SECTION>_<KEY>)
    2. .paudit/config.json file under ``root``
    3. Built-in defaults

    Values whose type does not match the default are ignored.

    Args:
        root: Project root to look for the config file in

    Returns:
        Configuration dictionary with merged values
    """
    cfg = copy.deepcopy(DEFAULTS)

    path = Path(root) / ".paudit" / CONFIG_FILE_NAME
    try:
        if path.exists():
            with open(path, encoding="utf-8") as f:
                user = json.load(f)

            if isinstance(user, dict):
                for section in cfg:
                    if section in user and isinstance(user[section], dict):
                        for key, value in user[section].items():
                            if key in cfg[section] and _same_type(value, cfg[section][key]):
                                cfg[section][key] = value
    except (json.JSONDecodeError, OSError) as e:
        logger.warning(f"Could not load config file from {path}: {e}")
        logger.info("Continuing with default configuration")

    for section in cfg:
        for key in cfg[section]:
            env_var = f"{ENV_PREFIX}_{section.upper()}_{key.upper()}"
            if env_var in os.environ:
                value = os.environ[env_var]
                try:
                    cfg[section][key] = _coerce(value, cfg[section][key])
                except (ValueError, AttributeError) as e:
                    logger.warning(
                        f"Invalid value for environment variable {env_var}: '{value}' - {e}"
                    )
                    logger.info(f"Using default value: {cfg[section][key]}")

    return cfg


def _same_type(value: Any, default: Any) -> bool:
    if isinstance(default, bool):
        return isinstance(value, bool)
    if isinstance(default, float):
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    return isinstance(value, type(default))


def _coerce(value: str, default: Any) -> Any:
    if isinstance(default, bool):
        lowered = value.strip().lower()
        if lowered in ("1", "true", "yes", "on"):
            return True
        if lowered in ("0", "false", "no", "off"):
            return False
        raise ValueError("expected a boolean")
    if isinstance(default, int):
        return int(value)
    if isinstance(default, float):
        return float(value)
    if isinstance(default, list):
        return [v.strip() for v in value.split(",") if v.strip()]
    return value


@dataclass(frozen=True)
class ServiceConfig:
    """Where the two centralized helper services live and how they are called."""

    helper_module: str = "@/lib/validation"
    validation_service: str = "ValidationService"
    formatter_service: str = "FormatterService"
    helper_dir: str = "src/lib/validation"

    @classmethod
    def from_config(cls, cfg: dict[str, Any]) -> "ServiceConfig":
        services = cfg.get("services", {})
        return cls(
            helper_module=services.get("helper_module", cls.helper_module),
            validation_service=services.get("validation_service", cls.validation_service),
            formatter_service=services.get("formatter_service", cls.formatter_service),
            helper_dir=services.get("helper_dir", cls.helper_dir),
        )

    @cached_property
    def import_pattern(self) -> re.Pattern:
        """Matches an import statement that pulls from the helper module."""
        return re.compile(
            r"import\s+.*from\s+['\"]" + re.escape(self.helper_module) + r"['\"]"
        )

    @property
    def suggested_import(self) -> str:
        return (
            f"import {{ {self.validation_service}, {self.formatter_service} }} "
            f'from "{self.helper_module}";'
        )
