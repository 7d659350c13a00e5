"""Inspection of the on-disk helper module (services, config, sub-packages)."""

from pathlib import Path
from typing import Any

from patternaudit.config_runtime import ServiceConfig
from patternaudit.utils.helpers import resolve_within
from patternaudit.utils.logging import logger

SYSTEM_ACTIONS = ("overview", "details", "schemas", "formatters", "validators")

# Sub-directories listed by the overview and dumped by their own action
HELPER_PACKAGES = ("schemas", "formatters", "validators")

HELPER_SOURCE_SUFFIX = ".ts"
CONFIG_FILE = "config.ts"


class HelperFileNotFound(LookupError):
    """A requested helper file does not exist inside the helper directory."""


class ValidationSystem:
    """Reads the helper module directory configured in ``ServiceConfig.helper_dir``.

    A missing directory is not an error: every file reports as absent and
    every listing is empty.
    """

    def __init__(self, project_root: Path | str, services: ServiceConfig | None = None):
        self.services = services or ServiceConfig()
        self.helper_dir = resolve_within(project_root, self.services.helper_dir)
        if self.helper_dir is None:
            raise ValueError(
                f"Helper directory {self.services.helper_dir} resolves outside the project root"
            )

    @property
    def validation_service_file(self) -> str:
        return f"{self.services.validation_service}{HELPER_SOURCE_SUFFIX}"

    @property
    def formatter_service_file(self) -> str:
        return f"{self.services.formatter_service}{HELPER_SOURCE_SUFFIX}"

    def read(self, name: str) -> str | None:
        """Content of ``name`` under the helper directory, or None when absent."""
        path = self.helper_dir / name
        if not path.is_file():
            return None
        return path.read_text(encoding="utf-8")

    def package_files(self, package: str) -> list[Path]:
        directory = self.helper_dir / package
        if not directory.is_dir():
            return []
        return sorted(
            p for p in directory.iterdir() if p.is_file() and p.name.endswith(HELPER_SOURCE_SUFFIX)
        )

    def specific_file(self, name: str) -> str:
        """Content of one helper file; the name may not leave the helper directory."""
        path = resolve_within(self.helper_dir, name)
        if path is None or not path.is_file():
            raise HelperFileNotFound(name)
        return path.read_text(encoding="utf-8")

    def overview(self) -> dict[str, Any]:
        validation = self.read(self.validation_service_file) is not None
        formatter = self.read(self.formatter_service_file) is not None
        config = self.read(CONFIG_FILE) is not None

        structure: dict[str, Any] = {
            "validationServiceExists": validation,
            "formatterServiceExists": formatter,
            "configExists": config,
        }
        for package in HELPER_PACKAGES:
            structure[package] = [p.name for p in self.package_files(package)]

        return {
            "structure": structure,
            "servicesSummary": {
                "validationService": (
                    f"{self.validation_service_file} exists and defines methods for "
                    "validating form inputs"
                    if validation
                    else f"{self.validation_service_file} not found"
                ),
                "formatterService": (
                    f"{self.formatter_service_file} exists and defines methods for "
                    "formatting values"
                    if formatter
                    else f"{self.formatter_service_file} not found"
                ),
                "config": (
                    f"{CONFIG_FILE} exists and defines validation constants and "
                    "regular expressions"
                    if config
                    else f"{CONFIG_FILE} not found"
                ),
            },
        }

    def details(self) -> dict[str, Any]:
        result = {}
        for key, name in (
            ("validationService", self.validation_service_file),
            ("formatterService", self.formatter_service_file),
        ):
            content = self.read(name)
            result[key] = {"exists": content is not None, "content": content}
        return result

    def package_contents(self, package: str) -> dict[str, Any]:
        files = self.package_files(package)
        logger.debug(f"Reading {len(files)} {package} from {self.helper_dir}")
        return {package: {p.name: p.read_text(encoding="utf-8") for p in files}}

    def run(self, action: str) -> dict[str, Any]:
        if action == "overview":
            return self.overview()
        if action == "details":
            return self.details()
        if action in HELPER_PACKAGES:
            return self.package_contents(action)
        raise ValueError(f"Unknown action '{action}'")
