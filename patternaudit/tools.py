"""Request/response handlers for the named analysis tools.

Every handler takes the request arguments plus an explicit project root and
returns a response holding one text content block.
"""

import json
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from patternaudit.config_runtime import ServiceConfig, load_runtime_config
from patternaudit.file_analyzer import ANALYSIS_MODES, FileAnalyzer
from patternaudit.reporter import to_json
from patternaudit.scanner import ComplianceScanner
from patternaudit.utils.helpers import resolve_within
from patternaudit.utils.logging import logger
from patternaudit.validation_system import SYSTEM_ACTIONS, HelperFileNotFound, ValidationSystem

VALIDATION_CHECKER = "validationChecker"
FILE_ANALYZER = "fileAnalyzer"
VALIDATION_SYSTEM = "validationSystem"


class ToolArgumentError(ValueError):
    """Request arguments did not match the tool's schema."""


def text_response(text: str) -> dict[str, Any]:
    return {"content": [{"type": "text", "text": text}]}


def _optional(arguments: dict[str, Any], key: str, expected: type, default: Any) -> Any:
    value = arguments.get(key)
    if value is None:
        return default
    if not isinstance(value, expected):
        raise ToolArgumentError(f"'{key}' must be of type {expected.__name__}")
    return value


def _checked_arguments(arguments: Any, allowed: tuple[str, ...]) -> dict[str, Any]:
    if arguments is None:
        return {}
    if not isinstance(arguments, dict):
        raise ToolArgumentError("arguments must be an object")
    unknown = sorted(set(arguments) - set(allowed))
    if unknown:
        raise ToolArgumentError(f"unknown argument(s): {', '.join(unknown)}")
    return arguments


def run_validation_checker_tool(
    arguments: dict[str, Any] | None,
    project_root: Path | str,
    scanner: ComplianceScanner | None = None,
    cancel_event: threading.Event | None = None,
) -> dict[str, Any]:
    """Scan ``target`` for validation rule violations and return the report as JSON."""
    try:
        arguments = _checked_arguments(arguments, ("target", "fix"))
        target = _optional(arguments, "target", str, None)
        fix = _optional(arguments, "fix", bool, False)
    except ToolArgumentError as e:
        return text_response(f"Invalid arguments for {VALIDATION_CHECKER}: {e}")

    try:
        scanner = scanner or ComplianceScanner.from_config(project_root)
        result = scanner.scan(target=target, fix=fix, cancel_event=cancel_event)
        if not result.ok:
            return text_response(result.error.message)
        return text_response(to_json(result.report))
    except Exception as e:
        logger.opt(exception=True).error(f"{VALIDATION_CHECKER} failed: {e}")
        return text_response(f"Error scanning for validation issues: {e}")


def run_file_analyzer_tool(
    arguments: dict[str, Any] | None,
    project_root: Path | str,
) -> dict[str, Any]:
    """Analyze one file's structure and helper-service usage."""
    try:
        arguments = _checked_arguments(arguments, ("filePath", "analysis"))
        file_path = arguments.get("filePath")
        if not isinstance(file_path, str) or not file_path:
            raise ToolArgumentError("'filePath' is required and must be a string")
        analysis = _optional(arguments, "analysis", str, "basic")
        if analysis not in ANALYSIS_MODES:
            raise ToolArgumentError(f"'analysis' must be one of: {', '.join(ANALYSIS_MODES)}")
    except ToolArgumentError as e:
        return text_response(f"Invalid arguments for {FILE_ANALYZER}: {e}")

    full_path = resolve_within(project_root, file_path)
    if full_path is None or not full_path.is_file():
        return text_response(f"File not found: {file_path}")

    try:
        content = full_path.read_text(encoding="utf-8")
        services = ServiceConfig.from_config(load_runtime_config(project_root))
        result = FileAnalyzer(services).analyze(file_path, content, analysis)
    except (OSError, UnicodeDecodeError, ValueError) as e:
        logger.warning(f"{FILE_ANALYZER} failed for {file_path}: {e}")
        return text_response(f"Error analyzing file {file_path}: {e}")

    return text_response(json.dumps(result, indent=2))


def run_validation_system_tool(
    arguments: dict[str, Any] | None,
    project_root: Path | str,
) -> dict[str, Any]:
    """Describe the helper module: which services exist and what the sub-packages hold."""
    try:
        arguments = _checked_arguments(arguments, ("action", "specificFile"))
        action = _optional(arguments, "action", str, "overview")
        specific_file = _optional(arguments, "specificFile", str, None)
    except ToolArgumentError as e:
        return text_response(f"Invalid arguments for {VALIDATION_SYSTEM}: {e}")

    try:
        services = ServiceConfig.from_config(load_runtime_config(project_root))
        system = ValidationSystem(project_root, services)

        if specific_file:
            try:
                content = system.specific_file(specific_file)
            except HelperFileNotFound:
                return text_response(f"File not found: {specific_file}")
            return text_response(f"{specific_file} content:\n\n{content}")

        if action not in SYSTEM_ACTIONS:
            return text_response(
                f"Invalid action: {action}. Valid actions are: {', '.join(SYSTEM_ACTIONS)}."
            )
        return text_response(json.dumps(system.run(action), indent=2))
    except (OSError, UnicodeDecodeError, ValueError) as e:
        logger.warning(f"{VALIDATION_SYSTEM} failed: {e}")
        return text_response(f"Error analyzing validation system: {e}")


@dataclass(frozen=True)
class Tool:
    name: str
    description: str
    handler: Callable[[dict[str, Any] | None, Path | str], dict[str, Any]]
    arguments: dict[str, str] = field(default_factory=dict)

    def describe(self) -> dict[str, Any]:
        return {"name": self.name, "description": self.description, "arguments": self.arguments}


TOOLS: dict[str, Tool] = {
    VALIDATION_CHECKER: Tool(
        name=VALIDATION_CHECKER,
        description="Scans components for validation rule compliance and suggests improvements.",
        handler=run_validation_checker_tool,
        arguments={
            "target": "optional string - directory or file to scan (default: src/components)",
            "fix": "optional boolean - request fix suggestions (advisory, nothing is modified)",
        },
    ),
    FILE_ANALYZER: Tool(
        name=FILE_ANALYZER,
        description=(
            "Analyzes specific files in the project to extract insights about their "
            "structure and patterns."
        ),
        handler=run_file_analyzer_tool,
        arguments={
            "filePath": "string - file to analyze, relative to the project root",
            "analysis": f"optional - one of {', '.join(ANALYSIS_MODES)} (default: basic)",
        },
    ),
    VALIDATION_SYSTEM: Tool(
        name=VALIDATION_SYSTEM,
        description=(
            "Analyzes the validation and formatting system, providing details about its "
            "structure and capabilities."
        ),
        handler=run_validation_system_tool,
        arguments={
            "action": f"optional - one of {', '.join(SYSTEM_ACTIONS)} (default: overview)",
            "specificFile": "optional string - file under the helper directory to print",
        },
    ),
}


def list_tools() -> list[dict[str, Any]]:
    return [tool.describe() for tool in TOOLS.values()]


def invoke_tool(
    name: str, arguments: dict[str, Any] | None, project_root: Path | str
) -> dict[str, Any]:
    """Route a named tool call to its handler."""
    tool = TOOLS.get(name)
    if tool is None:
        return text_response(f"Unknown tool: {name}")
    return tool.handler(arguments, project_root)
