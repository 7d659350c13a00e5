"""Single-file structural analysis (imports, exports, helper-service usage)."""

import re
from pathlib import Path
from typing import Any

from patternaudit.config_runtime import ServiceConfig
from patternaudit.extractor import RegexStructuralExtractor, StructuralExtractor
from patternaudit.models import StructuralFacts
from patternaudit.utils.constants import PREVIEW_LINES

ANALYSIS_MODES = ("basic", "validation", "imports", "exports", "dependencies")

INLINE_VALIDATION = (re.compile(r"\.test\("), re.compile(r"\.match\("), re.compile(r"\.replace\("))
INLINE_VALIDATION_NOTE = (
    "Possibly contains inline validation/formatting that could be moved to centralized services"
)

COMPONENT_FILE_NAME = re.compile(r"^([A-Z][a-zA-Z0-9]*)\.tsx?$")
PROPS_INTERFACE = re.compile(r"interface\s+([A-Z][a-zA-Z0-9]*Props)")


def validation_summary(content: str, facts: StructuralFacts) -> dict[str, Any]:
    potential_issues = []
    if facts.helper_imports and any(p.search(content) for p in INLINE_VALIDATION):
        potential_issues.append(INLINE_VALIDATION_NOTE)

    return {
        "usesValidationService": facts.uses_validation_service,
        "usesFormatterService": facts.uses_formatter_service,
        "validationImports": list(facts.helper_imports),
        "validationMethods": list(facts.validation_methods),
        "formatterMethods": list(facts.formatter_methods),
        "potentialIssues": potential_issues,
    }


def imports_summary(facts: StructuralFacts) -> dict[str, Any]:
    return {"imports": [declaration.to_dict() for declaration in facts.imports]}


def exports_summary(facts: StructuralFacts) -> dict[str, Any]:
    return {"exports": list(facts.exports), "defaultExport": facts.default_export}


def is_react_module(content: str) -> bool:
    return "import React" in content or "from 'react'" in content or 'from "react"' in content


class FileAnalyzer:
    """Builds the fileAnalyzer payload for one file's text."""

    def __init__(
        self,
        services: ServiceConfig | None = None,
        extractor: StructuralExtractor | None = None,
    ):
        self.services = services or ServiceConfig()
        self.extractor = extractor or RegexStructuralExtractor(self.services)

    def analyze(self, file_path: str, content: str, analysis: str = "basic") -> dict[str, Any]:
        if analysis not in ANALYSIS_MODES:
            raise ValueError(
                f"Unknown analysis '{analysis}' (expected one of: {', '.join(ANALYSIS_MODES)})"
            )

        facts = self.extractor.extract(content)
        lines = content.split("\n")
        result: dict[str, Any] = {
            "filePath": file_path,
            "size": len(content),
            "lines": len(lines),
        }

        if analysis == "validation":
            result["validation"] = validation_summary(content, facts)
        elif analysis == "imports":
            result["imports"] = imports_summary(facts)
        elif analysis == "exports":
            result["exports"] = exports_summary(facts)
        elif analysis == "dependencies":
            result["imports"] = imports_summary(facts)
            result["validation"] = validation_summary(content, facts)
        else:
            result["preview"] = "\n".join(lines[:PREVIEW_LINES])
            result["extension"] = Path(file_path).suffix
            result["imports"] = imports_summary(facts)
            result.update(self._component_info(file_path, content))

            services = self.services
            if services.validation_service in content or services.formatter_service in content:
                result["usesValidation"] = True
                result["validation"] = validation_summary(content, facts)

        return result

    @staticmethod
    def _component_info(file_path: str, content: str) -> dict[str, Any]:
        if not is_react_module(content):
            return {}
        name_match = COMPONENT_FILE_NAME.match(Path(file_path).name)
        if not name_match:
            return {}

        info: dict[str, Any] = {"isReactComponent": True, "componentName": name_match.group(1)}
        props_match = PROPS_INTERFACE.search(content)
        if props_match:
            info["propsInterface"] = props_match.group(1)
        return info
