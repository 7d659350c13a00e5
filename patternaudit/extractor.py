"""Structural extraction of import/export facts and helper-service usage.

``StructuralExtractor`` is the contract; ``RegexStructuralExtractor`` is the
shipped pattern-based implementation. A parser-backed extractor can replace it
as long as it returns the same ``StructuralFacts``.
"""

import re
from abc import ABC, abstractmethod

from patternaudit.config_runtime import ServiceConfig
from patternaudit.models import ImportDeclaration, StructuralFacts

GROUPED_IMPORT = re.compile(r"import\s+{([^}]+)}\s+from\s+['\"]([^'\"]+)['\"]")
DEFAULT_IMPORT = re.compile(r"import\s+(\w+)\s+from\s+['\"]([^'\"]+)['\"]")

NAMED_EXPORT = re.compile(
    r"export\s+(?:const|function|class|let|var|type|interface|enum)\s+(\w+)"
)
GROUPED_EXPORT = re.compile(r"export\s+{([^}]+)}")
DEFAULT_EXPORT = re.compile(
    r"export\s+default\s+(?:(?:async\s+)?(?:function|class)\b\s*)?"
    r"(?:(?!(?:extends|implements)\b)(\w+))?"
)


def _split_names(group: str) -> list[str]:
    return [name.strip() for name in group.split(",") if name.strip()]


def _distinct(values) -> tuple[str, ...]:
    return tuple(dict.fromkeys(values))


class StructuralExtractor(ABC):
    """Turns raw file text into ``StructuralFacts``. Never raises on bad input."""

    def __init__(self, services: ServiceConfig | None = None):
        self.services = services or ServiceConfig()

    @abstractmethod
    def extract(self, content: str) -> StructuralFacts:
        """Extract all structural facts from ``content``."""
        pass


class RegexStructuralExtractor(StructuralExtractor):
    """Pattern-based extractor for JavaScript/TypeScript sources."""

    def extract(self, content: str) -> StructuralFacts:
        usage = self.service_usage(content)
        default_export = self.default_export(content)
        return StructuralFacts(
            imports=tuple(self.imports(content)),
            exports=tuple(self.exports(content)),
            default_export=default_export,
            **usage,
        )

    def imports(self, content: str) -> list[ImportDeclaration]:
        """Grouped named imports first, then single default imports."""
        declarations = []

        for match in GROUPED_IMPORT.finditer(content):
            specifiers = tuple(_split_names(match.group(1)))
            declarations.append(ImportDeclaration(source=match.group(2), specifiers=specifiers))

        for match in DEFAULT_IMPORT.finditer(content):
            specifiers = (f"{match.group(1)} (default)",)
            declarations.append(ImportDeclaration(source=match.group(2), specifiers=specifiers))

        return declarations

    def exports(self, content: str) -> list[str]:
        """Named declaration exports, then grouped re-exports. Duplicates are kept."""
        names = [match.group(1) for match in NAMED_EXPORT.finditer(content)]
        for match in GROUPED_EXPORT.finditer(content):
            names.extend(_split_names(match.group(1)))
        return names

    def default_export(self, content: str) -> str | None:
        match = DEFAULT_EXPORT.search(content)
        if not match:
            return None
        return match.group(1) or "anonymous"

    def service_usage(self, content: str) -> dict:
        """Detect helper-service usage.

        A service counts as used only when the helper module is imported AND
        the service token appears somewhere in the text. Without the import,
        a bare token does not count.
        """
        services = self.services
        helper_imports = tuple(m.group(0) for m in services.import_pattern.finditer(content))

        uses_validation = False
        uses_formatter = False
        validation_methods: tuple[str, ...] = ()
        formatter_methods: tuple[str, ...] = ()

        if helper_imports:
            if services.validation_service in content:
                uses_validation = True
                validation_methods = self._methods(content, services.validation_service)

            if services.formatter_service in content:
                uses_formatter = True
                formatter_methods = self._methods(content, services.formatter_service)

        return {
            "references_helper_module": services.helper_module in content,
            "uses_validation_service": uses_validation,
            "uses_formatter_service": uses_formatter,
            "helper_imports": helper_imports,
            "validation_methods": validation_methods,
            "formatter_methods": formatter_methods,
        }

    @staticmethod
    def _methods(content: str, service: str) -> tuple[str, ...]:
        pattern = re.compile(re.escape(service) + r"\.(\w+)")
        return _distinct(m.group(1) for m in pattern.finditer(content))
