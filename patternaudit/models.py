"""Core value types shared by the extractor, rule engine and reporter."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Severity(Enum):
    """Remediation priority of a detector."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @classmethod
    def parse(cls, value: "Severity | str") -> "Severity":
        """Accept either an enum member or its string value."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower().strip())
        except ValueError as e:
            raise ValueError(f"Unknown severity '{value}' (expected high, medium or low)") from e


SEVERITY_ORDER = (Severity.HIGH, Severity.MEDIUM, Severity.LOW)


class ScanErrorKind(Enum):
    """Error taxonomy surfaced by a scan."""

    TARGET_NOT_FOUND = "TargetNotFound"
    FILE_READ_ERROR = "FileReadError"
    DETECTOR_EVALUATION_ERROR = "DetectorEvaluationError"


@dataclass(frozen=True)
class ScanError:
    """A recoverable or fatal scan error, carried by value instead of raised."""

    kind: ScanErrorKind
    message: str
    path: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result = {"kind": self.kind.value, "message": self.message}
        if self.path is not None:
            result["path"] = self.path
        return result


@dataclass(frozen=True)
class ImportDeclaration:
    """One import statement: source module and the names it brings in."""

    source: str
    specifiers: tuple[str, ...]

    def to_dict(self) -> dict[str, Any]:
        return {"source": self.source, "specifiers": list(self.specifiers)}


@dataclass(frozen=True)
class StructuralFacts:
    """Lightweight structural facts extracted from one file's raw text."""

    imports: tuple[ImportDeclaration, ...] = ()
    exports: tuple[str, ...] = ()
    default_export: str | None = None
    references_helper_module: bool = False
    uses_validation_service: bool = False
    uses_formatter_service: bool = False
    helper_imports: tuple[str, ...] = ()
    validation_methods: tuple[str, ...] = ()
    formatter_methods: tuple[str, ...] = ()


@dataclass(frozen=True)
class Issue:
    """A single detector hit, reported against one source line."""

    detector_id: str
    severity: Severity
    line: int
    content: str
    message: str
    suggestion: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "detectorId": self.detector_id,
            "severity": self.severity.value,
            "line": self.line,
            "content": self.content,
            "message": self.message,
            "suggestion": self.suggestion,
        }


@dataclass(frozen=True)
class DetectorFailure:
    """A detector that could not be evaluated against a file and was skipped."""

    detector_id: str
    error: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": ScanErrorKind.DETECTOR_EVALUATION_ERROR.value,
            "detectorId": self.detector_id,
            "error": self.error,
        }


@dataclass(frozen=True)
class FileReport:
    """Result of structural extraction plus rule evaluation for one file.

    A report with ``error`` set describes a file that could not be read; it
    carries no facts and no issues.
    """

    path: str
    facts: StructuralFacts = field(default_factory=StructuralFacts)
    issues: tuple[Issue, ...] = ()
    detector_failures: tuple[DetectorFailure, ...] = ()
    error: str | None = None

    @classmethod
    def read_failure(cls, path: str, message: str) -> "FileReport":
        return cls(path=path, error=message)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def issue_count(self) -> int:
        return len(self.issues)

    @property
    def uses_validation_service(self) -> bool:
        return self.facts.uses_validation_service

    @property
    def uses_formatter_service(self) -> bool:
        return self.facts.uses_formatter_service

    def scan_error(self) -> ScanError | None:
        if self.error is None:
            return None
        return ScanError(ScanErrorKind.FILE_READ_ERROR, self.error, self.path)


@dataclass(frozen=True)
class Offender:
    path: str
    issue_count: int

    def to_dict(self) -> dict[str, Any]:
        return {"path": self.path, "issueCount": self.issue_count}


@dataclass(frozen=True)
class FileDetail:
    """Per-file entry of a project report (files with at least one issue)."""

    path: str
    uses_validation_service: bool
    uses_formatter_service: bool
    issues: tuple[Issue, ...]
    suggested_fix: str | None = None
    detector_failures: tuple[DetectorFailure, ...] = ()

    @property
    def issue_count(self) -> int:
        return len(self.issues)

    def to_dict(self) -> dict[str, Any]:
        result = {
            "path": self.path,
            "usesValidationService": self.uses_validation_service,
            "usesFormatterService": self.uses_formatter_service,
            "issueCount": self.issue_count,
            "issues": [issue.to_dict() for issue in self.issues],
        }
        if self.suggested_fix is not None:
            result["suggestedFix"] = self.suggested_fix
        if self.detector_failures:
            result["detectorFailures"] = [f.to_dict() for f in self.detector_failures]
        return result


@dataclass(frozen=True)
class ProjectReport:
    """Aggregated, deterministic result of one scan."""

    files_scanned: int
    files_with_issues: tuple[FileDetail, ...]
    severity_counts: dict[str, int]
    top_offenders: tuple[Offender, ...]
    errors: tuple[ScanError, ...] = ()
    complete: bool = True
    incomplete_reason: str | None = None
    files_not_scanned: tuple[str, ...] = ()
    fix_requested: bool = False

    @property
    def total_issues(self) -> int:
        return sum(detail.issue_count for detail in self.files_with_issues)

    def to_dict(self) -> dict[str, Any]:
        result = {
            "filesScanned": self.files_scanned,
            "filesWithIssues": len(self.files_with_issues),
            "totalIssues": self.total_issues,
            "severityCounts": dict(self.severity_counts),
            "topOffenders": [offender.to_dict() for offender in self.top_offenders],
            "detail": [detail.to_dict() for detail in self.files_with_issues],
            "errors": [{"path": e.path, "error": e.message} for e in self.errors],
            "complete": self.complete,
        }
        if not self.complete:
            result["incompleteReason"] = self.incomplete_reason
            result["filesNotScanned"] = list(self.files_not_scanned)
        if self.fix_requested:
            result["fixRequested"] = True
            result["fixNote"] = (
                "Fixes are advisory: apply each suggestion and suggestedFix manually. "
                "No files were modified."
            )
        return result


@dataclass(frozen=True)
class ScanResult:
    """Either a report or the error that aborted the scan."""

    report: ProjectReport | None = None
    error: ScanError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
