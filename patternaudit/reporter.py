"""Aggregation of per-file results into a deterministic project report."""

import json
from collections.abc import Sequence
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from patternaudit.config_runtime import ServiceConfig
from patternaudit.models import (
    SEVERITY_ORDER,
    FileDetail,
    FileReport,
    Offender,
    ProjectReport,
    ScanError,
)
from patternaudit.utils.constants import TOP_OFFENDERS_LIMIT
from patternaudit.utils.helpers import relative_posix


def aggregate(
    project_root: Path | str,
    files: Sequence[Path],
    reports: Sequence[FileReport | None],
    services: ServiceConfig | None = None,
    top_offenders: int = TOP_OFFENDERS_LIMIT,
    incomplete_reason: str | None = None,
    fix_requested: bool = False,
) -> ProjectReport:
    """Merge FileReports into a ProjectReport.

    ``reports`` is aligned with ``files``; a ``None`` slot is a file the scan
    never got to. Ordering depends only on the input order, never on when a
    report was produced.
    """
    if len(files) != len(reports):
        raise ValueError(f"Got {len(reports)} reports for {len(files)} files")

    services = services or ServiceConfig()
    details: list[FileDetail] = []
    errors: list[ScanError] = []
    not_scanned: list[str] = []
    scanned = 0

    for file_path, report in zip(files, reports):
        rel_path = relative_posix(file_path, project_root)

        if report is None:
            not_scanned.append(rel_path)
            continue

        scanned += 1

        if not report.ok:
            errors.append(ScanError(report.scan_error().kind, report.error, rel_path))
            continue

        if report.issue_count == 0:
            continue

        suggested_fix = None
        if not report.facts.references_helper_module:
            suggested_fix = services.suggested_import

        details.append(
            FileDetail(
                path=rel_path,
                uses_validation_service=report.uses_validation_service,
                uses_formatter_service=report.uses_formatter_service,
                issues=report.issues,
                suggested_fix=suggested_fix,
                detector_failures=report.detector_failures,
            )
        )

    # sorted() is stable: ties keep scan order
    details = sorted(details, key=lambda d: -d.issue_count)

    severity_counts = {severity.value: 0 for severity in SEVERITY_ORDER}
    for detail in details:
        for issue in detail.issues:
            severity_counts[issue.severity.value] += 1

    offenders = tuple(Offender(d.path, d.issue_count) for d in details[:top_offenders])

    complete = incomplete_reason is None and not not_scanned
    return ProjectReport(
        files_scanned=scanned,
        files_with_issues=tuple(details),
        severity_counts=severity_counts,
        top_offenders=offenders,
        errors=tuple(errors),
        complete=complete,
        incomplete_reason=None if complete else (incomplete_reason or "incomplete"),
        files_not_scanned=tuple(not_scanned),
        fix_requested=fix_requested,
    )


def to_json(report: ProjectReport) -> str:
    """Canonical JSON: 2-space indent, sorted keys, stable for an unchanged tree."""
    return json.dumps(report.to_dict(), indent=2, sort_keys=True)


def render_summary(report: ProjectReport, console: Console, max_rows: int = 50) -> None:
    """Print a human-readable summary and the worst files as a Rich table."""
    console.print(
        f"Files scanned: {report.files_scanned}  "
        f"Files with issues: {len(report.files_with_issues)}  "
        f"Total issues: {report.total_issues}",
        highlight=False,
    )
    console.print(
        "  ".join(
            f"[{name}]{name.upper()}[/{name}]: {count}"
            for name, count in report.severity_counts.items()
        )
    )

    if not report.complete:
        console.print(
            f"[warning]Scan incomplete ({report.incomplete_reason}): "
            f"{len(report.files_not_scanned)} files not scanned[/warning]"
        )

    for error in report.errors:
        console.print(
            f"[error]{escape(error.path)}: {escape(error.message)}[/error]", highlight=False
        )

    if not report.files_with_issues:
        console.print("[success]No issues found.[/success]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("FILE", style="path")
    table.add_column("LINE", justify="right")
    table.add_column("SEVERITY")
    table.add_column("DETECTOR", style="dim")
    table.add_column("MESSAGE")

    rows = 0
    total = report.total_issues
    for detail in report.files_with_issues:
        for issue in detail.issues:
            if rows >= max_rows:
                break
            severity = issue.severity.value
            table.add_row(
                escape(detail.path),
                str(issue.line),
                f"[{severity}]{severity.upper()}[/{severity}]",
                issue.detector_id,
                escape(issue.message),
            )
            rows += 1

    console.print(table)
    if total > rows:
        console.print(f"... and {total - rows} more issues (use --json-out for the full report)")
