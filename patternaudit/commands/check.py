"""Scan a source tree for validation/formatting anti-patterns."""

import sys
from pathlib import Path

import click

from patternaudit.utils.error_handler import handle_exceptions
from patternaudit.utils.exit_codes import ExitCodes


@click.command("check")
@click.argument("target", required=False)
@click.option("--project-root", default=".", help="Project root that TARGET is relative to")
@click.option("--fix", is_flag=True, help="Include advisory fix notes (no file is modified)")
@click.option("--timeout", type=float, help="Scan deadline in seconds (0 disables)")
@click.option("--workers", type=int, help="Maximum parallel file workers")
@click.option("--json-out", help="Write the full JSON report to this path")
@click.option("--json", "as_json", is_flag=True, help="Print the JSON report instead of a table")
@click.option("--max-rows", default=50, type=int, help="Maximum issue rows to display")
@handle_exceptions
def check(target, project_root, fix, timeout, workers, json_out, as_json, max_rows):
    """Check components for validation rule compliance.

    Flags ad hoc validation and formatting code that should go through the
    centralized ValidationService / FormatterService helpers.

    \b
    Detectors (in evaluation order):
      field-validation      medium  field name next to a validation keyword
      regex-test            high    direct regex .test() call
      regex-match           high    direct regex .match() call
      regexp-constructor    high    new RegExp(...)
      string-manipulation   low     trim/replace/substring and friends
      custom-validator      medium  locally defined validate*/isValid* function

    \b
    Examples:
      paudit check                          # default target (src/components)
      paudit check src/forms/Login.tsx      # single file
      paudit check --json-out report.json   # save the full report

    \b
    Exit codes:
      0  no high severity issues
      1  high severity issues found
      3  target not found or scan incomplete
    """
    from patternaudit.config_runtime import load_runtime_config
    from patternaudit.reporter import render_summary, to_json
    from patternaudit.scanner import ComplianceScanner
    from patternaudit.ui import console, print_error
    from patternaudit.utils.helpers import save_json_file

    root = Path(project_root).resolve()
    cfg = load_runtime_config(root)
    if workers:
        cfg["scan"]["max_workers"] = workers

    scanner = ComplianceScanner.from_config(root, cfg)
    result = scanner.scan(target=target, fix=fix, timeout=timeout)

    if not result.ok:
        print_error(result.error.message)
        sys.exit(ExitCodes.TASK_INCOMPLETE)

    report = result.report
    if json_out:
        save_json_file(report.to_dict(), json_out)
        if not as_json:
            console.print(f"[success]Report saved to {json_out}[/success]", highlight=False)

    if as_json:
        click.echo(to_json(report))
    else:
        render_summary(report, console, max_rows=max_rows)

    exit_code = ExitCodes.SUCCESS
    if not report.complete:
        exit_code = ExitCodes.TASK_INCOMPLETE
    elif report.severity_counts.get("high", 0):
        exit_code = ExitCodes.HIGH_SEVERITY

    if exit_code and not as_json:
        console.print(f"[dim]{ExitCodes.get_description(exit_code)}[/dim]", highlight=False)
    sys.exit(exit_code)
