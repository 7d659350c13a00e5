"""List the active detector set."""

from pathlib import Path

import click
from rich.table import Table

from patternaudit.utils.error_handler import handle_exceptions


@click.command("rules")
@click.option("--project-root", default=".", help="Project root holding .paudit/config.json")
@handle_exceptions
def rules_command(project_root):
    """Show the detectors a scan will run, in evaluation order."""
    from patternaudit.config_runtime import load_runtime_config
    from patternaudit.scanner import ComplianceScanner
    from patternaudit.ui import console, print_header

    root = Path(project_root).resolve()
    cfg = load_runtime_config(root)
    scanner = ComplianceScanner.from_config(root, cfg)

    table = Table(show_header=True, header_style="bold")
    table.add_column("#", justify="right")
    table.add_column("ID", style="cmd")
    table.add_column("SEVERITY")
    table.add_column("MESSAGE")

    for position, detector in enumerate(scanner.detectors, start=1):
        severity = detector.severity.value
        table.add_row(
            str(position),
            detector.id,
            f"[{severity}]{severity.upper()}[/{severity}]",
            detector.render_message(scanner.services),
        )

    print_header(f"Active detectors ({len(scanner.detectors)})")
    console.print(table)
