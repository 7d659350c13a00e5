"""Analyze the structure of a single file."""

import json
from pathlib import Path

import click

from patternaudit.file_analyzer import ANALYSIS_MODES
from patternaudit.utils.error_handler import handle_exceptions


@click.command("analyze")
@click.argument("file_path")
@click.option("--project-root", default=".", help="Project root that FILE_PATH is relative to")
@click.option(
    "--analysis",
    type=click.Choice(ANALYSIS_MODES),
    default="basic",
    show_default=True,
    help="Which facts to report",
)
@handle_exceptions
def analyze(file_path, project_root, analysis):
    """Report imports, exports and helper-service usage for one file.

    \b
    Analysis modes:
      basic         preview, extension, imports, React component info
      validation    ValidationService / FormatterService usage
      imports       import declarations
      exports       named and default exports
      dependencies  imports plus validation usage
    """
    from patternaudit.tools import run_file_analyzer_tool

    response = run_file_analyzer_tool(
        {"filePath": file_path, "analysis": analysis}, Path(project_root).resolve()
    )
    text = response["content"][0]["text"]

    try:
        json.loads(text)
    except json.JSONDecodeError:
        raise click.ClickException(text) from None
    click.echo(text)
