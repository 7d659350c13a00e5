"""patternaudit CLI - main entry point and command registration hub."""
# ruff: noqa: E402 - commands are imported after the cli group is defined

import click

from patternaudit import __version__
from patternaudit.utils.constants import PAUDIT_DIR
from patternaudit.utils.logging import configure_file_logging


@click.group()
@click.version_option(version=__version__, prog_name="paudit")
@click.help_option("-h", "--help")
@click.option(
    "--persist-logs",
    is_flag=True,
    help="Also write logs to .paudit/patternaudit.log (rotated at 10 MB)",
)
def cli(persist_logs):
    """patternaudit - validation/formatting compliance checks for JS/TS sources

    \b
    QUICK START:
      paudit check                       # Scan src/components
      paudit check src/forms --fix       # Scan a directory, include fix hints
      paudit analyze src/App.tsx         # Structural facts for one file
      paudit rules                       # List active detectors
    """
    if persist_logs:
        configure_file_logging(PAUDIT_DIR)


from patternaudit.commands.analyze import analyze
from patternaudit.commands.check import check
from patternaudit.commands.rules import rules_command

cli.add_command(check)
cli.add_command(analyze)
cli.add_command(rules_command)


def main():
    """Main entry point for console script."""
    cli()


if __name__ == "__main__":
    main()
