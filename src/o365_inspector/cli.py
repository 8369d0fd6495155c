"""Click CLI interface for the Office 365 inspector."""

from __future__ import annotations

import sys

import click
import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from o365_inspector import __version__
from o365_inspector.config import Config
from o365_inspector.inspector import InstallInspector
from o365_inspector.log import configure_logging, status_console
from o365_inspector.models import RESULT_COLUMNS
from o365_inspector.platform import get_hostname
from o365_inspector.reporters import console_reporter, csv_reporter, html_reporter, json_reporter

console = Console()

_FILE_REPORTERS = {
    "json": json_reporter,
    "csv": csv_reporter,
    "html": html_reporter,
}


def _load_config(config_path: str | None) -> Config:
    try:
        if config_path:
            return Config.from_yaml(config_path)
        return Config.from_defaults()
    except (OSError, yaml.YAMLError) as exc:
        status_console.print(f"[bold red]ERROR: cannot load configuration: {exc}[/bold red]")
        sys.exit(1)


def _read_hosts(hosts: tuple[str, ...], hosts_file) -> list[str]:
    targets = list(hosts)
    if hosts_file is not None:
        for line in hosts_file:
            line = line.split("#", 1)[0].strip()
            if line:
                targets.append(line)
    return targets


@click.group()
@click.version_option(version=__version__, prog_name="o365-inspector")
def main():
    """Office 365 installation and update baseline inspector."""


@main.command()
@click.argument("hosts", nargs=-1)
@click.option("--hosts-file", type=click.File("r"), default=None,
              help="File with one host name per line ('-' for stdin)")
@click.option("--config", "config_path", default=None, type=click.Path(exists=True, dir_okay=False),
              help="Path to config YAML")
@click.option("--format", "formats", default=None, help="Output formats: console,json,csv,html (default: console)")
@click.option("--output-dir", default=None, help="Output directory for report files (default: ./reports)")
@click.option("--reference-url", default=None, help="URL of the update channel reference page")
@click.option("--verbose", is_flag=True, help="Verbose diagnostic output")
def inspect(
    hosts: tuple[str, ...],
    hosts_file,
    config_path: str | None,
    formats: str | None,
    output_dir: str | None,
    reference_url: str | None,
    verbose: bool,
):
    """Inspect Office 365 on HOSTS (default: this computer).

    Exits with status 2 when any host fails the baseline or is skipped.
    """
    config = _load_config(config_path)
    config.apply_overrides(
        formats=formats,
        output_dir=output_dir,
        reference_url=reference_url,
        verbose=verbose,
    )
    configure_logging(config.verbose)

    targets = _read_hosts(hosts, hosts_file) or [get_hostname()]

    inspector = InstallInspector(config)
    report = inspector.run(targets, show_progress=status_console.is_terminal)

    output_files: list[str] = []
    for fmt in config.output_formats:
        if fmt == "console":
            console_reporter.generate(report, config.output_directory, console=console)
        elif fmt in _FILE_REPORTERS:
            path = _FILE_REPORTERS[fmt].generate(report, config.output_directory)
            output_files.append(path)

    if output_files:
        status_console.print("[bold]Reports written:[/bold]")
        for path in output_files:
            status_console.print(f"  {path}")

    if report.has_failures():
        sys.exit(2)


@main.command()
@click.option("--config", "config_path", default=None, type=click.Path(exists=True, dir_okay=False),
              help="Path to config YAML")
def baseline(config_path: str | None):
    """Show the baseline hosts are compared against."""
    config = _load_config(config_path)
    columns = {attr: column for column, attr in RESULT_COLUMNS.items()}

    table = Table(title="Office 365 Baseline")
    table.add_column("Field", style="cyan")
    table.add_column("Expected")
    for name, value in config.baseline.expected_values().items():
        table.add_row(columns.get(name, name), escape(value))

    console.print(table)
    console.print(f"Channel reference: {config.reference_url}")
