"""Rich console report output."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from o365_inspector.models import FAILED_TO_FETCH, NOT_SET, RESULT_COLUMNS, UNDETERMINED_CHANNEL, InspectionReport

_DIM_VALUES = {NOT_SET, FAILED_TO_FETCH, UNDETERMINED_CHANNEL}


def _cell(value: object, mismatched: bool) -> str:
    text = escape(str(value))
    if mismatched:
        return f"[red]{text}[/red]"
    if text in _DIM_VALUES:
        return f"[dim]{text}[/dim]"
    return text


def generate(report: InspectionReport, output_dir: str, console: Console | None = None) -> str:
    """Display the report on the console using Rich.

    Args:
        report: The inspection report to display.
        output_dir: Unused for console output, kept for interface consistency.
        console: Console to print to (default: stdout).

    Returns:
        Empty string (console output has no file path).
    """
    con = console or Console()

    results_table = Table(title="Office 365 Baseline Check")
    for column in RESULT_COLUMNS:
        results_table.add_column(column, no_wrap=column in ("Computer", "InstalledVersion"))

    for result in report.results:
        mismatched = {m.field for m in result.mismatches}
        row = result.to_row()
        passed = row.pop("BaselineCheckPassed")
        cells = [_cell(value, column in mismatched) for column, value in row.items()]
        cells.insert(1, "[green]True[/green]" if passed else "[bold red]False[/bold red]")
        results_table.add_row(*cells)

    con.print(results_table)

    if report.skipped:
        skipped_table = Table(title="Skipped Hosts")
        skipped_table.add_column("Computer", style="cyan")
        skipped_table.add_column("Reason", width=20)
        skipped_table.add_column("Detail")
        for outcome in report.skipped:
            skipped_table.add_row(
                escape(outcome.host),
                outcome.error.value if outcome.error else "",
                escape(outcome.message),
            )
        con.print()
        con.print(skipped_table)

    s = report.summary or report.compute_summary()
    con.print()
    con.print(
        f"Hosts: {s['hosts']}  Inspected: {s['inspected']}  "
        f"[green]Passed: {s['passed']}[/green]  [red]Failed: {s['failed']}[/red]  "
        f"[yellow]Skipped: {s['skipped']}[/yellow]"
    )
    return ""
