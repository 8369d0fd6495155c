"""CSV result table output."""

from __future__ import annotations

import csv
from pathlib import Path

from o365_inspector.models import RESULT_COLUMNS, InspectionReport

# Skipped hosts are appended with this extra column filled in
ERROR_COLUMN = "Error"


def generate(report: InspectionReport, output_dir: str) -> str:
    """Write one CSV row per host.

    Inspected hosts carry the nine result columns. Skipped hosts only
    carry Computer and Error, so they stay visible in spreadsheets.

    Returns:
        Path to the generated CSV file.
    """
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)

    timestamp = report.scan_start.strftime("%Y%m%d_%H%M%S")
    filepath = out / f"o365_inspection_{timestamp}.csv"

    fieldnames = list(RESULT_COLUMNS) + [ERROR_COLUMN]
    with open(filepath, "w", newline="", encoding="utf-8-sig") as fh:
        writer = csv.DictWriter(fh, fieldnames=fieldnames)
        writer.writeheader()
        for result in report.results:
            row = result.to_row()
            row[ERROR_COLUMN] = result.error.value if result.error else ""
            writer.writerow(row)
        for outcome in report.skipped:
            writer.writerow({
                "Computer": outcome.host,
                ERROR_COLUMN: outcome.error.value if outcome.error else "",
            })

    return str(filepath)
