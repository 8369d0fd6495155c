"""HTML report output via Jinja2 templating."""

from __future__ import annotations

import os
from importlib import resources
from pathlib import Path

from jinja2 import BaseLoader, Environment

from o365_inspector.models import RESULT_COLUMNS, InspectionReport


def _load_template() -> str:
    """Load the HTML template from package data."""
    ref = resources.files("o365_inspector.templates").joinpath("report.html.j2")
    return ref.read_text(encoding="utf-8")


def render(report: InspectionReport) -> str:
    """Render the report to an HTML string."""
    env = Environment(loader=BaseLoader(), autoescape=True)
    template = env.from_string(_load_template())

    summary = report.summary or report.compute_summary()
    rows = []
    for result in report.results:
        rows.append({
            "cells": result.to_row(),
            "mismatched": {m.field for m in result.mismatches},
            "passed": result.baseline_check_passed,
            "mismatches": result.mismatches,
        })

    duration = (report.scan_end - report.scan_start).total_seconds()

    return template.render(
        report=report,
        columns=list(RESULT_COLUMNS),
        rows=rows,
        skipped=report.skipped,
        summary=summary,
        baseline=report.baseline.expected_values(),
        duration=f"{duration:.1f}",
    )


def generate(report: InspectionReport, output_dir: str) -> str:
    """Render the inspection report as a self-contained HTML file.

    Returns:
        Path to the generated HTML file.
    """
    os.makedirs(output_dir, exist_ok=True)

    timestamp = report.scan_start.strftime("%Y%m%d_%H%M%S")
    filepath = Path(output_dir) / f"o365_inspection_{timestamp}.html"
    filepath.write_text(render(report), encoding="utf-8")

    return str(filepath)
