"""JSON report output."""

from __future__ import annotations

import os
from pathlib import Path

from o365_inspector.models import InspectionReport


def generate(report: InspectionReport, output_dir: str) -> str:
    """Serialize the report to a JSON file.

    Args:
        report: The inspection report to serialize.
        output_dir: Directory to write the report file.

    Returns:
        Path to the generated JSON file.
    """
    os.makedirs(output_dir, exist_ok=True)

    timestamp = report.scan_start.strftime("%Y%m%d_%H%M%S")
    filepath = Path(output_dir) / f"o365_inspection_{timestamp}.json"

    filepath.write_text(report.model_dump_json(indent=2), encoding="utf-8")

    return str(filepath)
