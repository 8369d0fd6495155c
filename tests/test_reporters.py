"""Tests for console, JSON, CSV, and HTML report output."""

from __future__ import annotations

import csv
import io
import json
from pathlib import Path

from rich.console import Console

from o365_inspector.models import RESULT_COLUMNS
from o365_inspector.reporters import console_reporter, csv_reporter, html_reporter, json_reporter


class TestConsoleReporter:
    def _render(self, report) -> str:
        buffer = io.StringIO()
        console = Console(file=buffer, width=240, color_system=None)
        assert console_reporter.generate(report, "unused", console=console) == ""
        return buffer.getvalue()

    def test_table_lists_results(self, sample_report):
        text = self._render(sample_report)
        for column in ("Computer", "UpdatePath", "SCCMUpdatesEnabled"):
            assert column in text
        assert "PC-001" in text
        assert "PC-002" in text
        assert r"\\Server\Share" in text

    def test_skipped_hosts_listed(self, sample_report):
        text = self._render(sample_report)
        assert "Skipped Hosts" in text
        assert "PC-003" in text
        assert "HostUnreachable" in text

    def test_summary_line(self, sample_report):
        text = self._render(sample_report)
        assert "Hosts: 3" in text
        assert "Passed: 1" in text
        assert "Failed: 1" in text
        assert "Skipped: 1" in text


class TestJsonReporter:
    def test_writes_report(self, sample_report, tmp_path):
        path = Path(json_reporter.generate(sample_report, str(tmp_path / "out")))
        assert path.name == "o365_inspection_20261001_083000.json"
        data = json.loads(path.read_text(encoding="utf-8"))
        assert [r["computer"] for r in data["results"]] == ["PC-001", "PC-002"]
        assert data["skipped"][0]["error"] == "HostUnreachable"
        assert data["summary"]["hosts"] == 3
        assert data["baseline"]["installed_version"] == "16.0.7571.2075"


class TestCsvReporter:
    def test_writes_rows(self, sample_report, tmp_path):
        path = Path(csv_reporter.generate(sample_report, str(tmp_path)))
        assert path.suffix == ".csv"
        with open(path, newline="", encoding="utf-8-sig") as fh:
            rows = list(csv.DictReader(fh))

        assert list(rows[0]) == list(RESULT_COLUMNS) + [csv_reporter.ERROR_COLUMN]
        assert rows[0]["Computer"] == "PC-001"
        assert rows[0]["BaselineCheckPassed"] == "True"
        assert rows[0]["UpdatePath"] == r"\\Server\Share"
        assert rows[1]["BaselineCheckPassed"] == "False"
        assert rows[2]["Computer"] == "PC-003"
        assert rows[2]["Error"] == "HostUnreachable"
        assert rows[2]["UpdateChannel"] == ""


class TestHtmlReporter:
    def test_render(self, sample_report):
        html = html_reporter.render(sample_report)
        assert "<table>" in html
        assert "PC-002" in html
        assert 'class="mismatch"' in html
        assert "Skipped Hosts" in html
        assert "HostUnreachable" in html

    def test_deviations_listed(self, sample_report):
        html = html_reporter.render(sample_report)
        assert "Baseline Deviations" in html
        assert "<td>PC-002</td><td>InstalledVersion</td>" in html
        assert '<td class="mismatch">16.0.6965.2105</td><td>16.0.7571.2075</td>' in html

    def test_no_deviations_section_when_all_pass(self, sample_report, sample_result):
        report = sample_report.model_copy(update={"results": [sample_result]})
        assert "Baseline Deviations" not in html_reporter.render(report)

    def test_values_are_escaped(self, sample_report, sample_result):
        hostile = sample_result.model_copy(update={"computer": "<script>alert(1)</script>"})
        report = sample_report.model_copy(update={"results": [hostile]})
        html = html_reporter.render(report)
        assert "<script>" not in html
        assert "&lt;script&gt;" in html

    def test_generate_writes_file(self, sample_report, tmp_path):
        path = Path(html_reporter.generate(sample_report, str(tmp_path)))
        assert path.name.endswith(".html")
        assert "Office 365 Baseline Check" in path.read_text(encoding="utf-8")
