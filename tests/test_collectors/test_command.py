"""Tests for the generic command runner collector."""

from __future__ import annotations

import subprocess
import sys

from o365_inspector.collectors import command
from o365_inspector.collectors.command import CommandResult, run_cmd


class TestRunCmd:
    def test_successful_command(self):
        result = run_cmd([sys.executable, "-c", "print('hello')"])
        assert result.success is True
        assert "hello" in result.stdout
        assert result.return_code == 0

    def test_failing_command(self):
        result = run_cmd([sys.executable, "-c", "import sys; sys.exit(3)"])
        assert result.success is False
        assert result.return_code == 3

    def test_command_not_found(self):
        result = run_cmd(["nonexistent_command_xyz123"])
        assert result.success is False
        assert result.return_code == -1
        assert "Command not found: nonexistent_command_xyz123" in result.stderr

    def test_command_timeout(self, monkeypatch):
        def slow(*args, **kwargs):
            raise subprocess.TimeoutExpired(cmd=args[0], timeout=kwargs["timeout"])

        monkeypatch.setattr(command.subprocess, "run", slow)
        result = run_cmd(["ping", "PC-001"], timeout=9)
        assert result.success is False
        assert result.stderr == "ping timed out after 9 seconds"

    def test_os_error(self, monkeypatch):
        def denied(*args, **kwargs):
            raise PermissionError(13, "Permission denied")

        monkeypatch.setattr(command.subprocess, "run", denied)
        result = run_cmd(["ping", "PC-001"])
        assert result.return_code == -1
        assert "Permission denied" in result.stderr

    def test_output_combines_streams(self):
        result = CommandResult(success=False, stdout="reply\n", stderr="lost\n", return_code=1)
        assert result.output == "reply\nlost"
