"""Generic subprocess runner for external commands such as ping."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass


@dataclass
class CommandResult:
    """Result of a subprocess command execution."""
    success: bool
    stdout: str
    stderr: str
    return_code: int

    @property
    def output(self) -> str:
        """Combined stdout and stderr, stripped."""
        return ((self.stdout or "") + (self.stderr or "")).strip()


def run_cmd(args: list[str], timeout: float = 60) -> CommandResult:
    """Execute a command and return a structured result.

    Launch failures and timeouts do not raise; they come back with
    return_code -1 and the reason in stderr.
    """
    name = args[0] if args else "(empty)"
    try:
        proc = subprocess.run(
            args,
            capture_output=True,
            timeout=timeout,
            text=True,
            errors="replace",
        )
    except subprocess.TimeoutExpired:
        return CommandResult(False, "", f"{name} timed out after {timeout:.0f} seconds", -1)
    except FileNotFoundError:
        return CommandResult(False, "", f"Command not found: {name}", -1)
    except OSError as e:
        return CommandResult(False, "", f"OS error executing {name}: {e}", -1)

    return CommandResult(
        success=proc.returncode == 0,
        stdout=proc.stdout or "",
        stderr=proc.stderr or "",
        return_code=proc.returncode,
    )
