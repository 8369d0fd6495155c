"""Ping-based host reachability probe."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from o365_inspector.collectors.command import run_cmd
from o365_inspector.platform import is_windows

logger = logging.getLogger(__name__)


@dataclass
class ProbeResult:
    """Outcome of a ping run against one host."""
    host: str
    reachable: bool
    return_code: int
    output: str


def build_ping_command(host: str, count: int = 2, timeout_ms: int = 1000) -> list[str]:
    """Return the ping argument list for the current platform."""
    if is_windows():
        return ["ping", "-n", str(count), "-w", str(timeout_ms), host]
    # iputils ping takes a per-reply timeout in whole seconds
    timeout_s = max(1, (timeout_ms + 999) // 1000)
    return ["ping", "-c", str(count), "-W", str(timeout_s), host]


def probe(host: str, count: int = 2, timeout_ms: int = 1000) -> ProbeResult:
    """Ping a host `count` times.

    The host is reachable if at least one echo reply came back, which is
    what ping's zero exit status reports.
    """
    # Upper bound for the whole run, not per reply
    budget = count * (timeout_ms / 1000.0 + 1) + 5
    result = run_cmd(build_ping_command(host, count, timeout_ms), timeout=budget)

    reachable = result.success
    # Windows ping exits 0 on "Destination host unreachable" replies
    if reachable and is_windows():
        reachable = "ttl=" in result.output.lower()
    return ProbeResult(host, reachable, result.return_code, result.output)


def ping(host: str, count: int = 2, timeout_ms: int = 1000) -> bool:
    """Return True if the host answered at least one of `count` pings."""
    result = probe(host, count, timeout_ms)
    logger.debug("ping %s: rc=%d reachable=%s", host, result.return_code, result.reachable)
    return result.reachable
