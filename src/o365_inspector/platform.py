"""Platform detection and host name helpers."""

from __future__ import annotations

import os
import socket
import sys


def is_windows() -> bool:
    """Return True if running on Windows."""
    return sys.platform == "win32"


def get_hostname() -> str:
    """Return the local host name.

    Prefers COMPUTERNAME, which is the NetBIOS name Windows uses for
    remote registry connections.
    """
    return os.environ.get("COMPUTERNAME") or socket.gethostname()


def is_local_host(host: str) -> bool:
    """Return True if host names the machine we are running on."""
    name = host.strip().lower()
    if name in ("localhost", ".", "127.0.0.1", "::1"):
        return True
    return name in (get_hostname().lower(), socket.gethostname().lower())
