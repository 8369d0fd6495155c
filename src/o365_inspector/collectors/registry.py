"""Windows Registry reader for local and remote hosts.

Wraps ``winreg.ConnectRegistry`` so a host's HKEY_LOCAL_MACHINE hive can be
opened over the Remote Registry service. Missing subkeys and values are
reported as None, never as errors.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from o365_inspector.errors import RegistryConnectionError, RegistryUnavailableError
from o365_inspector.platform import is_local_host, is_windows

# Registry hive constants (match winreg values for use as pass-through)
HKEY_LOCAL_MACHINE = 0x80000002

# Common type constants
REG_SZ = 1
REG_DWORD = 4

# winreg error code for a missing key or value
_ERROR_FILE_NOT_FOUND = 2


@dataclass
class RegistryValue:
    """A single registry value with name, data, and type."""
    name: str
    data: Any
    type: int


def _winreg():
    if not is_windows():
        raise RegistryUnavailableError("The Windows registry is only available on Windows")
    import winreg
    return winreg


def _is_not_found(exc: OSError) -> bool:
    return isinstance(exc, FileNotFoundError) or getattr(exc, "winerror", None) == _ERROR_FILE_NOT_FOUND


class RegistryKey:
    """An open registry subkey."""

    def __init__(self, handle: Any, path: str):
        self._handle = handle
        self.path = path

    def get_value(self, name: str) -> RegistryValue | None:
        """Read a named value. Returns None if the value does not exist."""
        winreg = _winreg()
        try:
            data, reg_type = winreg.QueryValueEx(self._handle, name)
        except OSError as exc:
            if _is_not_found(exc):
                return None
            raise
        return RegistryValue(name=name, data=data, type=reg_type)

    def close(self) -> None:
        if self._handle is not None:
            self._handle.Close()
            self._handle = None

    def __enter__(self) -> RegistryKey:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class RemoteHive:
    """A registry hive opened on a (possibly remote) host."""

    def __init__(self, handle: Any, host: str, wow64_32: bool = False):
        self._handle = handle
        self.host = host
        self.wow64_32 = wow64_32

    def open_subkey(self, path: str) -> RegistryKey | None:
        """Open a subkey for reading.

        Args:
            path: Subkey path (e.g., 'SOFTWARE\\Microsoft\\Office').

        Returns:
            RegistryKey, or None if the subkey does not exist.
        """
        winreg = _winreg()
        access = winreg.KEY_READ
        if self.wow64_32:
            access |= winreg.KEY_WOW64_32KEY
        try:
            handle = winreg.OpenKey(self._handle, path, 0, access)
        except OSError as exc:
            if _is_not_found(exc):
                return None
            raise
        return RegistryKey(handle, path)

    def close(self) -> None:
        if self._handle is not None:
            self._handle.Close()
            self._handle = None

    def __enter__(self) -> RemoteHive:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def open_remote_hive(
    host: str | None,
    hive: int = HKEY_LOCAL_MACHINE,
    wow64_32: bool = False,
) -> RemoteHive:
    """Connect to a registry hive on a host.

    Args:
        host: Computer name. None or a name of the local machine opens
              the local hive without going through Remote Registry.
        hive: Registry hive constant, HKEY_LOCAL_MACHINE by default.
        wow64_32: If True, access the 32-bit registry view on 64-bit Windows.

    Raises:
        RegistryUnavailableError: Not running on Windows.
        RegistryConnectionError: The hive could not be opened.
    """
    winreg = _winreg()
    computer = None
    if host is not None and not is_local_host(host):
        computer = "\\\\" + host.lstrip("\\")
    try:
        handle = winreg.ConnectRegistry(computer, hive)
    except OSError as exc:
        raise RegistryConnectionError(host or "localhost", exc.strerror or str(exc)) from exc
    return RemoteHive(handle, host or "localhost", wow64_32=wow64_32)
