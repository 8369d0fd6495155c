"""Exceptions raised at each inspection failure site."""

from __future__ import annotations

from o365_inspector.models import ErrorKind


class InspectionError(Exception):
    """Base class for classified per-host inspection failures."""

    kind: ErrorKind = ErrorKind.UNCLASSIFIED

    def __init__(self, host: str, message: str):
        self.host = host
        super().__init__(message)


class HostUnreachableError(InspectionError):
    kind = ErrorKind.HOST_UNREACHABLE

    def __init__(self, host: str):
        super().__init__(host, f"{host} is not reachable")


class OfficeNotInstalledError(InspectionError):
    kind = ErrorKind.OFFICE_NOT_INSTALLED

    def __init__(self, host: str):
        super().__init__(host, f"Office 365 ProPlus is not installed on {host}")


class ChannelFetchError(InspectionError):
    """The channel reference page could not be retrieved."""

    kind = ErrorKind.CHANNEL_FETCH_FAILED

    def __init__(self, url: str, reason: str, host: str = ""):
        self.url = url
        self.reason = reason
        super().__init__(host, f"Failed to fetch {url}: {reason}")


class RegistryUnavailableError(OSError):
    """The Windows registry API is not available on this platform."""


class RegistryConnectionError(OSError):
    """The registry hive of a host could not be opened."""

    def __init__(self, host: str, reason: str):
        self.host = host
        super().__init__(f"Cannot open registry on {host}: {reason}")
