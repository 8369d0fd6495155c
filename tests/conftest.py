"""Shared test fixtures: in-memory registry hives, probes, and resolvers."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from o365_inspector.channels import StaticChannelResolver
from o365_inspector.collectors.registry import REG_DWORD, REG_SZ, RegistryValue
from o365_inspector.config import Config
from o365_inspector.errors import ChannelFetchError
from o365_inspector.inspector import C2R_CONFIG_KEY, UNINSTALL_KEY, UPDATE_POLICY_KEY
from o365_inspector.models import (
    Baseline,
    BaselineMismatch,
    ErrorKind,
    HostOutcome,
    HostResult,
    InspectionReport,
)

REFERENCE_HTML = """
<html><body>
<table>
  <tr><th>Channel</th><th>Version</th><th>Build</th></tr>
  <tr><td>Current Channel</td><td>1611</td><td>7571.2075</td></tr>
  <tr><td>Deferred Channel</td><td>1605</td><td>6965.2105</td></tr>
  <tr><td>First Release Deferred</td><td>1609</td><td>7369.2095</td></tr>
</table>
</body></html>
"""


class FakeKey:
    """Registry key backed by a dict of name -> data."""

    def __init__(self, values: dict):
        self.values = values
        self.closed = False

    def get_value(self, name):
        if name not in self.values:
            return None
        data = self.values[name]
        return RegistryValue(name=name, data=data, type=REG_DWORD if isinstance(data, int) else REG_SZ)

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()


class FakeHive:
    """Registry hive backed by a dict of path -> values dict."""

    def __init__(self, keys: dict[str, dict]):
        self.keys = keys
        self.closed = False
        self.opened: list[str] = []

    def open_subkey(self, path):
        self.opened.append(path)
        if path not in self.keys:
            return None
        return FakeKey(self.keys[path])

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()


class FailingResolver:
    """Channel resolver whose reference page is always unavailable."""

    def __init__(self):
        self.calls = 0

    def resolve(self, version):
        self.calls += 1
        raise ChannelFetchError("https://example.invalid/channels", "HTTP 503: Service Unavailable")


def compliant_keys(**policy_overrides) -> dict[str, dict]:
    """Registry contents of a host that matches the default baseline."""
    policy = {
        "updatebranch": "Current",
        "enableautomaticupdates": 1,
        "officemgmtcom": 0,
        "updatepath": "\\\\Server\\Share",
    }
    policy.update(policy_overrides)
    return {
        UNINSTALL_KEY: {"DisplayName": "Microsoft Office 365 ProPlus - en-us"},
        C2R_CONFIG_KEY: {"VersionToReport": "16.0.7571.2075", "SharedComputerLicensing": "0"},
        UPDATE_POLICY_KEY: policy,
    }


@pytest.fixture
def default_config() -> Config:
    """Return a default Config instance."""
    return Config()


@pytest.fixture
def reference_html() -> str:
    return REFERENCE_HTML


@pytest.fixture
def static_resolver() -> StaticChannelResolver:
    return StaticChannelResolver.from_html(REFERENCE_HTML)


@pytest.fixture
def hive_factory():
    """Build a hive opener from a mapping of host -> registry keys.

    The opener records every hive it hands out in `opener.hives`.
    """
    def make(hosts: dict[str, dict]):
        def opener(host):
            hive = FakeHive(hosts[host])
            opener.hives.append(hive)
            return hive
        opener.hives = []
        return opener
    return make


@pytest.fixture
def sample_result() -> HostResult:
    return HostResult(
        computer="PC-001",
        baseline_check_passed=True,
        update_channel="Current",
        installed_channel="Current",
        installed_version="16.0.7571.2075",
        shared_computer_licensing=False,
        automatic_updates_enabled=True,
        sccm_updates_enabled=False,
        update_path="\\\\Server\\Share",
    )


@pytest.fixture
def failing_result() -> HostResult:
    return HostResult(
        computer="PC-002",
        baseline_check_passed=False,
        update_channel="Deferred",
        installed_channel="Deferred",
        installed_version="16.0.6965.2105",
        shared_computer_licensing=True,
        automatic_updates_enabled=True,
        sccm_updates_enabled=False,
        update_path="\\\\Server\\Share",
        mismatches=[
            BaselineMismatch(field="UpdateChannel", observed="Deferred", expected="Current"),
            BaselineMismatch(field="InstalledChannel", observed="Deferred", expected="Current"),
            BaselineMismatch(field="InstalledVersion", observed="16.0.6965.2105", expected="16.0.7571.2075"),
        ],
    )


@pytest.fixture
def sample_report(sample_result, failing_result) -> InspectionReport:
    report = InspectionReport(
        scan_start=datetime(2026, 10, 1, 8, 30, 0, tzinfo=timezone.utc),
        scan_end=datetime(2026, 10, 1, 8, 31, 15, tzinfo=timezone.utc),
        baseline=Baseline(),
        results=[sample_result, failing_result],
        skipped=[
            HostOutcome.skipped("PC-003", ErrorKind.HOST_UNREACHABLE, "PC-003 is not reachable"),
        ],
    )
    report.compute_summary()
    return report


@pytest.fixture
def office_keys():
    """Callable returning compliant registry contents, policy values overridable."""
    return compliant_keys


@pytest.fixture
def failing_resolver() -> FailingResolver:
    return FailingResolver()
