"""Per-host Office 365 inspection and report assembly."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Iterable

from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn, TimeElapsedColumn

from o365_inspector.channels import ChannelResolver, WebChannelResolver
from o365_inspector.collectors import reachability, registry
from o365_inspector.config import Config
from o365_inspector.errors import (
    ChannelFetchError,
    HostUnreachableError,
    InspectionError,
    OfficeNotInstalledError,
)
from o365_inspector.log import status_console
from o365_inspector.models import (
    FAILED_TO_FETCH,
    NOT_SET,
    RESULT_COLUMNS,
    Baseline,
    BaselineMismatch,
    ErrorKind,
    HostOutcome,
    HostResult,
    InspectionReport,
)

logger = logging.getLogger(__name__)

UNINSTALL_KEY = r"SOFTWARE\Microsoft\Windows\CurrentVersion\Uninstall\O365ProPlusRetail - en-us"
C2R_CONFIG_KEY = r"SOFTWARE\Microsoft\Office\ClickToRun\Configuration"
UPDATE_POLICY_KEY = r"SOFTWARE\Policies\Microsoft\Office\16.0\Common\OfficeUpdate"

_COLUMN_FOR = {attr: column for column, attr in RESULT_COLUMNS.items()}

Probe = Callable[[str], bool]
HiveOpener = Callable[[str], Any]


@dataclass
class OfficeState:
    """Raw Office values read from one host's registry."""
    version: str = NOT_SET
    shared_computer_licensing: bool | str = False
    update_channel: str = NOT_SET
    automatic_updates_enabled: bool | str = NOT_SET
    sccm_updates_enabled: bool | str = NOT_SET
    update_path: str = NOT_SET


def _as_flag(data: Any) -> bool | str:
    """Convert a DWORD or string registry flag to bool."""
    if data is None:
        return NOT_SET
    if isinstance(data, bool):
        return data
    if isinstance(data, int):
        return data != 0
    text = str(data).strip().lower()
    if text in ("1", "true"):
        return True
    if text in ("0", "false"):
        return False
    return str(data)


def _read(key, name: str) -> Any:
    value = key.get_value(name)
    return None if value is None else value.data


def read_office_state(hive, host: str) -> OfficeState:
    """Read the Click-to-Run and update policy values from an open hive.

    Raises:
        OfficeNotInstalledError: The Office 365 ProPlus uninstall key is absent.
    """
    uninstall = hive.open_subkey(UNINSTALL_KEY)
    if uninstall is None:
        raise OfficeNotInstalledError(host)
    uninstall.close()

    state = OfficeState()

    config_key = hive.open_subkey(C2R_CONFIG_KEY)
    if config_key is None:
        logger.debug("%s: Click-to-Run configuration key is missing", host)
    else:
        with config_key:
            version = _read(config_key, "VersionToReport")
            if version:
                state.version = str(version)
            licensing = _read(config_key, "SharedComputerLicensing")
            state.shared_computer_licensing = False if licensing is None else _as_flag(licensing)

    policy_key = hive.open_subkey(UPDATE_POLICY_KEY)
    if policy_key is None:
        logger.debug("%s: no Office update policy, using '%s'", host, NOT_SET)
        return state

    with policy_key:
        branch = _read(policy_key, "updatebranch")
        path = _read(policy_key, "updatepath")
        state.update_channel = NOT_SET if branch is None else str(branch)
        state.automatic_updates_enabled = _as_flag(_read(policy_key, "enableautomaticupdates"))
        state.sccm_updates_enabled = _as_flag(_read(policy_key, "officemgmtcom"))
        state.update_path = NOT_SET if path is None else str(path)

    return state


def compare_to_baseline(observed: dict[str, Any], baseline: Baseline) -> list[BaselineMismatch]:
    """Compare observed values to the baseline as strings.

    Every baseline field is checked; the returned list holds one entry per
    differing field.
    """
    mismatches: list[BaselineMismatch] = []
    for field_name, expected in baseline.expected_values().items():
        actual = str(observed.get(field_name, NOT_SET))
        if actual != expected:
            mismatches.append(BaselineMismatch(
                field=_COLUMN_FOR.get(field_name, field_name),
                observed=actual,
                expected=expected,
            ))
    return mismatches


class InstallInspector:
    """Inspects hosts one at a time, producing an InspectionReport.

    The reachability probe, registry hive opener, and channel resolver are
    injectable; by default they ping, use the Remote Registry service, and
    scrape the configured reference page.
    """

    def __init__(
        self,
        config: Config | None = None,
        probe: Probe | None = None,
        hive_opener: HiveOpener | None = None,
        channel_resolver: ChannelResolver | None = None,
    ):
        self.config = config or Config()
        self.baseline = self.config.baseline
        self.probe = probe or self._ping
        self.hive_opener = hive_opener or registry.open_remote_hive
        self.channel_resolver = channel_resolver or WebChannelResolver(
            self.config.reference_url,
            timeout=self.config.reference_timeout,
        )

    def _ping(self, host: str) -> bool:
        return reachability.ping(host, self.config.ping_count, self.config.ping_timeout_ms)

    def inspect_host(self, host: str) -> HostOutcome:
        """Inspect one host. Never raises; failures are classified."""
        try:
            result = self._inspect(host)
        except InspectionError as exc:
            level = logging.INFO if exc.kind is ErrorKind.OFFICE_NOT_INSTALLED else logging.WARNING
            logger.log(level, "%s", exc)
            return HostOutcome.skipped(host, exc.kind, str(exc))
        except Exception as exc:
            message = f"{type(exc).__name__}: {exc}"
            logger.error("%s: %s", host, message)
            return HostOutcome.skipped(host, ErrorKind.UNCLASSIFIED, message)
        return HostOutcome.inspected(result)

    def _inspect(self, host: str) -> HostResult:
        if not self.probe(host):
            raise HostUnreachableError(host)

        with self.hive_opener(host) as hive:
            state = read_office_state(hive, host)

        installed_channel, error = self._resolve_channel(host, state.version)

        observed = {
            "update_channel": state.update_channel,
            "installed_channel": installed_channel,
            "installed_version": state.version,
            "automatic_updates_enabled": state.automatic_updates_enabled,
            "sccm_updates_enabled": state.sccm_updates_enabled,
            "update_path": state.update_path,
        }
        mismatches = compare_to_baseline(observed, self.baseline)
        for mismatch in mismatches:
            logger.warning(
                "%s: %s is '%s', baseline expects '%s'",
                host, mismatch.field, mismatch.observed, mismatch.expected,
            )

        return HostResult(
            computer=host,
            baseline_check_passed=not mismatches,
            shared_computer_licensing=state.shared_computer_licensing,
            error=error,
            mismatches=mismatches,
            **observed,
        )

    def _resolve_channel(self, host: str, version: str) -> tuple[str, ErrorKind | None]:
        try:
            channel = self.channel_resolver.resolve(None if version == NOT_SET else version)
        except ChannelFetchError as exc:
            logger.warning("%s: %s", host, exc)
            return FAILED_TO_FETCH, ErrorKind.CHANNEL_FETCH_FAILED
        logger.debug("%s: build %s resolved to channel '%s'", host, version, channel)
        return channel, None

    def run(self, hosts: Iterable[str], show_progress: bool = False) -> InspectionReport:
        """Inspect hosts sequentially in input order.

        Returns:
            InspectionReport with one result per inspected host and one
            skipped outcome per host that could not be inspected.
        """
        hosts = [h.strip() for h in hosts if h and h.strip()]
        scan_start = datetime.now(timezone.utc)
        outcomes: list[HostOutcome] = []

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TextColumn("{task.completed}/{task.total}"),
            TimeElapsedColumn(),
            console=status_console,
            transient=True,
            disable=not show_progress,
        ) as progress:
            task = progress.add_task("Inspecting hosts...", total=len(hosts))

            for host in hosts:
                progress.update(task, description=f"[cyan]{host}[/cyan]")
                logger.info("Inspecting %s", host)
                outcomes.append(self.inspect_host(host))
                progress.advance(task)

        report = InspectionReport(
            scan_start=scan_start,
            scan_end=datetime.now(timezone.utc),
            baseline=self.baseline,
            results=[o.result for o in outcomes if o.result is not None],
            skipped=[o for o in outcomes if o.result is None],
        )
        report.compute_summary()
        return report
