"""Core Pydantic models for the Office 365 inspector."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

NOT_SET = "not set"
FAILED_TO_FETCH = "Failed to fetch"
UNDETERMINED_CHANNEL = "Could not determine channel"


class ErrorKind(str, Enum):
    HOST_UNREACHABLE = "HostUnreachable"
    OFFICE_NOT_INSTALLED = "OfficeNotInstalled"
    CHANNEL_FETCH_FAILED = "ChannelFetchFailed"
    UNCLASSIFIED = "Unclassified"


class Baseline(BaseModel):
    """Expected Office 365 configuration used as the comparison target."""

    model_config = ConfigDict(frozen=True)

    update_channel: str = "Current"
    installed_channel: str = "Current"
    installed_version: str = "16.0.7571.2075"
    automatic_updates_enabled: bool | str = True
    sccm_updates_enabled: bool | str = False
    update_path: str = "\\\\Server\\Share"

    @field_validator("automatic_updates_enabled", "sccm_updates_enabled", mode="before")
    @classmethod
    def _normalize_flag(cls, value):
        if isinstance(value, str) and value.strip().lower() in ("true", "false"):
            return value.strip().lower() == "true"
        return value

    def expected_values(self) -> dict[str, str]:
        """Return the six compared fields as strings, keyed by field name."""
        return {name: str(value) for name, value in self.model_dump().items()}


# Column name -> HostResult attribute, in output order
RESULT_COLUMNS: dict[str, str] = {
    "Computer": "computer",
    "BaselineCheckPassed": "baseline_check_passed",
    "UpdateChannel": "update_channel",
    "InstalledChannel": "installed_channel",
    "InstalledVersion": "installed_version",
    "SharedComputerLicensing": "shared_computer_licensing",
    "AutomaticUpdatesEnabled": "automatic_updates_enabled",
    "SCCMUpdatesEnabled": "sccm_updates_enabled",
    "UpdatePath": "update_path",
}


class BaselineMismatch(BaseModel):
    model_config = ConfigDict(frozen=True)

    field: str
    observed: str
    expected: str


class HostResult(BaseModel):
    """Observed Office 365 state for one host."""

    model_config = ConfigDict(frozen=True)

    computer: str
    baseline_check_passed: bool
    update_channel: str
    installed_channel: str
    installed_version: str
    shared_computer_licensing: bool | str
    automatic_updates_enabled: bool | str
    sccm_updates_enabled: bool | str
    update_path: str
    error: ErrorKind | None = None
    mismatches: list[BaselineMismatch] = Field(default_factory=list)

    def to_row(self) -> dict[str, object]:
        """Return the result as an ordered dict of output columns."""
        return {column: getattr(self, attr) for column, attr in RESULT_COLUMNS.items()}


class HostOutcome(BaseModel):
    """Per-host outcome: either a result or an error classification."""

    model_config = ConfigDict(frozen=True)

    host: str
    result: HostResult | None = None
    error: ErrorKind | None = None
    message: str = ""

    @classmethod
    def inspected(cls, result: HostResult) -> HostOutcome:
        return cls(host=result.computer, result=result, error=result.error)

    @classmethod
    def skipped(cls, host: str, error: ErrorKind, message: str) -> HostOutcome:
        return cls(host=host, error=error, message=message)

    @property
    def ok(self) -> bool:
        return self.result is not None


class InspectionReport(BaseModel):
    scan_start: datetime
    scan_end: datetime
    baseline: Baseline
    results: list[HostResult] = Field(default_factory=list)
    skipped: list[HostOutcome] = Field(default_factory=list)
    summary: dict = Field(default_factory=dict)

    def compute_summary(self) -> dict:
        """Compute host counts by outcome."""
        passed = sum(1 for r in self.results if r.baseline_check_passed)
        self.summary = {
            "hosts": len(self.results) + len(self.skipped),
            "inspected": len(self.results),
            "passed": passed,
            "failed": len(self.results) - passed,
            "skipped": len(self.skipped),
        }
        return self.summary

    def has_failures(self) -> bool:
        if not self.summary:
            self.compute_summary()
        return self.summary["failed"] > 0 or self.summary["skipped"] > 0
