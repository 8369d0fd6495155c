"""YAML configuration loader with defaults."""

from __future__ import annotations

from importlib import resources
from pathlib import Path

import yaml
from pydantic import ValidationError

from o365_inspector.models import Baseline

_DEFAULT_CONFIG_RESOURCE = "o365_inspector.data"
_DEFAULT_CONFIG_FILE = "inspector_config.yaml"

DEFAULT_REFERENCE_URL = "https://technet.microsoft.com/en-us/library/mt592918.aspx"
VALID_FORMATS = ("console", "json", "csv", "html")


class Config:
    """Application configuration loaded from YAML with CLI overrides."""

    def __init__(
        self,
        baseline: Baseline | None = None,
        reference_url: str = DEFAULT_REFERENCE_URL,
        reference_timeout: float = 30.0,
        ping_count: int = 2,
        ping_timeout_ms: int = 1000,
        output_formats: list[str] | None = None,
        output_directory: str = "./reports",
        verbose: bool = False,
    ):
        self.baseline = baseline or Baseline()
        self.reference_url = reference_url
        self.reference_timeout = reference_timeout
        self.ping_count = ping_count
        self.ping_timeout_ms = ping_timeout_ms
        self.output_formats = output_formats or ["console"]
        self.output_directory = output_directory
        self.verbose = verbose

    @classmethod
    def from_yaml(cls, path: str | Path) -> Config:
        """Load configuration from a YAML file."""
        with open(path, encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
        return cls._from_dict(raw)

    @classmethod
    def from_defaults(cls) -> Config:
        """Load built-in default configuration."""
        try:
            ref = resources.files(_DEFAULT_CONFIG_RESOURCE).joinpath(_DEFAULT_CONFIG_FILE)
            raw = yaml.safe_load(ref.read_text(encoding="utf-8")) or {}
            return cls._from_dict(raw)
        except (FileNotFoundError, TypeError):
            return cls()

    @classmethod
    def _from_dict(cls, raw: dict) -> Config:
        """Parse a raw dict into Config."""
        if not isinstance(raw, dict):
            return cls()

        baseline_section = _section(raw, "baseline")
        reference_section = _section(raw, "channel_reference")
        reach_section = _section(raw, "reachability")
        output_section = _section(raw, "output")

        try:
            baseline = Baseline(**baseline_section)
        except ValidationError:
            baseline = Baseline()

        return cls(
            baseline=baseline,
            reference_url=reference_section.get("url") or DEFAULT_REFERENCE_URL,
            reference_timeout=_as_number(reference_section.get("timeout"), 30.0, float),
            ping_count=_as_number(reach_section.get("count"), 2, int),
            ping_timeout_ms=_as_number(reach_section.get("timeout_ms"), 1000, int),
            output_formats=_parse_formats(output_section.get("formats")) or ["console"],
            output_directory=output_section.get("directory") or "./reports",
        )

    def apply_overrides(
        self,
        formats: str | None = None,
        output_dir: str | None = None,
        reference_url: str | None = None,
        verbose: bool = False,
    ) -> None:
        """Apply CLI flag overrides to this config."""
        if formats:
            parsed = _parse_formats(formats.split(","))
            if parsed:
                self.output_formats = parsed
        if output_dir:
            self.output_directory = output_dir
        if reference_url:
            self.reference_url = reference_url
        if verbose:
            self.verbose = True


def _section(raw: dict, name: str) -> dict:
    section = raw.get(name)
    return section if isinstance(section, dict) else {}


def _as_number(value, default, cast):
    if value is None:
        return default
    try:
        number = cast(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


def _parse_formats(formats) -> list[str]:
    if not isinstance(formats, list):
        return []
    parsed = []
    for fmt in formats:
        name = str(fmt).strip().lower()
        if name in VALID_FORMATS and name not in parsed:
            parsed.append(name)
    return parsed
