"""
config.py

Responsibility: Build configuration passed explicitly to every task.

`MakeConfig` describes the Go project being built (its defaults match the
eventlist layout). It may be overridden by an optional YAML file.
`BuildOptions` carries the per-invocation CLI flags.
"""

from __future__ import annotations

import dataclasses
import platform
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from gomake.errors import GoMakeError

DEFAULT_CONFIG_FILE = "gomake.yaml"
DEFAULT_OUTDIR = "build"

DEFAULT_COMMANDS: dict[str, str] = {
    "build": (
        "go build -ldflags {{ ldflags | quote }}"
        " -o {{ output | quote }} {{ main_path | quote }}"
    ),
    "test": "go test ./...",
    "coverage": "go test ./... -coverprofile {{ cover_profile | quote }}",
    "coverage_report": "go tool cover -html={{ cover_profile | quote }}",
    "lint": "golangci-lint run --config={{ lint_config | quote }}",
    "format": "gofmt -s -w .",
    "resource": "goversioninfo -o {{ resource_file | quote }} {{ arch_flags }} {{ version_info_file | quote }}",
}

# platform.machine() spellings -> GOARCH
_ARCH_ALIASES = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "i386": "386",
    "i686": "386",
    "x86": "386",
    "armv6l": "arm",
    "armv7l": "arm",
    "ppc64le": "ppc64le",
    "s390x": "s390x",
    "riscv64": "riscv64",
}


class ConfigError(GoMakeError):
    pass


@dataclass(frozen=True)
class MakeConfig:
    """Static description of the Go project being built."""

    program: str = "eventlist"
    main_path: str = "./cmd/eventlist"
    tag_prefix: str = "tools/eventlist"
    resource_file_name: str = "resource.syso"
    version_info_file: str = "./versioninfo.json"
    lint_config: str = "./.golangci.yaml"
    copyright: str = (
        "Copyright (C) {{ first_year }}{{ year_suffix }} ARM Limited or its Affiliates. All rights reserved."
    )
    copyright_year: int = 2022
    ldflags_variable: str = "main.versionInfo"
    separator: str = "#"
    commands: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_COMMANDS))

    @property
    def resource_file(self) -> str:
        return f"{self.main_path.rstrip('/')}/{self.resource_file_name}"


@dataclass(frozen=True)
class BuildOptions:
    """Per-invocation flags; empty os/arch mean "the host's"."""

    target_os: str = ""
    target_arch: str = ""
    outdir: str = DEFAULT_OUTDIR

    def resolved(self) -> BuildOptions:
        return BuildOptions(
            target_os=self.target_os or host_os(),
            target_arch=self.target_arch or host_arch(),
            outdir=self.outdir or DEFAULT_OUTDIR,
        )


def host_os() -> str:
    """Return the host operating system using Go's GOOS names."""
    if sys.platform.startswith("win"):
        return "windows"
    if sys.platform == "darwin":
        return "darwin"
    return platform.system().lower() or sys.platform


def host_arch() -> str:
    """Return the host architecture using Go's GOARCH names."""
    machine = platform.machine().lower()
    return _ARCH_ALIASES.get(machine, machine)


def _parse_commands(raw: Any) -> dict[str, str]:
    if not isinstance(raw, dict):
        raise ConfigError("`commands` must be an object/mapping when provided.")
    commands = dict(DEFAULT_COMMANDS)
    for key, value in raw.items():
        name = str(key).replace("-", "_")
        if name not in DEFAULT_COMMANDS:
            raise ConfigError(f"Unknown command template `{key}` (known: {', '.join(sorted(DEFAULT_COMMANDS))})")
        if not isinstance(value, str) or not value.strip():
            raise ConfigError(f"Command template `{key}` must be a non-empty string.")
        commands[name] = value
    return commands


def config_from_mapping(data: dict[str, Any]) -> MakeConfig:
    """
    Build a `MakeConfig` from a parsed YAML mapping.

    Only known keys are accepted; missing keys keep their defaults.
    """
    known = {f.name for f in dataclasses.fields(MakeConfig)}
    unknown = sorted(str(k) for k in data if k not in known)
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")

    values: dict[str, Any] = {}
    for key, value in data.items():
        if key == "commands":
            values["commands"] = _parse_commands(value or {})
        elif key == "copyright_year":
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError("`copyright_year` must be an integer.")
            values[key] = value
        else:
            if value is None or isinstance(value, (dict, list)):
                raise ConfigError(f"`{key}` must be a scalar value.")
            values[key] = str(value).strip()

    if "tag_prefix" in values:
        values["tag_prefix"] = values["tag_prefix"].strip("/")
    if "'" in values.get("copyright", "") and '"' in values.get("copyright", ""):
        # -ldflags arguments have no escapes; one quote kind must stay free.
        raise ConfigError("`copyright` may contain single or double quotes, but not both.")

    cfg = MakeConfig(**values)
    if len(cfg.tag_prefix.split("/")) != 2:
        raise ConfigError("`tag_prefix` must have exactly two path segments, e.g. `tools/eventlist`.")
    return cfg


def load_config(path: str | Path | None = None) -> MakeConfig:
    """
    Load the build configuration.

    With no explicit path, `gomake.yaml` in the working directory is used if it
    exists; otherwise the defaults apply. An explicit path must exist.
    """
    if path is None:
        candidate = Path(DEFAULT_CONFIG_FILE)
        if not candidate.exists():
            return MakeConfig()
    else:
        candidate = Path(path)
        if not candidate.exists():
            raise ConfigError(f"Config file does not exist: {candidate}")

    try:
        text = candidate.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Cannot read config file {candidate}: {e}") from e
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"Config file is not valid YAML: {candidate}") from e
    if data is None:
        return MakeConfig()
    if not isinstance(data, dict):
        raise ConfigError("Config must be a mapping/object at the top level.")
    return config_from_mapping(data)
