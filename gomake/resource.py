"""
resource.py

Responsibility: Stamp version and copyright metadata into the Windows resource.

The flow mirrors what goversioninfo expects:
1) Read `versioninfo.json`
2) Update FixedFileInfo / StringFileInfo version fields and LegalCopyright
3) Write the JSON back
4) Run the `goversioninfo` writer to produce `<main_path>/resource.syso`
"""

from __future__ import annotations

import copy
import datetime
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from gomake.config import BuildOptions, MakeConfig
from gomake.errors import GoMakeError
from gomake.git_tag import GitTagResolver
from gomake.renderer import render_command, render_text
from gomake.runner import CommandRunner
from gomake.version import Version

logger = logging.getLogger(__name__)


class ResourceError(GoMakeError):
    pass


@dataclass(frozen=True)
class VersionInfoFile:
    path: Path

    def read(self) -> dict[str, Any]:
        if not self.path.exists():
            raise ResourceError(f"Version info file does not exist: {self.path}")
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise ResourceError(f"Cannot read version info file {self.path}: {e.strerror}") from e
        except UnicodeDecodeError as e:
            raise ResourceError(f"Version info file is not valid UTF-8: {self.path}") from e
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ResourceError(f"Version info file is not valid JSON: {self.path}") from e
        if not isinstance(data, dict):
            raise ResourceError(f"Version info file must hold a JSON object: {self.path}")
        return data

    def write(self, data: dict[str, Any]) -> None:
        try:
            self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        except OSError as e:
            raise ResourceError(f"Cannot write version info file {self.path}: {e.strerror}") from e


def copyright_notice(config: MakeConfig, year: int) -> str:
    """
    Render the copyright line; a year after the first one turns
    `2022` into `2022-25`.
    """
    year_suffix = "" if year == config.copyright_year else "-" + str(year)[2:]
    return render_text(
        config.copyright,
        {"first_year": config.copyright_year, "year_suffix": year_suffix, "year": year},
    )


def _section(data: dict[str, Any], *keys: str) -> dict[str, Any]:
    node = data
    for key in keys:
        child = node.setdefault(key, {})
        if not isinstance(child, dict):
            raise ResourceError(f"Version info field `{'.'.join(keys)}` must be an object")
        node = child
    return node


def stamp_version_info(data: dict[str, Any], version: Version, copyright_line: str) -> dict[str, Any]:
    """Return a copy of `data` with version and copyright fields updated."""
    out = copy.deepcopy(data)
    for name in ("FileVersion", "ProductVersion"):
        fixed = _section(out, "FixedFileInfo", name)
        fixed["Major"] = version.major
        fixed["Minor"] = version.minor
        fixed["Patch"] = version.patch

    strings = _section(out, "StringFileInfo")
    strings["FileVersion"] = str(version)
    strings["ProductVersion"] = str(version)
    strings["LegalCopyright"] = copyright_line
    return out


def arch_flags(target_arch: str) -> str:
    flags = []
    if target_arch in ("amd64", "arm64"):
        flags.append("-64")
    if target_arch in ("arm", "arm64"):
        flags.append("-arm")
    return " ".join(flags)


def create_resource_info(
    config: MakeConfig,
    options: BuildOptions,
    runner: CommandRunner,
    *,
    today: datetime.date | None = None,
) -> tuple[str, str]:
    """
    Resolve the version, stamp `versioninfo.json`, and write the resource file.

    Returns (version string, copyright line) for embedding into the binary.
    """
    version = GitTagResolver(runner, config.tag_prefix).resolve()
    logger.info("version: %s", version)

    info_file = VersionInfoFile(Path(config.version_info_file))
    year = (today or datetime.date.today()).year
    copyright_line = copyright_notice(config, year)
    info_file.write(stamp_version_info(info_file.read(), version, copyright_line))

    opts = options.resolved()
    argv = render_command(
        config.commands["resource"],
        {
            "resource_file": config.resource_file,
            "version_info_file": config.version_info_file,
            "arch_flags": arch_flags(opts.target_arch),
            "target_arch": opts.target_arch,
        },
    )
    runner.run(argv)
    return str(version), copyright_line
