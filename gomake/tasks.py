"""
tasks.py

Responsibility: One function per CLI verb.

Every task receives the configuration, the resolved build options, and the
command runner explicitly; nothing here reads global state.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Sequence

from gomake.config import BuildOptions, MakeConfig
from gomake.errors import GoMakeError
from gomake.renderer import go_quote, render_command
from gomake.resource import create_resource_info
from gomake.runner import CommandFailedError, CommandRunner

logger = logging.getLogger(__name__)

COVER_PROFILE = "cover.out"


class TaskError(GoMakeError):
    pass


def _make_outdir(outdir: str) -> None:
    try:
        Path(outdir).mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise TaskError(f"Cannot create output directory {outdir}: {e.strerror}") from e


def _remove(path: Path) -> None:
    logger.debug("removing %s", path)
    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink()
    except OSError as e:
        raise TaskError(f"Cannot remove {path}: {e.strerror}") from e


def _context(config: MakeConfig, options: BuildOptions) -> dict[str, object]:
    opts = options.resolved()
    return {
        "program": config.program,
        "main_path": config.main_path,
        "outdir": opts.outdir,
        "target_os": opts.target_os,
        "target_arch": opts.target_arch,
        "lint_config": config.lint_config,
        "cover_profile": f"{opts.outdir}/{COVER_PROFILE}",
        "ldflags_variable": config.ldflags_variable,
    }


def executable_name(config: MakeConfig, target_os: str) -> str:
    extension = ".exe" if target_os == "windows" else ""
    return config.program + extension


def build(config: MakeConfig, options: BuildOptions, runner: CommandRunner) -> None:
    opts = options.resolved()
    _make_outdir(opts.outdir)

    version, copyright_line = create_resource_info(config, opts, runner)
    context = _context(config, opts)
    context["version"] = version
    version_info = version + config.separator + copyright_line
    context["version_info"] = version_info
    context["ldflags"] = "-X " + go_quote(f"{config.ldflags_variable}={version_info}")
    context["output"] = f"{opts.outdir}/{executable_name(config, opts.target_os)}"

    argv = render_command(config.commands["build"], context)
    runner.run(argv, env={"GOOS": opts.target_os, "GOARCH": opts.target_arch})
    print("build finished successfully!")


def run_tests(
    config: MakeConfig,
    options: BuildOptions,
    runner: CommandRunner,
    passthrough: Sequence[str] = (),
) -> None:
    argv = render_command(config.commands["test"], _context(config, options))
    runner.run(argv + list(passthrough))


def clean(config: MakeConfig, options: BuildOptions) -> None:
    for path in (Path(options.resolved().outdir), Path(config.resource_file)):
        if path.exists() or path.is_symlink():
            _remove(path)
    print("cleaned successfully!")


def coverage(
    config: MakeConfig,
    options: BuildOptions,
    runner: CommandRunner,
    passthrough: Sequence[str] = (),
) -> None:
    opts = options.resolved()
    _make_outdir(opts.outdir)
    argv = render_command(config.commands["coverage"], _context(config, opts))
    runner.run(argv + list(passthrough))


def coverage_report(
    config: MakeConfig,
    options: BuildOptions,
    runner: CommandRunner,
    passthrough: Sequence[str] = (),
) -> None:
    coverage(config, options, runner, passthrough)
    argv = render_command(config.commands["coverage_report"], _context(config, options))
    runner.run(argv)


def _run_advisory(name: str, argv: list[str], runner: CommandRunner) -> None:
    # Lint and format findings are shown but never fail the invocation.
    try:
        runner.run(argv)
    except CommandFailedError as e:
        logger.warning("%s reported problems (exit code %d)", name, e.returncode)


def lint(config: MakeConfig, options: BuildOptions, runner: CommandRunner) -> None:
    _run_advisory("lint", render_command(config.commands["lint"], _context(config, options)), runner)


def format_code(config: MakeConfig, options: BuildOptions, runner: CommandRunner) -> None:
    _run_advisory("format", render_command(config.commands["format"], _context(config, options)), runner)
