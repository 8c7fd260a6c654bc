"""
cli.py

Responsibility: CLI entrypoint for gomake.

Flow for every invocation:
1) Split off pass-through arguments (everything after `--`)
2) Parse the verb and flags; the verb must be one of `Command`
3) Load `MakeConfig` (optional gomake.yaml) and build `BuildOptions`
4) Dispatch to the matching function in `tasks.py`

Any GoMakeError is reported as `error: ...` and turns into exit status 1.
"""

from __future__ import annotations

import argparse
import enum
import logging
import os
import sys
from typing import Callable, Sequence

from gomake import tasks
from gomake.config import DEFAULT_OUTDIR, BuildOptions, MakeConfig, load_config
from gomake.errors import GoMakeError
from gomake.runner import CommandRunner, SubprocessRunner

logger = logging.getLogger(__name__)

USAGE = """
Usage:
  gomake <command> [<args>] [-- <test args>]

Commands:
  build           : Build executable
  clean           : Remove build artifacts
  coverage        : Run tests with coverage info
  coverage-report : Generate html coverage report
  format          : Align indentation and format code
  help            : Print usage
  lint            : Run linter
  test            : Run all tests

Args:
  -arch           : Target architecture for e.g amd64 etc
  -os             : Target operating system for e.g windows, linux, darwin etc
  -outdir         : Output directory (default: build)
  -config         : Configuration file (default: gomake.yaml when present)
  -v, --verbose   : Show executed commands
"""


class CommandError(GoMakeError):
    pass


class Command(enum.Enum):
    BUILD = "build"
    CLEAN = "clean"
    COVERAGE = "coverage"
    COVERAGE_REPORT = "coverage-report"
    FORMAT = "format"
    HELP = "help"
    LINT = "lint"
    TEST = "test"

    @classmethod
    def parse(cls, verb: str) -> Command:
        try:
            return cls(verb)
        except ValueError:
            raise CommandError(f"invalid command: {verb!r}") from None


# Verbs that forward arguments after `--` to the Go test runner.
PASSTHROUGH_COMMANDS = frozenset({Command.TEST, Command.COVERAGE, Command.COVERAGE_REPORT})


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str):  # type: ignore[override]
        raise CommandError(message)


def _build_parser() -> argparse.ArgumentParser:
    p = _ArgumentParser(prog="gomake", add_help=False, allow_abbrev=False)
    p.add_argument("command", nargs="?", default=None)
    p.add_argument("-os", dest="target_os", default="", help="Target operating system")
    p.add_argument("-arch", dest="target_arch", default="", help="Target architecture")
    p.add_argument("-outdir", dest="outdir", default=DEFAULT_OUTDIR, help="Output directory")
    p.add_argument("-config", dest="config", default=None, help="Configuration file")
    p.add_argument("-v", "--verbose", action="store_true", help="Show executed commands")
    p.add_argument("-h", "--help", dest="help", action="store_true", help="Print usage")
    return p


def _split_passthrough(argv: Sequence[str]) -> tuple[list[str], list[str]]:
    args = list(argv)
    if "--" in args:
        i = args.index("--")
        return args[:i], args[i + 1 :]
    return args, []


def _configure_logging(verbose: bool) -> None:
    level_name = os.environ.get("GOMAKE_LOG_LEVEL", "DEBUG" if verbose else "INFO")
    # getLevelName maps a known name to its number and echoes anything else back.
    level = logging.getLevelName(level_name.strip().upper())
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def run_command(
    command: Command,
    config: MakeConfig,
    options: BuildOptions,
    runner: CommandRunner,
    passthrough: Sequence[str] = (),
) -> None:
    if passthrough and command not in PASSTHROUGH_COMMANDS:
        raise CommandError(f"command {command.value!r} does not accept extra arguments")

    handlers: dict[Command, Callable[[], None]] = {
        Command.BUILD: lambda: tasks.build(config, options, runner),
        Command.CLEAN: lambda: tasks.clean(config, options),
        Command.COVERAGE: lambda: tasks.coverage(config, options, runner, passthrough),
        Command.COVERAGE_REPORT: lambda: tasks.coverage_report(config, options, runner, passthrough),
        Command.FORMAT: lambda: tasks.format_code(config, options, runner),
        Command.HELP: lambda: print(USAGE),
        Command.LINT: lambda: tasks.lint(config, options, runner),
        Command.TEST: lambda: tasks.run_tests(config, options, runner, passthrough),
    }
    logger.debug("command: %s", command.value)
    handlers[command]()


def main(argv: Sequence[str] | None = None, *, runner: CommandRunner | None = None) -> int:
    cli_args, passthrough = _split_passthrough(sys.argv[1:] if argv is None else argv)
    try:
        args = _build_parser().parse_args(cli_args)
        if args.help or args.command is None:
            print(USAGE)
            return 0
        command = Command.parse(args.command)
    except CommandError as e:
        print(f"error: {e}", file=sys.stderr)
        print(USAGE)
        return 1

    _configure_logging(bool(args.verbose))
    options = BuildOptions(target_os=args.target_os, target_arch=args.target_arch, outdir=args.outdir)
    try:
        config = load_config(args.config)
        run_command(command, config, options, runner or SubprocessRunner(), passthrough)
    except GoMakeError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
