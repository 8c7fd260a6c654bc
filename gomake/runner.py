"""
runner.py

Responsibility: Execute external commands and capture their output.

Everything that shells out (git, the Go toolchain, the resource writer) goes
through a `CommandRunner`, so version resolution and the tasks can be tested
against a scripted runner instead of real subprocesses.

Output is collected in full and echoed only after the child exits.
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path

from gomake.errors import GoMakeError

logger = logging.getLogger(__name__)


class CommandFailedError(GoMakeError):
    """Raised when a checked command exits non-zero."""

    def __init__(self, command: list[str], returncode: int, output: str = "") -> None:
        self.command = command
        self.returncode = returncode
        self.output = output
        super().__init__(f"command failed with exit code {returncode}: {shlex.join(command)}")


@dataclass(frozen=True)
class CommandResult:
    stdout: str
    stderr: str
    returncode: int

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandRunner:
    """Base runner: subclasses implement `execute`."""

    def execute(
        self,
        command: list[str],
        *,
        env: dict[str, str] | None = None,
        cwd: Path | None = None,
    ) -> CommandResult:
        raise NotImplementedError

    def run(
        self,
        command: list[str],
        *,
        env: dict[str, str] | None = None,
        cwd: Path | None = None,
    ) -> CommandResult:
        """
        Execute `command`, echo its captured output, and raise CommandFailedError
        on a non-zero exit status.

        `env` holds extra variables layered over the current environment.
        """
        logger.debug("running: %s", shlex.join(command))
        result = self.execute(command, env=env, cwd=cwd)
        if result.stdout:
            print(result.stdout)
        if result.stderr:
            print(result.stderr)
        if not result.ok:
            output = (result.stdout + result.stderr).strip()
            raise CommandFailedError(command, result.returncode, output)
        return result


class SubprocessRunner(CommandRunner):
    def execute(
        self,
        command: list[str],
        *,
        env: dict[str, str] | None = None,
        cwd: Path | None = None,
    ) -> CommandResult:
        full_env = None
        if env:
            full_env = os.environ.copy()
            full_env.update(env)
        try:
            proc = subprocess.run(
                command,
                cwd=str(cwd) if cwd is not None else None,
                env=full_env,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                encoding="utf-8",
                errors="replace",
                check=False,
            )
        except FileNotFoundError as e:
            # Report a missing executable like a shell would: no stdout, status 127.
            return CommandResult(stdout="", stderr=f"{command[0]}: {e.strerror}", returncode=127)
        return CommandResult(stdout=proc.stdout, stderr=proc.stderr, returncode=proc.returncode)
