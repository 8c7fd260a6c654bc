from __future__ import annotations

import sys

import pytest

from gomake.runner import CommandFailedError, CommandResult, SubprocessRunner

from tests.fakes import FakeRunner


def test_run_echoes_output_after_completion(capsys: pytest.CaptureFixture[str]) -> None:
    runner = FakeRunner({"go": CommandResult(stdout="ok  pkg", stderr="note", returncode=0)})
    result = runner.run(["go", "test"])
    assert result.ok
    assert capsys.readouterr().out == "ok  pkg\nnote\n"


def test_run_raises_with_captured_output() -> None:
    runner = FakeRunner({"go": CommandResult(stdout="out", stderr="err", returncode=3)})
    with pytest.raises(CommandFailedError) as excinfo:
        runner.run(["go", "build"])
    assert excinfo.value.returncode == 3
    assert excinfo.value.output == "outerr"
    assert excinfo.value.command == ["go", "build"]


def test_subprocess_runner_captures_streams() -> None:
    result = SubprocessRunner().execute(
        [sys.executable, "-c", "import sys; print('hi'); print('oops', file=sys.stderr); sys.exit(4)"]
    )
    assert result.stdout.strip() == "hi"
    assert result.stderr.strip() == "oops"
    assert result.returncode == 4


def test_subprocess_runner_layers_env() -> None:
    result = SubprocessRunner().execute(
        [sys.executable, "-c", "import os; print(os.environ['GOOS'])"],
        env={"GOOS": "plan9"},
    )
    assert result.stdout.strip() == "plan9"


def test_subprocess_runner_missing_executable() -> None:
    result = SubprocessRunner().execute(["definitely-not-a-real-tool-xyz"])
    assert result.stdout == ""
    assert result.returncode == 127


def test_subprocess_runner_replaces_undecodable_output() -> None:
    result = SubprocessRunner().execute(
        [sys.executable, "-c", "import sys; sys.stdout.buffer.write(b'\\xff\\xfe bad')"]
    )
    assert result.ok
    assert result.stdout.endswith(" bad")
    assert "\ufffd" in result.stdout
