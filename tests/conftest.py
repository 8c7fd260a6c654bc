from __future__ import annotations

import pytest

from gomake.runner import CommandResult

from tests.fakes import FakeRunner


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def tagged_runner() -> FakeRunner:
    return FakeRunner({"git": CommandResult(stdout="tools/eventlist/1.4.0\n", stderr="", returncode=0)})
