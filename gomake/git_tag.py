"""
git_tag.py

Responsibility: Resolve the build version from the most recent release tag.

Release tags are path scoped, e.g. `tools/eventlist/1.4.0`; `git describe`
appends `-N-gSHA` when HEAD is past the tag.
"""

from __future__ import annotations

import logging

from gomake.errors import GoMakeError
from gomake.runner import CommandRunner
from gomake.version import UNKNOWN_VERSION, Version, parse_version

logger = logging.getLogger(__name__)


class TagResolutionError(GoMakeError):
    pass


class GitTagResolver:
    def __init__(self, runner: CommandRunner, tag_prefix: str) -> None:
        self._runner = runner
        self._tag_prefix = tag_prefix.strip("/")

    @property
    def pattern(self) -> str:
        return f"{self._tag_prefix}/*"

    def describe_command(self) -> list[str]:
        return ["git", "describe", "--tags", "--match", self.pattern]

    def resolve(self) -> Version:
        """
        Return the version named by the nearest matching tag.

        A failing `git describe` with no output means no release has been
        tagged yet: the default version is used and only a warning is logged.
        A failure that did print something is an error.
        """
        result = self._runner.execute(self.describe_command())

        if not result.stdout and not result.ok:
            logger.warning('no release tag found, setting version to default "%s"', UNKNOWN_VERSION)
            return parse_version(UNKNOWN_VERSION)
        if not result.ok:
            raise TagResolutionError(
                f"git describe failed with exit code {result.returncode}: {result.stdout.strip()}"
            )

        tag = result.stdout.strip()
        if not tag:
            raise TagResolutionError("no git release tag found")

        segments = tag.split("/")
        if len(segments) != 3:
            raise TagResolutionError(f"invalid release tag: {tag!r}")
        return parse_version(segments[2])
