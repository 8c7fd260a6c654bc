"""
version.py

Responsibility: Parse and render the build version derived from a git tag.

Two string forms are recognised:
- release form: `X.Y.Z` (the build sits exactly on a tag)
- development form: `X.Y.Z-N-SHA` (the shape `git describe` uses when the
  build is N commits past the tag), rendered back as `X.Y.Z-devN+SHA`
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from gomake.errors import GoMakeError

UNKNOWN_VERSION = "0.0.0"

_INT_RE = re.compile(r"[+-]?[0-9]+")


class VersionFormatError(GoMakeError):
    pass


@dataclass(frozen=True)
class Version:
    """A parsed build version.

    `commits_since_tag` and `commit_sha` are either both unset (0 and "")
    or both set; anything in between is rejected.
    """

    major: int
    minor: int
    patch: int
    commits_since_tag: int = 0
    commit_sha: str = ""

    def __post_init__(self) -> None:
        for name in ("major", "minor", "patch", "commits_since_tag"):
            if getattr(self, name) < 0:
                raise VersionFormatError(f"invalid version: {name} must be non-negative")
        if (self.commits_since_tag == 0) != (self.commit_sha == ""):
            raise VersionFormatError(
                "invalid version: commit count and commit sha must both be set or both be empty"
            )

    @property
    def is_release(self) -> bool:
        return self.commits_since_tag == 0 and self.commit_sha == ""

    def __str__(self) -> str:
        return format_version(self)


def _parse_int(token: str, field_name: str) -> int:
    try:
        value = int(token, 10)
    except ValueError as e:
        raise VersionFormatError(f"invalid version string: bad {field_name} {token!r}") from e
    # int() also takes padding, underscores and non-ASCII digits; tags may not.
    if not _INT_RE.fullmatch(token):
        raise VersionFormatError(f"invalid version string: bad {field_name} {token!r}")
    if value < 0:
        raise VersionFormatError(f"invalid version string: {field_name} must be non-negative")
    return value


def parse_version(raw: str) -> Version:
    """
    Parse `X.Y.Z` or `X.Y.Z-N-SHA` into a `Version`.

    Raises VersionFormatError on a wrong token count, a non-numeric component,
    or a development suffix that leaves the commit fields half populated.
    """
    text = raw.strip()
    tokens = text.split("-")
    if len(tokens) not in (1, 3):
        raise VersionFormatError(f"invalid version string: {raw!r}")

    parts = tokens[0].split(".")
    if len(parts) != 3:
        raise VersionFormatError(f"invalid version string: {raw!r}")

    major = _parse_int(parts[0], "major")
    minor = _parse_int(parts[1], "minor")
    patch = _parse_int(parts[2], "patch")

    if len(tokens) == 1:
        return Version(major, minor, patch)

    commits = _parse_int(tokens[1], "commit count")
    return Version(major, minor, patch, commits_since_tag=commits, commit_sha=tokens[2])


def format_version(version: Version) -> str:
    base = f"{version.major}.{version.minor}.{version.patch}"
    if version.commit_sha == "" and version.commits_since_tag == 0:
        return base
    return f"{base}-dev{version.commits_since_tag}+{version.commit_sha}"
