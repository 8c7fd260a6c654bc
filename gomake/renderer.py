"""
renderer.py

Responsibility: Render toolchain command templates into argv lists.

Rules:
- Templates are Jinja2 strings rendered with StrictUndefined, so a typo in a
  configured template fails loudly instead of producing an empty argument.
- The rendered line is split with POSIX shell rules (`shlex.split`); no shell
  is involved when the command runs.
- A `quote` filter (shlex.quote) is available for paths, and `go_quote`
  for arguments nested inside Go flag lists.

This module intentionally does NOT know about git, versions, or CLI parsing.
"""

from __future__ import annotations

import shlex
from typing import Any

from jinja2 import Environment, StrictUndefined, TemplateError

from gomake.errors import GoMakeError


class RenderError(GoMakeError):
    pass


def go_quote(arg: str) -> str:
    """
    Quote one argument for a Go flag list such as `-ldflags`.

    Go splits these on spaces and honours single or double quotes, with no
    escape character, so an argument holding both quote kinds cannot be passed.
    """
    if not any(c.isspace() or c in "\"'" for c in arg):
        return arg
    if '"' not in arg:
        return f'"{arg}"'
    if "'" not in arg:
        return f"'{arg}'"
    raise RenderError(f"Argument cannot be quoted for a Go flag list: {arg!r}")


def _environment() -> Environment:
    env = Environment(
        autoescape=False,
        undefined=StrictUndefined,
        keep_trailing_newline=False,
    )
    env.filters["quote"] = shlex.quote
    env.filters["go_quote"] = go_quote
    return env


_ENV = _environment()


def render_text(template: str, context: dict[str, Any]) -> str:
    try:
        return _ENV.from_string(template).render(**context)
    except TemplateError as e:
        raise RenderError(f"Failed rendering template {template!r}: {e}") from e


def render_command(template: str, context: dict[str, Any]) -> list[str]:
    """
    Render `template` with `context` and split it into an argv list.
    """
    line = render_text(template, context)
    try:
        argv = shlex.split(line)
    except ValueError as e:
        raise RenderError(f"Rendered command is not a valid command line: {line!r}") from e
    if not argv:
        raise RenderError(f"Template rendered to an empty command: {template!r}")
    return argv
