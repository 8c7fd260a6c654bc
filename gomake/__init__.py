"""
gomake package

Build automation wrapper around the Go toolchain for the eventlist tool.

Key responsibilities are split across modules:
- `version.py`: parse and format `major.minor.patch[-commits-sha]` version strings
- `git_tag.py`: derive the build version from the most recent matching git tag
- `runner.py`: the narrow "execute a command, capture its output" capability
- `config.py`: explicit build configuration (no package-level mutable state)
- `renderer.py`: render toolchain command templates into argv lists
- `resource.py`: stamp `versioninfo.json` and write the Windows resource file
- `tasks.py`: one function per CLI verb
- `cli.py`: CLI entrypoint and dispatch
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"
